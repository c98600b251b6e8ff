# tender_system/services/tenders_service.py
from __future__ import annotations

import logging
import uuid
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from tender_system.core.errors import ForbiddenError
from tender_system.core.pagination import Pagination
from tender_system.models.employee import Employee, Organization
from tender_system.models.enums import TenderServiceType, TenderStatus
from tender_system.models.tender import Tender, TenderVersion
from tender_system.policies.access_policy import require_tender_owner
from tender_system.services.identity_service import IdentityService
from tender_system.services.version_store import TenderStore

logger = logging.getLogger(__name__)


class TenderService:
    """
    Tender use cases. Every call resolves the actor by username, loads the
    tender, checks organization ownership, then delegates to TenderStore.
    """

    def __init__(
        self,
        identity: IdentityService | None = None,
        tenders: TenderStore | None = None,
    ):
        self.identity = identity or IdentityService()
        self.tenders = tenders or TenderStore()

    def _authorize_owner(
        self, db: Session, tender_id: uuid.UUID, username: str
    ) -> Tuple[Employee, Organization, Tender]:
        employee = self.identity.get_employee_by_username(db, username)
        organization = self.identity.get_organization_for_user(db, employee.id)
        tender = self.tenders.get_by_id(db, tender_id)
        require_tender_owner(tender, organization)
        return employee, organization, tender

    # ---------------------------
    # READS
    # ---------------------------

    def get_all(
        self,
        db: Session,
        *,
        pagination: Optional[Pagination] = None,
        service_types: Iterable[TenderServiceType] = (),
    ) -> List[Tender]:
        return self.tenders.get_all(db, pagination or Pagination(), service_types)

    def get_my(
        self, db: Session, *, username: str, pagination: Optional[Pagination] = None
    ) -> List[Tender]:
        """
        All tenders of the organization the user is responsible for.
        """
        employee = self.identity.get_employee_by_username(db, username)
        organization = self.identity.get_organization_for_user(db, employee.id)
        return self.tenders.get_by_organization(db, organization.id, pagination or Pagination())

    def get_status(self, db: Session, *, tender_id: uuid.UUID, username: str) -> TenderStatus:
        _, _, tender = self._authorize_owner(db, tender_id, username)
        return TenderStatus.stored(tender.status)

    def get_versions(
        self,
        db: Session,
        *,
        tender_id: uuid.UUID,
        username: str,
        pagination: Optional[Pagination] = None,
    ) -> List[TenderVersion]:
        self._authorize_owner(db, tender_id, username)
        return self.tenders.get_versions(db, tender_id, pagination or Pagination())

    # ---------------------------
    # MUTATIONS
    # ---------------------------

    def create(
        self,
        db: Session,
        *,
        name: str,
        description: str,
        service_type: TenderServiceType,
        organization_id: uuid.UUID,
        creator_username: str,
    ) -> Tender:
        """
        The creator must be responsible for the organization the tender is
        published under. New tenders start in `created`, version 1.
        """
        creator = self.identity.get_employee_by_username(db, creator_username)
        organization = self.identity.get_organization(db, organization_id)
        membership = self.identity.find_organization_for_user(db, creator.id)
        if membership is None or membership.id != organization.id:
            raise ForbiddenError(
                f"Employee '{creator_username}' is not responsible for organization {organization_id}."
            )

        tender = self.tenders.create(
            db,
            Tender(
                organization_id=organization.id,
                status=TenderStatus.created.value,
            ),
            TenderVersion(
                name=name,
                description=description,
                service_type=service_type.value,
            ),
        )
        logger.info(
            "tender opened",
            extra={"tender_id": str(tender.id), "organization_id": str(organization.id)},
        )
        return tender

    def set_status(
        self, db: Session, *, tender_id: uuid.UUID, username: str, status: TenderStatus
    ) -> Tender:
        self._authorize_owner(db, tender_id, username)
        return self.tenders.set_status(db, tender_id, status.value)

    def update(
        self,
        db: Session,
        *,
        tender_id: uuid.UUID,
        username: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
        service_type: Optional[TenderServiceType] = None,
    ) -> Tender:
        """
        Appends a new version: absent fields keep the current content.
        The new number is latest-written + 1, not current + 1.
        """
        _, _, tender = self._authorize_owner(db, tender_id, username)
        latest = self.tenders.get_latest_version_number(db, tender_id)

        content = TenderVersion(
            name=name if name is not None else tender.name,
            description=description if description is not None else tender.description,
            service_type=(
                service_type.value if service_type is not None else tender.service_type
            ),
        )
        return self.tenders.append_version(db, tender_id, content, latest + 1)

    def rollback(
        self, db: Session, *, tender_id: uuid.UUID, username: str, version: int
    ) -> Tender:
        self._authorize_owner(db, tender_id, username)
        return self.tenders.rollback(db, tender_id, version)
