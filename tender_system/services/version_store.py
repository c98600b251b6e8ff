# tender_system/services/version_store.py
from __future__ import annotations

import logging
import uuid
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import desc, or_, and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tender_system.core.errors import AlreadyExistsError, NotFoundError
from tender_system.core.pagination import Pagination
from tender_system.db.session import atomic
from tender_system.models.bid import Bid, BidVersion
from tender_system.models.enums import BidStatus
from tender_system.models.tender import Tender, TenderVersion

logger = logging.getLogger(__name__)


class VersionStore:
    """
    Append-only content history behind a stable identity row.

    Each entity kind is an identity table plus a version table. The identity
    row carries the mutable lifecycle fields (status, owner) and a pointer to
    exactly one of its version rows. Content never changes in place:
    - append_version inserts a new row and repoints
    - rollback repoints to an existing row and inserts nothing

    Version numbers are chosen by the caller (latest + 1); the unique
    (entity, version) constraint rejects duplicates.
    """

    identity_model = None
    version_model = None
    parent_key: str = ""
    label: str = "entity"

    # ---------------------------
    # READS
    # ---------------------------

    def get_by_id(self, db: Session, entity_id: uuid.UUID):
        entity = db.execute(
            select(self.identity_model).where(self.identity_model.id == entity_id)
        ).scalar_one_or_none()
        if not entity:
            raise NotFoundError(f"{self.label.capitalize()} {entity_id} not found.")
        return entity

    def get_latest_version_number(self, db: Session, entity_id: uuid.UUID) -> int:
        """
        Version number of the most recently written row, which is not
        necessarily the current one after a rollback.
        """
        parent = getattr(self.version_model, self.parent_key)
        latest = db.execute(
            select(self.version_model.version)
            .where(parent == entity_id)
            .order_by(desc(self.version_model.created_at), desc(self.version_model.version))
            .limit(1)
        ).scalar_one_or_none()
        if latest is None:
            raise NotFoundError(f"{self.label.capitalize()} {entity_id} has no versions.")
        return latest

    def get_specific_version(self, db: Session, entity_id: uuid.UUID, version: int):
        parent = getattr(self.version_model, self.parent_key)
        row = db.execute(
            select(self.version_model).where(
                parent == entity_id,
                self.version_model.version == version,
            )
        ).scalar_one_or_none()
        if not row:
            raise NotFoundError(f"{self.label.capitalize()} {entity_id} has no version {version}.")
        return row

    def get_versions(
        self,
        db: Session,
        entity_id: uuid.UUID,
        pagination: Optional[Pagination] = None,
    ) -> List:
        self.get_by_id(db, entity_id)
        parent = getattr(self.version_model, self.parent_key)
        stmt = (
            select(self.version_model)
            .where(parent == entity_id)
            .order_by(desc(self.version_model.version))
        )
        return list(db.execute(_paginate(stmt, pagination)).scalars().all())

    # ---------------------------
    # MUTATIONS
    # ---------------------------

    def create(self, db: Session, entity, content):
        """
        Writes the identity row and version 1 together or not at all.
        """
        entity.id = entity.id or uuid.uuid4()
        content.id = content.id or uuid.uuid4()
        content.version = 1
        setattr(content, self.parent_key, entity.id)
        entity.current_version_id = content.id

        with atomic(db):
            db.add(entity)
            db.flush()
            self._insert_version(db, content)

        logger.info(
            f"{self.label} created",
            extra={"entity_id": str(entity.id), "version": 1},
        )
        return self.get_by_id(db, entity.id)

    def append_version(self, db: Session, entity_id: uuid.UUID, content, version: int):
        entity = self.get_by_id(db, entity_id)

        content.id = content.id or uuid.uuid4()
        content.version = version
        setattr(content, self.parent_key, entity.id)

        with atomic(db):
            self._insert_version(db, content)
            entity.current_version_id = content.id

        logger.info(
            f"{self.label} version appended",
            extra={"entity_id": str(entity_id), "version": version},
        )
        return self.get_by_id(db, entity_id)

    def rollback(self, db: Session, entity_id: uuid.UUID, version: int):
        entity = self.get_by_id(db, entity_id)
        target = self.get_specific_version(db, entity_id, version)

        with atomic(db):
            entity.current_version_id = target.id

        logger.info(
            f"{self.label} rolled back",
            extra={"entity_id": str(entity_id), "version": version},
        )
        return self.get_by_id(db, entity_id)

    def set_status(self, db: Session, entity_id: uuid.UUID, status: str):
        entity = self.get_by_id(db, entity_id)
        with atomic(db):
            entity.status = _token(status)
        logger.info(
            f"{self.label} status changed",
            extra={"entity_id": str(entity_id), "status": _token(status)},
        )
        return self.get_by_id(db, entity_id)

    def _insert_version(self, db: Session, content) -> None:
        db.add(content)
        try:
            db.flush()
        except IntegrityError as exc:
            raise AlreadyExistsError(
                f"{self.label.capitalize()} version {content.version} already exists."
            ) from exc


def _paginate(stmt, pagination: Optional[Pagination]):
    if pagination is None:
        return stmt
    return stmt.limit(pagination.limit).offset(pagination.offset)


def _token(value) -> str:
    return getattr(value, "value", value)


class TenderStore(VersionStore):
    identity_model = Tender
    version_model = TenderVersion
    parent_key = "tender_id"
    label = "tender"

    def get_all(
        self,
        db: Session,
        pagination: Optional[Pagination] = None,
        service_types: Iterable[str] = (),
    ) -> List[Tender]:
        """
        Tenders in every status, newest first. An empty service_types
        means no filter.
        """
        stmt = select(Tender).join(TenderVersion, TenderVersion.id == Tender.current_version_id)
        service_types = [_token(s) for s in service_types]
        if service_types:
            stmt = stmt.where(TenderVersion.service_type.in_(service_types))
        stmt = stmt.order_by(desc(Tender.created_at))
        return list(db.execute(_paginate(stmt, pagination)).scalars().all())

    def get_by_organization(
        self,
        db: Session,
        organization_id: uuid.UUID,
        pagination: Optional[Pagination] = None,
    ) -> List[Tender]:
        stmt = (
            select(Tender)
            .where(Tender.organization_id == organization_id)
            .order_by(desc(Tender.created_at))
        )
        return list(db.execute(_paginate(stmt, pagination)).scalars().all())


class BidStore(VersionStore):
    identity_model = Bid
    version_model = BidVersion
    parent_key = "bid_id"
    label = "bid"

    def get_all(self, db: Session, pagination: Optional[Pagination] = None) -> List[Bid]:
        stmt = (
            select(Bid)
            .where(Bid.status == BidStatus.published.value)
            .order_by(desc(Bid.created_at))
        )
        return list(db.execute(_paginate(stmt, pagination)).scalars().all())

    def get_by_authors(
        self,
        db: Session,
        authors: Sequence[Tuple[str, uuid.UUID]],
        pagination: Optional[Pagination] = None,
        tender_id: Optional[uuid.UUID] = None,
    ) -> List[Bid]:
        """
        Bids whose (author_type, author_id) matches any of `authors`,
        optionally narrowed to one tender.
        """
        if not authors:
            return []
        stmt = select(Bid).where(
            or_(*[and_(Bid.author_type == t, Bid.author_id == a) for t, a in authors])
        )
        if tender_id is not None:
            stmt = stmt.where(Bid.tender_id == tender_id)
        stmt = stmt.order_by(desc(Bid.created_at))
        return list(db.execute(_paginate(stmt, pagination)).scalars().all())

    def get_by_tender(
        self,
        db: Session,
        tender_id: uuid.UUID,
        pagination: Optional[Pagination] = None,
        statuses: Optional[Iterable[str]] = None,
    ) -> List[Bid]:
        stmt = select(Bid).where(Bid.tender_id == tender_id)
        if statuses is not None:
            stmt = stmt.where(Bid.status.in_([_token(s) for s in statuses]))
        stmt = stmt.order_by(desc(Bid.created_at))
        return list(db.execute(_paginate(stmt, pagination)).scalars().all())
