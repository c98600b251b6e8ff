# tender_system/services/bids_service.py
from __future__ import annotations

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from tender_system.core.errors import InvalidArgumentError, NotFoundError
from tender_system.core.pagination import Pagination
from tender_system.db.session import atomic
from tender_system.models.bid import Bid, BidVersion
from tender_system.models.bid_review import BidFeedback
from tender_system.models.employee import Employee, Organization
from tender_system.models.enums import (
    BID_DECISION_STATUSES,
    BidAuthorType,
    BidDecisionType,
    BidStatus,
    TenderStatus,
)
from tender_system.policies.access_policy import (
    require_bid_author,
    require_bid_read_access,
    require_tender_owner,
)
from tender_system.services.identity_service import IdentityService
from tender_system.services.quorum_engine import DEFAULT_MAX_QUORUM, QuorumDecisionEngine
from tender_system.services.review_store import BidFeedbackStore
from tender_system.services.version_store import BidStore, TenderStore

logger = logging.getLogger(__name__)


class BidService:
    """
    Bid use cases: resolve actor → load bid → authorize → delegate.

    Status moves made by the author are limited to created / published /
    canceled. approved and rejected come only from QuorumDecisionEngine.
    """

    def __init__(
        self,
        max_quorum: int = DEFAULT_MAX_QUORUM,
        identity: IdentityService | None = None,
        tenders: TenderStore | None = None,
        bids: BidStore | None = None,
        feedback: BidFeedbackStore | None = None,
    ):
        self.identity = identity or IdentityService()
        self.tenders = tenders or TenderStore()
        self.bids = bids or BidStore()
        self.feedback = feedback or BidFeedbackStore()
        self.engine = QuorumDecisionEngine(
            max_quorum,
            identity=self.identity,
            bids=self.bids,
        )

    # ---------------------------
    # Helpers
    # ---------------------------

    def _actor_organization(self, db: Session, bid: Bid, employee: Employee) -> Optional[Organization]:
        # only organization-authored bids need the actor's organization
        if bid.author_type == BidAuthorType.organization.value:
            return self.identity.get_organization_for_user(db, employee.id)
        return None

    def _load_as_author(self, db: Session, bid_id: uuid.UUID, username: str) -> Tuple[Employee, Bid]:
        employee = self.identity.get_employee_by_username(db, username)
        bid = self.bids.get_by_id(db, bid_id)
        require_bid_author(bid, employee, self._actor_organization(db, bid, employee))
        return employee, bid

    def _author_keys(self, db: Session, employee: Employee) -> List[Tuple[str, uuid.UUID]]:
        """
        Every (author_type, author_id) pair the employee can write as:
        themself, and their organization when they have one.
        """
        keys = [(BidAuthorType.user.value, employee.id)]
        organization = self.identity.find_organization_for_user(db, employee.id)
        if organization is not None:
            keys.append((BidAuthorType.organization.value, organization.id))
        return keys

    # ---------------------------
    # READS
    # ---------------------------

    def get_my(
        self, db: Session, *, username: str, pagination: Optional[Pagination] = None
    ) -> List[Bid]:
        employee = self.identity.get_employee_by_username(db, username)
        return self.bids.get_by_authors(
            db, self._author_keys(db, employee), pagination or Pagination()
        )

    def get_by_tender(
        self,
        db: Session,
        *,
        tender_id: uuid.UUID,
        username: str,
        pagination: Optional[Pagination] = None,
    ) -> List[Bid]:
        """
        Published bids on a tender, visible to the tender's organization.
        """
        employee = self.identity.get_employee_by_username(db, username)
        organization = self.identity.get_organization_for_user(db, employee.id)
        tender = self.tenders.get_by_id(db, tender_id)
        require_tender_owner(tender, organization)
        return self.bids.get_by_tender(
            db,
            tender_id,
            pagination or Pagination(),
            statuses=[BidStatus.published],
        )

    def get_status(self, db: Session, *, bid_id: uuid.UUID, username: str) -> BidStatus:
        employee = self.identity.get_employee_by_username(db, username)
        bid = self.bids.get_by_id(db, bid_id)
        if bid.status != BidStatus.published.value:
            require_bid_read_access(bid, employee, self._actor_organization(db, bid, employee))
        return BidStatus.stored(bid.status)

    def get_authors_feedback(
        self,
        db: Session,
        *,
        tender_id: uuid.UUID,
        requester_username: str,
        author_username: str,
        pagination: Optional[Pagination] = None,
    ) -> List[BidFeedback]:
        """
        Review history of a bidder, for the organization that owns a tender
        the bidder competes on.

        - requester must own the tender (Forbidden)
        - author must have a bid on that tender, as themself or as their
          organization (NotFound)
        - returns feedback on all of the author's bids, newest first
        """
        requester = self.identity.get_employee_by_username(db, requester_username)
        requester_org = self.identity.get_organization_for_user(db, requester.id)
        tender = self.tenders.get_by_id(db, tender_id)
        require_tender_owner(tender, requester_org)

        author = self.identity.get_employee_by_username(db, author_username)
        keys = self._author_keys(db, author)
        if not self.bids.get_by_authors(db, keys, Pagination(limit=1), tender_id=tender_id):
            raise NotFoundError(f"Author '{author_username}' has no bids on tender {tender_id}.")

        return self.feedback.get_for_bid_authors(db, keys, pagination or Pagination())

    # ---------------------------
    # MUTATIONS
    # ---------------------------

    def create(
        self,
        db: Session,
        *,
        name: str,
        description: str,
        tender_id: uuid.UUID,
        author_type: BidAuthorType,
        author_id: uuid.UUID,
    ) -> Bid:
        tender = self.tenders.get_by_id(db, tender_id)
        if tender.status != TenderStatus.published.value:
            raise InvalidArgumentError(f"Tender {tender_id} is not published.")

        if author_type == BidAuthorType.user:
            self.identity.get_employee(db, author_id)
        elif author_type == BidAuthorType.organization:
            self.identity.get_organization(db, author_id)
        else:
            raise InvalidArgumentError(f"Unsupported author type {author_type!r}.")

        bid = self.bids.create(
            db,
            Bid(
                tender_id=tender.id,
                status=BidStatus.created.value,
                author_type=author_type.value,
                author_id=author_id,
            ),
            BidVersion(name=name, description=description),
        )
        logger.info(
            "bid placed",
            extra={"bid_id": str(bid.id), "tender_id": str(tender_id), "author_type": author_type.value},
        )
        return bid

    def set_status(
        self, db: Session, *, bid_id: uuid.UUID, username: str, status: BidStatus
    ) -> Bid:
        _, bid = self._load_as_author(db, bid_id, username)

        if status in BID_DECISION_STATUSES:
            raise InvalidArgumentError(f"Status '{status.value}' is set by reviewer decisions only.")
        if BidStatus.stored(bid.status) in BID_DECISION_STATUSES:
            raise InvalidArgumentError(f"Bid {bid_id} is already {bid.status}.")

        return self.bids.set_status(db, bid_id, status.value)

    def update(
        self,
        db: Session,
        *,
        bid_id: uuid.UUID,
        username: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Bid:
        _, bid = self._load_as_author(db, bid_id, username)
        latest = self.bids.get_latest_version_number(db, bid_id)

        content = BidVersion(
            name=name if name is not None else bid.name,
            description=description if description is not None else bid.description,
        )
        return self.bids.append_version(db, bid_id, content, latest + 1)

    def rollback(self, db: Session, *, bid_id: uuid.UUID, username: str, version: int) -> Bid:
        self._load_as_author(db, bid_id, username)
        return self.bids.rollback(db, bid_id, version)

    def submit_decision(
        self,
        db: Session,
        *,
        bid_id: uuid.UUID,
        username: str,
        decision: BidDecisionType,
    ) -> Bid:
        employee = self.identity.get_employee_by_username(db, username)
        organization = self.identity.get_organization_for_user(db, employee.id)
        bid = self.bids.get_by_id(db, bid_id)
        tender = self.tenders.get_by_id(db, bid.tender_id)

        return self.engine.submit(
            db,
            tender=tender,
            bid=bid,
            employee=employee,
            organization=organization,
            decision=decision,
        )

    def leave_feedback(
        self, db: Session, *, bid_id: uuid.UUID, username: str, feedback: str
    ) -> Bid:
        employee = self.identity.get_employee_by_username(db, username)
        organization = self.identity.get_organization_for_user(db, employee.id)
        bid = self.bids.get_by_id(db, bid_id)
        tender = self.tenders.get_by_id(db, bid.tender_id)
        require_tender_owner(tender, organization)

        with atomic(db):
            self.feedback.add(db, bid_id=bid.id, author_id=employee.id, description=feedback)

        logger.info(
            "bid feedback left",
            extra={"bid_id": str(bid_id), "employee_id": str(employee.id)},
        )
        return self.bids.get_by_id(db, bid_id)
