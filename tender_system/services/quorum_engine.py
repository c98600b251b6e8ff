# tender_system/services/quorum_engine.py
from __future__ import annotations

import logging
import uuid

from sqlalchemy.orm import Session

from tender_system.core.errors import InvalidArgumentError
from tender_system.db.session import atomic
from tender_system.models.bid import Bid
from tender_system.models.employee import Employee, Organization
from tender_system.models.enums import BidDecisionType, BidStatus, TenderStatus
from tender_system.models.tender import Tender
from tender_system.policies.access_policy import require_tender_owner
from tender_system.services.identity_service import IdentityService
from tender_system.services.review_store import BidDecisionStore
from tender_system.services.version_store import BidStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_QUORUM = 3


class QuorumDecisionEngine:
    """
    Drives a published bid to a terminal state from reviewer decisions.

    Transitions (bid):
    - published → rejected   on any single rejecting decision (veto)
    - published → approved   once decision rows reach the quorum; the parent
                             tender is closed in the same transaction

    quorum = min(max_quorum, employees in the tender-owning organization)
    """

    def __init__(
        self,
        max_quorum: int = DEFAULT_MAX_QUORUM,
        identity: IdentityService | None = None,
        bids: BidStore | None = None,
        decisions: BidDecisionStore | None = None,
    ):
        if max_quorum < 1:
            raise ValueError("max_quorum must be at least 1.")
        self.max_quorum = max_quorum
        self.identity = identity or IdentityService()
        self.bids = bids or BidStore()
        self.decisions = decisions or BidDecisionStore()

    def quorum_for(self, db: Session, organization_id: uuid.UUID) -> int:
        employees = self.identity.get_employees_in_organization(db, organization_id)
        return min(self.max_quorum, len(employees))

    # ---------------------------
    # Invariants
    # ---------------------------
    @staticmethod
    def validate(tender: Tender, bid: Bid, organization: Organization) -> None:
        if tender.status != TenderStatus.published.value:
            raise InvalidArgumentError(f"Tender {tender.id} is not published.")
        if bid.status != BidStatus.published.value:
            raise InvalidArgumentError(f"Bid {bid.id} is not published.")
        require_tender_owner(tender, organization)

    # ---------------------------
    # Transition
    # ---------------------------
    def submit(
        self,
        db: Session,
        *,
        tender: Tender,
        bid: Bid,
        employee: Employee,
        organization: Organization,
        decision: BidDecisionType,
    ) -> Bid:
        self.validate(tender, bid, organization)

        with atomic(db):
            self.decisions.add(db, bid_id=bid.id, employee_id=employee.id, decision=decision)

            if decision == BidDecisionType.rejected:
                bid.status = BidStatus.rejected.value
            elif decision == BidDecisionType.approved:
                quorum = self.quorum_for(db, organization.id)
                votes = self.decisions.count_for_bid(db, bid.id)
                if votes >= quorum:
                    bid.status = BidStatus.approved.value
                    tender.status = TenderStatus.closed.value
            else:
                raise InvalidArgumentError(f"Unsupported decision {decision!r}.")

        logger.info(
            "bid decision recorded",
            extra={
                "bid_id": str(bid.id),
                "tender_id": str(tender.id),
                "employee_id": str(employee.id),
                "decision": decision.value,
            },
        )
        return self.bids.get_by_id(db, bid.id)
