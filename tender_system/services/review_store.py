# tender_system/services/review_store.py
from __future__ import annotations

import uuid
from typing import List, Optional, Sequence, Tuple

from sqlalchemy import and_, desc, func, or_, select
from sqlalchemy.orm import Session

from tender_system.core.pagination import Pagination
from tender_system.models.bid import Bid
from tender_system.models.bid_review import BidDecision, BidFeedback


class BidDecisionStore:
    """
    Decision log. Rows are only ever added; the caller owns the transaction.
    """

    def add(
        self,
        db: Session,
        *,
        bid_id: uuid.UUID,
        employee_id: uuid.UUID,
        decision: str,
    ) -> BidDecision:
        row = BidDecision(
            id=uuid.uuid4(),
            bid_id=bid_id,
            employee_id=employee_id,
            decision=getattr(decision, "value", decision),
        )
        db.add(row)
        db.flush()
        return row

    def count_for_bid(self, db: Session, bid_id: uuid.UUID) -> int:
        # every row counts, whatever its decision value
        return db.execute(
            select(func.count(BidDecision.id)).where(BidDecision.bid_id == bid_id)
        ).scalar_one()


class BidFeedbackStore:
    def add(
        self,
        db: Session,
        *,
        bid_id: uuid.UUID,
        author_id: uuid.UUID,
        description: str,
    ) -> BidFeedback:
        row = BidFeedback(
            id=uuid.uuid4(),
            bid_id=bid_id,
            author_id=author_id,
            description=description,
        )
        db.add(row)
        db.flush()
        return row

    def get_for_bid_authors(
        self,
        db: Session,
        authors: Sequence[Tuple[str, uuid.UUID]],
        pagination: Optional[Pagination] = None,
    ) -> List[BidFeedback]:
        """
        Feedback left on any bid whose (author_type, author_id) is in
        `authors`, newest first.
        """
        if not authors:
            return []
        stmt = (
            select(BidFeedback)
            .join(Bid, Bid.id == BidFeedback.bid_id)
            .where(or_(*[and_(Bid.author_type == t, Bid.author_id == a) for t, a in authors]))
            .order_by(desc(BidFeedback.created_at))
        )
        if pagination is not None:
            stmt = stmt.limit(pagination.limit).offset(pagination.offset)
        return list(db.execute(stmt).scalars().all())
