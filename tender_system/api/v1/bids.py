# tender_system/api/v1/bids.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tender_system.core.deps import get_bid_service, get_pagination, parse_uuid
from tender_system.core.pagination import Pagination
from tender_system.db.session import get_db
from tender_system.models.bid import Bid
from tender_system.models.bid_review import BidFeedback
from tender_system.models.enums import BidAuthorType, BidDecisionType, BidStatus
from tender_system.schemas.bids import (
    BidCreateRequest,
    BidEditRequest,
    BidFeedbackResponse,
    BidResponse,
)
from tender_system.services.bids_service import BidService

router = APIRouter(prefix="/bids", tags=["bids"])

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────

def _bid_to_schema(b: Bid) -> BidResponse:
    return BidResponse(
        id=str(b.id),
        name=b.name,
        status=b.status,
        authorType=b.author_type,
        authorID=str(b.author_id),
        version=b.version,
        createdAt=b.created_at.strftime(TIMESTAMP_FORMAT),
    )


def _feedback_to_schema(f: BidFeedback) -> BidFeedbackResponse:
    return BidFeedbackResponse(
        id=str(f.id),
        description=f.description,
        createdAt=f.created_at.strftime(TIMESTAMP_FORMAT),
    )


# ─────────────────────────────────────────────────────────────
# CREATE / LIST
# ─────────────────────────────────────────────────────────────

@router.post("/new", response_model=BidResponse, status_code=201)
async def create_bid(
    payload: BidCreateRequest,
    db: Session = Depends(get_db),
    svc: BidService = Depends(get_bid_service),
):
    bid = svc.create(
        db,
        name=payload.name,
        description=payload.description,
        tender_id=parse_uuid(payload.tenderID, "tenderID"),
        author_type=BidAuthorType.parse(payload.authorType),
        author_id=parse_uuid(payload.authorID, "authorID"),
    )
    return _bid_to_schema(bid)


@router.get("/my", response_model=List[BidResponse])
async def my_bids(
    username: str = Query(...),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    svc: BidService = Depends(get_bid_service),
):
    bids = svc.get_my(db, username=username, pagination=pagination)
    return [_bid_to_schema(b) for b in bids]


@router.get("/{tender_id}/list", response_model=List[BidResponse])
async def bids_for_tender(
    tender_id: str,
    username: str = Query(...),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    svc: BidService = Depends(get_bid_service),
):
    bids = svc.get_by_tender(
        db,
        tender_id=parse_uuid(tender_id, "tenderId"),
        username=username,
        pagination=pagination,
    )
    return [_bid_to_schema(b) for b in bids]


# ─────────────────────────────────────────────────────────────
# STATUS
# ─────────────────────────────────────────────────────────────

@router.get("/{bid_id}/status", response_model=str)
async def get_bid_status(
    bid_id: str,
    username: str = Query(...),
    db: Session = Depends(get_db),
    svc: BidService = Depends(get_bid_service),
):
    status = svc.get_status(db, bid_id=parse_uuid(bid_id, "bidId"), username=username)
    return status.value


@router.put("/{bid_id}/status", response_model=BidResponse)
async def set_bid_status(
    bid_id: str,
    status: str = Query(...),
    username: str = Query(...),
    db: Session = Depends(get_db),
    svc: BidService = Depends(get_bid_service),
):
    bid = svc.set_status(
        db,
        bid_id=parse_uuid(bid_id, "bidId"),
        username=username,
        status=BidStatus.parse(status.lower()),
    )
    return _bid_to_schema(bid)


# ─────────────────────────────────────────────────────────────
# VERSIONING
# ─────────────────────────────────────────────────────────────

@router.patch("/{bid_id}/edit", response_model=BidResponse)
async def edit_bid(
    bid_id: str,
    payload: BidEditRequest,
    username: str = Query(...),
    db: Session = Depends(get_db),
    svc: BidService = Depends(get_bid_service),
):
    bid = svc.update(
        db,
        bid_id=parse_uuid(bid_id, "bidId"),
        username=username,
        name=payload.name,
        description=payload.description,
    )
    return _bid_to_schema(bid)


@router.put("/{bid_id}/rollback/{version}", response_model=BidResponse)
async def rollback_bid(
    bid_id: str,
    version: int,
    username: str = Query(...),
    db: Session = Depends(get_db),
    svc: BidService = Depends(get_bid_service),
):
    bid = svc.rollback(db, bid_id=parse_uuid(bid_id, "bidId"), username=username, version=version)
    return _bid_to_schema(bid)


# ─────────────────────────────────────────────────────────────
# REVIEW
# ─────────────────────────────────────────────────────────────

@router.put("/{bid_id}/submit_decision", response_model=BidResponse)
async def submit_decision(
    bid_id: str,
    decision: str = Query(...),
    username: str = Query(...),
    db: Session = Depends(get_db),
    svc: BidService = Depends(get_bid_service),
):
    bid = svc.submit_decision(
        db,
        bid_id=parse_uuid(bid_id, "bidId"),
        username=username,
        decision=BidDecisionType.parse(decision.lower()),
    )
    return _bid_to_schema(bid)


@router.put("/{bid_id}/feedback", response_model=BidResponse)
async def leave_feedback(
    bid_id: str,
    feedback: str = Query(..., alias="bidFeedback", min_length=1, max_length=1000),
    username: str = Query(...),
    db: Session = Depends(get_db),
    svc: BidService = Depends(get_bid_service),
):
    bid = svc.leave_feedback(
        db,
        bid_id=parse_uuid(bid_id, "bidId"),
        username=username,
        feedback=feedback,
    )
    return _bid_to_schema(bid)


@router.get("/{tender_id}/reviews", response_model=List[BidFeedbackResponse])
async def author_reviews(
    tender_id: str,
    author_username: str = Query(..., alias="authorUsername"),
    requester_username: str = Query(..., alias="requesterUsername"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
    svc: BidService = Depends(get_bid_service),
):
    reviews = svc.get_authors_feedback(
        db,
        tender_id=parse_uuid(tender_id, "tenderId"),
        requester_username=requester_username,
        author_username=author_username,
        pagination=pagination,
    )
    return [_feedback_to_schema(f) for f in reviews]
