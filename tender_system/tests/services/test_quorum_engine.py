import pytest
from sqlalchemy import func, select

from tender_system.core.errors import ForbiddenError, InvalidArgumentError
from tender_system.models.bid_review import BidDecision
from tender_system.models.enums import BidDecisionType, BidStatus, TenderStatus
from tender_system.services.bids_service import BidService
from tender_system.services.identity_service import IdentityService
from tender_system.services.quorum_engine import QuorumDecisionEngine
from tender_system.services.review_store import BidDecisionStore
from tender_system.services.version_store import BidStore, TenderStore
from tender_system.tests.factories import (
    create_bid,
    create_employee,
    create_organization,
    create_tender,
)

REVIEWERS = ["r1", "r2", "r3", "r4", "r5"]


def setup_review(db, reviewers=REVIEWERS, tender_published=True):
    org, employees = create_organization(db, "Buyer", members=reviewers)
    tender = create_tender(db, org, employees[0], published=tender_published)
    bidder = create_employee(db, "bidder")
    return org, employees, tender, bidder


def decide(db, engine, org, tender_id, bid_id, employee, decision):
    return engine.submit(
        db,
        tender=TenderStore().get_by_id(db, tender_id),
        bid=BidStore().get_by_id(db, bid_id),
        employee=employee,
        organization=org,
        decision=decision,
    )


def decisions_recorded(db):
    return db.execute(select(func.count(BidDecision.id))).scalar_one()


def test_quorum_is_capped(db):
    org, _, _, _ = setup_review(db)
    small, _ = create_organization(db, "Small", members=["s1", "s2"])

    engine = QuorumDecisionEngine(max_quorum=3)

    assert engine.quorum_for(db, org.id) == 3
    assert engine.quorum_for(db, small.id) == 2


def test_approval_needs_quorum_then_closes_tender(db):
    org, employees, tender, bidder = setup_review(db)
    bid = create_bid(db, tender, bidder)
    engine = QuorumDecisionEngine(max_quorum=3)

    decide(db, engine, org, tender.id, bid.id, employees[0], BidDecisionType.approved)
    b = decide(db, engine, org, tender.id, bid.id, employees[1], BidDecisionType.approved)

    assert b.status == BidStatus.published.value
    assert TenderStore().get_by_id(db, tender.id).status == TenderStatus.published.value

    b = decide(db, engine, org, tender.id, bid.id, employees[2], BidDecisionType.approved)

    assert b.status == BidStatus.approved.value
    assert TenderStore().get_by_id(db, tender.id).status == TenderStatus.closed.value


def test_single_rejection_vetoes(db):
    org, employees, tender, bidder = setup_review(db)
    bid = create_bid(db, tender, bidder)
    engine = QuorumDecisionEngine(max_quorum=3)

    decide(db, engine, org, tender.id, bid.id, employees[0], BidDecisionType.approved)
    decide(db, engine, org, tender.id, bid.id, employees[1], BidDecisionType.approved)
    b = decide(db, engine, org, tender.id, bid.id, employees[2], BidDecisionType.rejected)

    assert b.status == BidStatus.rejected.value
    assert TenderStore().get_by_id(db, tender.id).status == TenderStatus.published.value


def test_decisions_are_not_deduplicated(db):
    org, employees, tender, bidder = setup_review(db)
    bid = create_bid(db, tender, bidder)
    engine = QuorumDecisionEngine(max_quorum=3)

    decide(db, engine, org, tender.id, bid.id, employees[0], BidDecisionType.approved)
    b = decide(db, engine, org, tender.id, bid.id, employees[0], BidDecisionType.approved)

    assert decisions_recorded(db) == 2
    assert b.status == BidStatus.published.value


def test_configured_quorum_of_one_approves_immediately(db):
    org, employees, tender, bidder = setup_review(db)
    bid = create_bid(db, tender, bidder)

    b = decide(db, QuorumDecisionEngine(max_quorum=1), org, tender.id, bid.id,
               employees[0], BidDecisionType.approved)

    assert b.status == BidStatus.approved.value


def test_unpublished_tender_is_rejected_before_recording(db):
    org, employees, tender, bidder = setup_review(db)
    bid = create_bid(db, tender, bidder)
    TenderStore().set_status(db, tender.id, TenderStatus.created)

    with pytest.raises(InvalidArgumentError):
        decide(db, QuorumDecisionEngine(), org, tender.id, bid.id, employees[0],
               BidDecisionType.approved)
    assert decisions_recorded(db) == 0


def test_unpublished_bid_is_rejected_before_recording(db):
    org, employees, tender, bidder = setup_review(db)
    bid = create_bid(db, tender, bidder, published=False)

    with pytest.raises(InvalidArgumentError):
        decide(db, QuorumDecisionEngine(), org, tender.id, bid.id, employees[0],
               BidDecisionType.rejected)
    assert decisions_recorded(db) == 0


def test_other_organization_cannot_decide(db):
    _, _, tender, bidder = setup_review(db)
    bid = create_bid(db, tender, bidder)
    other, (outsider,) = create_organization(db, "Other", members=["outsider"])

    with pytest.raises(ForbiddenError):
        decide(db, QuorumDecisionEngine(), other, tender.id, bid.id, outsider,
               BidDecisionType.approved)
    assert decisions_recorded(db) == 0


def test_bid_service_routes_decisions_through_engine(db):
    _, employees, tender, bidder = setup_review(db, reviewers=["r1", "r2"])
    bid = create_bid(db, tender, bidder)
    svc = BidService(max_quorum=3)

    svc.submit_decision(db, bid_id=bid.id, username="r1", decision=BidDecisionType.approved)
    b = svc.submit_decision(db, bid_id=bid.id, username="r2", decision=BidDecisionType.approved)

    assert b.status == BidStatus.approved.value
    assert len(IdentityService().get_employees_in_organization(db, tender.organization_id)) == 2


def test_failed_tally_rolls_back_recorded_decision(db, monkeypatch):
    org, employees, tender, bidder = setup_review(db)
    bid = create_bid(db, tender, bidder)

    def broken_count(self, db, bid_id):
        raise RuntimeError("tally failed")

    monkeypatch.setattr(BidDecisionStore, "count_for_bid", broken_count)

    with pytest.raises(RuntimeError):
        decide(db, QuorumDecisionEngine(max_quorum=1), org, tender.id, bid.id,
               employees[0], BidDecisionType.approved)

    assert decisions_recorded(db) == 0
    assert BidStore().get_by_id(db, bid.id).status == BidStatus.published.value
    assert TenderStore().get_by_id(db, tender.id).status == TenderStatus.published.value
