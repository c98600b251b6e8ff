import uuid
import pytest

from tender_system.core.errors import ForbiddenError, InternalError, InvalidArgumentError, NotFoundError
from tender_system.core.pagination import Pagination
from tender_system.models.enums import BidAuthorType, BidDecisionType, BidStatus
from tender_system.services.bids_service import BidService
from tender_system.services.version_store import BidStore
from tender_system.tests.factories import (
    create_bid,
    create_employee,
    create_organization,
    create_tender,
)


@pytest.fixture
def market(db):
    buyer, (owner, reviewer) = create_organization(db, "Buyer", members=["owner", "reviewer"])
    supplier, (rep,) = create_organization(db, "Supplier", members=["rep"])
    tender = create_tender(db, buyer, owner)
    return {
        "buyer": buyer,
        "owner": owner,
        "reviewer": reviewer,
        "supplier": supplier,
        "rep": rep,
        "tender": tender,
    }


# ---------------------------
# create
# ---------------------------

def test_create_starts_at_version_one(db, market):
    author = create_employee(db, "solo")
    bid = create_bid(db, market["tender"], author, published=False)

    assert bid.version == 1
    assert bid.status == BidStatus.created.value
    assert bid.author_type == BidAuthorType.user.value
    assert bid.author_id == author.id


def test_create_requires_published_tender(db, market):
    draft = create_tender(db, market["buyer"], market["owner"], published=False)
    with pytest.raises(InvalidArgumentError):
        create_bid(db, draft, create_employee(db, "solo"))


def test_create_requires_existing_author(db, market):
    svc = BidService()
    with pytest.raises(NotFoundError):
        svc.create(
            db,
            name="ghost",
            description="",
            tender_id=market["tender"].id,
            author_type=BidAuthorType.organization,
            author_id=uuid.uuid4(),
        )


# ---------------------------
# authorization boundary
# ---------------------------

def test_update_by_other_user_is_forbidden(db, market):
    author = create_employee(db, "solo")
    intruder = create_employee(db, "intruder")
    bid = create_bid(db, market["tender"], author)

    with pytest.raises(ForbiddenError):
        BidService().update(db, bid_id=bid.id, username=intruder.username, name="mine now")


def test_update_by_author_appends_latest_plus_one(db, market):
    author = create_employee(db, "solo")
    bid = create_bid(db, market["tender"], author)
    svc = BidService()

    latest = BidStore().get_latest_version_number(db, bid.id)
    b = svc.update(db, bid_id=bid.id, username=author.username, description="cheaper")

    assert b.version == latest + 1
    assert b.name == "Offer"
    assert b.description == "cheaper"


def test_organization_bid_is_editable_by_any_member(db, market):
    bid = create_bid(
        db,
        market["tender"],
        market["rep"],
        author_type=BidAuthorType.organization,
        author_id=market["supplier"].id,
    )
    colleague = create_employee(db, "colleague", market["supplier"])

    b = BidService().update(db, bid_id=bid.id, username=colleague.username, name="revised")
    assert b.name == "revised"

    with pytest.raises(ForbiddenError):
        BidService().update(db, bid_id=bid.id, username=market["owner"].username, name="nope")


def test_rollback_by_author(db, market):
    author = create_employee(db, "solo")
    bid = create_bid(db, market["tender"], author)
    svc = BidService()
    svc.update(db, bid_id=bid.id, username=author.username, name="second")

    b = svc.rollback(db, bid_id=bid.id, username=author.username, version=1)

    assert b.version == 1
    assert b.name == "Offer"


# ---------------------------
# status
# ---------------------------

def test_unpublished_bid_status_hidden_from_others(db, market):
    author = create_employee(db, "solo")
    bid = create_bid(db, market["tender"], author, published=False)
    svc = BidService()

    assert svc.get_status(db, bid_id=bid.id, username=author.username) == BidStatus.created
    with pytest.raises(ForbiddenError):
        svc.get_status(db, bid_id=bid.id, username=market["owner"].username)

    svc.set_status(db, bid_id=bid.id, username=author.username, status=BidStatus.published)
    assert svc.get_status(db, bid_id=bid.id, username=market["owner"].username) == BidStatus.published


def test_author_cannot_set_decision_statuses(db, market):
    author = create_employee(db, "solo")
    bid = create_bid(db, market["tender"], author)

    with pytest.raises(InvalidArgumentError):
        BidService().set_status(db, bid_id=bid.id, username=author.username, status=BidStatus.approved)


def test_rejected_bid_cannot_be_reopened(db, market):
    author = create_employee(db, "solo")
    bid = create_bid(db, market["tender"], author)
    svc = BidService()
    svc.submit_decision(db, bid_id=bid.id, username="reviewer", decision=BidDecisionType.rejected)

    with pytest.raises(InvalidArgumentError):
        svc.set_status(db, bid_id=bid.id, username=author.username, status=BidStatus.published)


# ---------------------------
# listings
# ---------------------------

def test_get_my_includes_own_and_organization_bids(db, market):
    rep = market["rep"]
    create_bid(db, market["tender"], rep, name="personal")
    create_bid(
        db,
        market["tender"],
        rep,
        name="corporate",
        author_type=BidAuthorType.organization,
        author_id=market["supplier"].id,
    )
    create_bid(db, market["tender"], create_employee(db, "solo"), name="unrelated")

    names = [b.name for b in BidService().get_my(db, username=rep.username)]
    assert names == ["corporate", "personal"]


def test_get_by_tender_is_owner_only_and_published_only(db, market):
    create_bid(db, market["tender"], create_employee(db, "a"), name="visible")
    create_bid(db, market["tender"], create_employee(db, "b"), name="draft", published=False)
    svc = BidService()

    bids = svc.get_by_tender(db, tender_id=market["tender"].id, username=market["reviewer"].username)
    assert [b.name for b in bids] == ["visible"]

    with pytest.raises(ForbiddenError):
        svc.get_by_tender(db, tender_id=market["tender"].id, username=market["rep"].username)


# ---------------------------
# feedback
# ---------------------------

def test_leave_feedback_requires_tender_owner(db, market):
    author = create_employee(db, "solo")
    bid = create_bid(db, market["tender"], author)

    with pytest.raises(ForbiddenError):
        BidService().leave_feedback(db, bid_id=bid.id, username=market["rep"].username, feedback="hm")


def test_authors_feedback_not_found_without_bids(db, market):
    create_employee(db, "idle")
    with pytest.raises(NotFoundError):
        BidService().get_authors_feedback(
            db,
            tender_id=market["tender"].id,
            requester_username=market["owner"].username,
            author_username="idle",
        )


def test_authors_feedback_forbidden_for_non_owner(db, market):
    author = create_employee(db, "solo")
    create_bid(db, market["tender"], author)
    with pytest.raises(ForbiddenError):
        BidService().get_authors_feedback(
            db,
            tender_id=market["tender"].id,
            requester_username=market["rep"].username,
            author_username=author.username,
        )


def test_authors_feedback_returns_history_newest_first(db, market):
    author = create_employee(db, "solo")
    bid = create_bid(db, market["tender"], author)
    svc = BidService()
    svc.leave_feedback(db, bid_id=bid.id, username=market["owner"].username, feedback="too slow")
    svc.leave_feedback(db, bid_id=bid.id, username=market["reviewer"].username, feedback="too pricey")

    feedback = svc.get_authors_feedback(
        db,
        tender_id=market["tender"].id,
        requester_username=market["owner"].username,
        author_username=author.username,
    )

    assert [f.description for f in feedback] == ["too pricey", "too slow"]


def test_authors_feedback_matches_organization_authorship(db, market):
    bid = create_bid(
        db,
        market["tender"],
        market["rep"],
        author_type=BidAuthorType.organization,
        author_id=market["supplier"].id,
    )
    svc = BidService()
    svc.leave_feedback(db, bid_id=bid.id, username=market["owner"].username, feedback="solid")

    feedback = svc.get_authors_feedback(
        db,
        tender_id=market["tender"].id,
        requester_username=market["owner"].username,
        author_username=market["rep"].username,
    )

    assert [f.description for f in feedback] == ["solid"]


def test_corrupt_stored_status_is_internal_error(db, market):
    bid = create_bid(db, market["tender"], market["rep"])
    bid.status = "lost"
    db.commit()
    svc = BidService()

    with pytest.raises(InternalError):
        svc.get_status(db, bid_id=bid.id, username=market["rep"].username)
    with pytest.raises(InternalError):
        svc.set_status(db, bid_id=bid.id, username=market["rep"].username, status=BidStatus.canceled)


# ---------------------------
# store listings
# ---------------------------

def test_store_get_all_lists_published_only_newest_first(db, market):
    first = create_bid(db, market["tender"], market["rep"], name="first")
    create_bid(db, market["tender"], market["rep"], name="draft", published=False)
    second = create_bid(db, market["tender"], market["rep"], name="second")
    store = BidStore()

    assert [b.id for b in store.get_all(db, Pagination())] == [second.id, first.id]
    assert [b.id for b in store.get_all(db, Pagination(limit=1, offset=1))] == [first.id]
