# tender_system/policies/access_policy.py
from __future__ import annotations

from typing import Optional

from tender_system.core.errors import ForbiddenError, InternalError
from tender_system.models.bid import Bid
from tender_system.models.employee import Employee, Organization
from tender_system.models.enums import BidAuthorType, BidStatus
from tender_system.models.tender import Tender


def is_bid_author(bid: Bid, employee: Employee, organization: Optional[Organization]) -> bool:
    """
    user-authored bids: the employee is the author.
    organization-authored bids: the employee's organization is the author.
    """
    if bid.author_type == BidAuthorType.user.value:
        return bid.author_id == employee.id

    if bid.author_type == BidAuthorType.organization.value:
        return organization is not None and bid.author_id == organization.id

    raise InternalError(f"Bid {bid.id} has unknown author type {bid.author_type!r}.")


def require_bid_author(bid: Bid, employee: Employee, organization: Optional[Organization]) -> None:
    if not is_bid_author(bid, employee, organization):
        raise ForbiddenError(f"Employee '{employee.username}' is not the author of bid {bid.id}.")


def require_bid_read_access(
    bid: Bid, employee: Employee, organization: Optional[Organization]
) -> None:
    """
    Published bids are visible to everyone; anything else only to its author.
    """
    if bid.status == BidStatus.published.value:
        return
    require_bid_author(bid, employee, organization)


def require_tender_owner(tender: Tender, organization: Organization) -> None:
    if tender.organization_id != organization.id:
        raise ForbiddenError(
            f"Organization {organization.id} is not responsible for tender {tender.id}."
        )
