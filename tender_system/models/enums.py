#tender_system/models/enums.py
from __future__ import annotations
from enum import Enum

from tender_system.core.errors import InternalError, InvalidArgumentError


class TokenEnum(str, Enum):
    """
    Closed set of string tokens with an `unknown` sentinel.

    `parse` accepts exactly the declared tokens; anything else, the sentinel
    itself included, is an InvalidArgumentError.
    """

    @classmethod
    def parse(cls, raw: str):
        try:
            value = cls(raw)
        except ValueError:
            value = cls.unknown
        if value is cls.unknown:
            raise InvalidArgumentError(f"unknown {cls.__name__} value: {raw!r}")
        return value

    @classmethod
    def stored(cls, raw: str):
        """Token read back from the database; a bad one means corrupt data."""
        try:
            return cls.parse(raw)
        except InvalidArgumentError as exc:
            raise InternalError(f"stored {cls.__name__} value is invalid: {raw!r}") from exc


class OrganizationType(TokenEnum):
    unknown = "unknown"
    IE = "IE"
    LLC = "LLC"
    JSC = "JSC"


class TenderStatus(TokenEnum):
    unknown = "unknown"
    created = "created"
    published = "published"
    closed = "closed"


class TenderServiceType(TokenEnum):
    unknown = "unknown"
    construction = "construction"
    delivery = "delivery"
    manufacture = "manufacture"


class BidStatus(TokenEnum):
    unknown = "unknown"
    created = "created"
    published = "published"
    canceled = "canceled"
    approved = "approved"
    rejected = "rejected"


# statuses only the quorum engine may assign
BID_DECISION_STATUSES = frozenset({BidStatus.approved, BidStatus.rejected})


class BidAuthorType(TokenEnum):
    unknown = "unknown"
    organization = "organization"
    user = "user"


class BidDecisionType(TokenEnum):
    unknown = "unknown"
    approved = "approved"
    rejected = "rejected"
