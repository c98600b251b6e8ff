# tender_system/core/deps.py
from __future__ import annotations

import uuid
from typing import Optional

from fastapi import Query

from tender_system.core.config import get_settings
from tender_system.core.errors import InvalidArgumentError
from tender_system.core.pagination import Pagination
from tender_system.services.bids_service import BidService
from tender_system.services.tenders_service import TenderService


def get_tender_service() -> TenderService:
    return TenderService()


def get_bid_service() -> BidService:
    return BidService(max_quorum=get_settings().max_quorum)


def get_pagination(
    limit: Optional[int] = Query(None, ge=0),
    offset: Optional[int] = Query(None, ge=0),
) -> Pagination:
    """
    limit / offset query params. Missing or 0 means the configured default.
    """
    settings = get_settings()
    limit = limit or settings.default_page_limit
    if limit > settings.max_page_limit:
        raise InvalidArgumentError(f"limit must not exceed {settings.max_page_limit}.")
    return Pagination.of(limit=limit, offset=offset)


def parse_uuid(raw: str, field: str = "id") -> uuid.UUID:
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise InvalidArgumentError(f"Invalid {field}: {raw!r}")
