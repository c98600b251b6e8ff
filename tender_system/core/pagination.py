from __future__ import annotations

from dataclasses import dataclass

from tender_system.core.errors import InvalidArgumentError

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0


@dataclass(frozen=True)
class Pagination:
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET

    def __post_init__(self) -> None:
        if self.limit < 0 or self.offset < 0:
            raise InvalidArgumentError("limit and offset must be non-negative.")

    @classmethod
    def of(cls, limit: int | None = None, offset: int | None = None) -> "Pagination":
        # zero / missing means "use the default", as the query string binds 0 when absent
        return cls(
            limit=limit or DEFAULT_LIMIT,
            offset=offset or DEFAULT_OFFSET,
        )
