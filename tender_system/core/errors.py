# tender_system/core/errors.py
from __future__ import annotations


class DomainError(Exception):
    """
    Base for every error the core raises on purpose.

    Services raise the most specific subclass where the problem is detected
    and never translate between kinds. Only the transport layer
    (tender_system.main) maps kinds to HTTP status codes.
    """


class NotFoundError(DomainError):
    """Referenced entity, version, employee or organization does not exist."""


class InvalidArgumentError(DomainError, ValueError):
    """Malformed token, or entity not in the state the operation requires."""


class UnauthorizedError(DomainError):
    """Actor identity could not be resolved."""


class ForbiddenError(DomainError, PermissionError):
    """Actor resolved but does not own the target entity."""


class InternalError(DomainError):
    """Persisted data violates an invariant (e.g. unknown author type)."""


class AlreadyExistsError(DomainError):
    """A row with the same natural key was written first, e.g. a racing version number."""
