"""Domain error taxonomy shared by every catalog vertical.

Raised by repositories and services; the API layer renders them through
``modules.core.exception_handler`` into the standard error envelope.
The set of kinds is closed: callers branch on the exception class (or its
``code``), never on the message text.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base class for all catalog domain errors."""

    code = "domain_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFound(DomainError):
    """The entity does not exist in the repository."""

    code = "not_found"

    def __init__(self, entity: str, key: str) -> None:
        self.entity = entity
        self.key = key
        super().__init__(
            f"{entity} with ID {key} not found",
            {"entity": entity, "key": key},
        )


class AlreadyExists(DomainError):
    """An entity with the same identifying key is already stored."""

    code = "already_exists"

    def __init__(self, entity: str, key: str) -> None:
        self.entity = entity
        self.key = key
        super().__init__(
            f"{entity} {key} already exists",
            {"entity": entity, "key": key},
        )


class ValidationFailed(DomainError):
    """A business validation rule rejected the entity.

    ``rule`` is a stable identifier such as ``name.max_length``.
    """

    code = "validation_error"

    def __init__(self, rule: str, message: str) -> None:
        self.rule = rule
        super().__init__(f"validation failed: {message}", {"rule": rule})


class Unavailable(DomainError):
    """The entity exists but a business rule gates it off (e.g. inactive)."""

    code = "unavailable"

    def __init__(self, entity: str, key: str, reason: str = "inactive") -> None:
        self.entity = entity
        self.key = key
        self.reason = reason
        super().__init__(
            f"{entity} {key} is not available",
            {"entity": entity, "key": key, "reason": reason},
        )


class Cancelled(DomainError):
    """The caller abandoned the operation or its deadline expired."""

    code = "cancelled"

    def __init__(self, message: str = "operation cancelled") -> None:
        super().__init__(message)


class Internal(DomainError):
    """Storage or unexpected failure.

    The original exception is kept in ``cause`` for logging only; it is
    never rendered to the caller.
    """

    code = "internal_error"

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        self.cause = cause
        super().__init__(message)
