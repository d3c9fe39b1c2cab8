from __future__ import annotations

from typing import Any, Optional

from .enums import ConflictReason, EntityKind, ValidationReason


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries structured fields; ``to_dict`` is what the HTTP
    layer renders, so callers never have to parse the message.
    """

    code = "DOMAIN_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"code": self.code, "message": self.message}
        out.update(self.details())
        return out


class NotFoundError(DomainError):
    """Raised when a referenced user, leave request or session does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: EntityKind, entity_id: Any):
        super().__init__(f"{entity.value} not found with ID: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id

    def details(self) -> dict[str, Any]:
        return {"entity": self.entity.value, "id": self.entity_id}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION"

    def __init__(self, reason: ValidationReason, message: Optional[str] = None):
        super().__init__(message or reason.value)
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {"reason": self.reason.value}


class ConflictError(DomainError):
    """Raised when the entity's current state does not allow the operation."""

    code = "CONFLICT"

    def __init__(
        self,
        reason: ConflictReason,
        message: Optional[str] = None,
        *,
        conflicting_start: Optional[int] = None,
        conflicting_end: Optional[int] = None,
    ):
        super().__init__(message or reason.value)
        self.reason = reason
        self.conflicting_start = conflicting_start
        self.conflicting_end = conflicting_end

    def details(self) -> dict[str, Any]:
        out: dict[str, Any] = {"reason": self.reason.value}
        if self.conflicting_start is not None:
            out["conflictingStart"] = self.conflicting_start
            out["conflictingEnd"] = self.conflicting_end
        return out


class ForbiddenError(DomainError):
    """Raised when a user acts on an entity they do not own."""

    code = "FORBIDDEN"


class OperationTimeoutError(DomainError):
    """Raised when an entity lock cannot be acquired before the deadline."""

    code = "TIMEOUT"

    def __init__(self, key: Any, timeout: float):
        super().__init__(f"Timed out after {timeout:g}s waiting for {key!r}")
        self.key = key
        self.timeout = timeout

    def details(self) -> dict[str, Any]:
        return {"timeoutSeconds": self.timeout}
