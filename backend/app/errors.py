"""
Typed error taxonomy for the campus event core.

Core operations never format user-facing text. They raise one of these
errors with the offending field or constraint attached, and the HTTP layer
picks a status code and message from it.
"""

from typing import Any, Optional


class DomainError(Exception):
    """Base class for every error raised by the core operations."""

    kind = "domain_error"

    def to_dict(self) -> dict:
        return {}


class ValidationError(DomainError):
    """A required input field is absent or unparseable. Not retried."""

    kind = "validation_error"

    def __init__(self, field: str, reason: str = "required"):
        super().__init__("{}: {}".format(field, reason))
        self.field = field
        self.reason = reason

    def to_dict(self) -> dict:
        return {"field": self.field, "reason": self.reason}


class ConflictError(DomainError):
    """A uniqueness constraint would be violated. Not retried automatically."""

    kind = "conflict"

    def __init__(self, constraint: str, values: Optional[dict] = None):
        super().__init__(constraint)
        self.constraint = constraint
        self.values = values or {}

    def to_dict(self) -> dict:
        return {"constraint": self.constraint, "values": self.values}


class ReferentialError(DomainError):
    """A referenced parent row does not exist. Create the parent first."""

    kind = "referential_error"

    def __init__(self, entity: str, field: str, value: Any):
        super().__init__("{} {}={} does not exist".format(entity, field, value))
        self.entity = entity
        self.field = field
        self.value = value

    def to_dict(self) -> dict:
        return {"entity": self.entity, "field": self.field, "value": self.value}


class InternalError(DomainError):
    """Storage engine failure unrelated to caller input. Safe to retry."""

    kind = "internal_error"

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        super().__init__(operation)
        self.operation = operation
        self.cause = cause

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "cause": type(self.cause).__name__ if self.cause else None,
        }
