"""
Domain errors raised by the catalog, the store and the session manager.

All of them are recoverable and meant to be caught by the presentation
layer, which decides how to phrase them for the user.
"""

from typing import Any, Dict, Optional


class CareBookError(Exception):
    """Base class for every error surfaced by the core."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__.upper()
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a plain dictionary."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(CareBookError):
    """Raised when input fails a field-level rule."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class NotFoundError(CareBookError):
    """Raised when a doctor, appointment or review id is unknown."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            f"{entity} with ID {entity_id} not found",
            "NOT_FOUND",
            {"entity": entity, "entity_id": str(entity_id)},
        )


class UnauthorizedError(CareBookError):
    """Raised when the caller lacks the capability an operation needs."""

    def __init__(self, message: str = "Admin capability required"):
        super().__init__(message, "UNAUTHORIZED")


class ConflictError(CareBookError):
    """Raised when a write would break a uniqueness rule."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFLICT", details)


class InvalidTransitionError(ConflictError):
    """Raised when an appointment status change is not allowed."""

    def __init__(self, appointment_id: str, current: str, target: str):
        super().__init__(
            f"Appointment {appointment_id} cannot move from {current} to {target}",
            {"appointment_id": appointment_id, "current": current, "target": target},
        )
        self.code = "INVALID_TRANSITION"
