from typing import Any, Dict, List, Optional


class TrackerError(Exception):
    """Base exception for service-level errors with structured error information."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "TRACKER_ERROR",
        recoverable: bool = True,
        suggested_action: str = "retry",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.code = code
        self.recoverable = recoverable
        self.suggested_action = suggested_action
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for API responses."""
        return {
            "code": self.code,
            "message": str(self),
            "recoverable": self.recoverable,
            "suggested_action": self.suggested_action,
            "details": self.details
        }


class InvalidPayloadError(TrackerError):
    """A single malformed or rejected request field."""
    status_code = 400

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message,
            code="INVALID_PAYLOAD",
            recoverable=True,
            suggested_action="fix_payload",
            **kwargs
        )


class NotFoundError(TrackerError):
    """Entity not found."""
    status_code = 404

    def __init__(self, entity_id: Any, kind: str = "entity", **kwargs):
        super().__init__(
            f"{kind.capitalize()} '{entity_id}' not found",
            code="NOT_FOUND",
            recoverable=False,
            suggested_action="check_id",
            details={"id": str(entity_id), "kind": kind},
            **kwargs
        )


class DuplicateEntityError(TrackerError):
    """An entity with the same id already exists."""
    status_code = 409

    def __init__(self, entity_id: Any, kind: str = "entity", **kwargs):
        super().__init__(
            f"{kind.capitalize()} '{entity_id}' already exists",
            code="DUPLICATE_ENTITY",
            recoverable=False,
            suggested_action="use_new_id",
            details={"id": str(entity_id), "kind": kind},
            **kwargs
        )


class MultipleErrors(TrackerError):
    """Every problem found in one request, reported together.

    ``errors`` holds the human-readable messages in the order they were found.
    """
    status_code = 400

    def __init__(self, errors: List[str], **kwargs):
        self.errors = list(errors)
        super().__init__(
            "; ".join(self.errors) if self.errors else "Invalid request",
            code="VALIDATION_FAILED",
            recoverable=True,
            suggested_action="fix_payload",
            details={"errors": self.errors},
            **kwargs
        )
