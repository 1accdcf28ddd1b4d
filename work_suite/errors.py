"""
Error taxonomy for the Work Suite API.

Services raise these; the API layer renders them as
``{"error": {"code", "message", "details"}}`` with the matching status code.
"""

from typing import Any, Dict, Optional


class SuiteError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFoundError(SuiteError):
    """Raised when a referenced id does not exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, kind: str, object_id: str):
        self.kind = kind
        self.object_id = object_id
        super().__init__(f"{kind} '{object_id}' not found", {"id": object_id})


class ValidationFailedError(SuiteError):
    """Raised for missing required fields or invalid enumerated values."""

    code = "VALIDATION_FAILED"
    status_code = 422


class UnauthorizedError(SuiteError):
    """Raised when a required identity is missing or invalid."""

    code = "UNAUTHORIZED"
    status_code = 401


class ExternalServiceUnavailable(SuiteError):
    """Raised when the workspace service cannot be reached on a proxy call."""

    code = "EXTERNAL_SERVICE_UNAVAILABLE"
    status_code = 502


class StorageFailure(SuiteError):
    """Raised when the persistence layer fails."""

    code = "STORAGE_FAILURE"
    status_code = 500


class ContentCorruptedError(StorageFailure):
    """Raised when a stored content payload cannot be parsed."""

    code = "CONTENT_CORRUPTED"

    def __init__(self, item_id: str, reason: str):
        self.item_id = item_id
        super().__init__(
            f"Stored content for item '{item_id}' is not valid JSON",
            {"id": item_id, "reason": reason},
        )


class ConflictError(SuiteError):
    """Raised when a unique value (such as an account email) is taken."""

    code = "CONFLICT"
    status_code = 409
