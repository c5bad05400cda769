"""Exception hierarchy for ChefInBox."""

from typing import Any, Optional


class ChefInBoxError(Exception):
    """Base exception for all ChefInBox errors."""

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(ChefInBoxError, ValueError):
    """Missing or invalid configuration value."""


class AnalysisFailure(ChefInBoxError):
    """Ingredient recognition call failed or returned a non-conforming response."""


class InvalidImageError(AnalysisFailure):
    """Image payload rejected before any model call (empty, too large, unsupported type)."""

    def __init__(self, message: str, mime_type: Optional[str] = None, size_bytes: Optional[int] = None):
        super().__init__(message, details={"mime_type": mime_type, "size_bytes": size_bytes})
        self.mime_type = mime_type
        self.size_bytes = size_bytes


class GenerationFailure(ChefInBoxError):
    """Recipe generation call failed or returned malformed top-level JSON."""


class RequestInProgressError(ChefInBoxError):
    """A model request was dispatched while another one is still outstanding."""

    def __init__(self, operation: str, pending_state: str):
        super().__init__(
            f"Cannot start {operation}: a request is already in progress ({pending_state})",
            details={"operation": operation, "pending_state": pending_state},
        )
        self.operation = operation
        self.pending_state = pending_state
