"""Exception types raised by the assessment core."""

from typing import Optional


class MedAgentError(Exception):
    """Base class for assessment errors."""


class IntakeValidationError(MedAgentError):
    """Raised when user-entered intake fields fail presence or range checks."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message

    def to_detail(self) -> dict:
        return {"field": self.field, "message": self.message}


class RetrievalError(MedAgentError):
    """Advisory generation failed (transport, status, timeout or bad payload).

    Never leaves AdvisoryService; it is downgraded to a fallback advisory.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SessionNotFoundError(MedAgentError):
    """No wizard session exists for the given id."""


class SessionStateError(MedAgentError):
    """Operation is not valid for the session's current stage."""
