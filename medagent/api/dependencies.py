"""FastAPI dependencies for service access.

Routes receive services through ``Depends`` so tests can swap them with
``app.dependency_overrides``.
"""

from fastapi import HTTPException, status
from medagent.services.advisory_service import AdvisoryService, get_advisory_service
from medagent.services.session_service import (
    AssessmentSession,
    SessionService,
    get_session_service,
)
from medagent.utils.errors import SessionNotFoundError, SessionStateError
from medagent.utils.symptom_catalog import SymptomCatalog, default_catalog
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "AdvisoryService",
    "SessionService",
    "get_advisory_service",
    "get_session_service",
    "get_symptom_catalog",
    "require_session",
    "session_error_to_http",
]


def get_symptom_catalog() -> SymptomCatalog:
    return default_catalog


def session_error_to_http(exc: Exception) -> HTTPException:
    """Map session errors to HTTP 404 / 409."""
    if isinstance(exc, SessionNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, SessionStateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    logger.error(f"Unexpected session error: {exc}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Session operation failed: {exc}",
    )


async def require_session(
    session_id: str, session_service: SessionService
) -> AssessmentSession:
    """Return the session or raise HTTP 404."""
    session = await session_service.get_session(session_id)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
    return session
