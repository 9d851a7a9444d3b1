"""Wizard session management service.

Sessions live in process memory only. Each one walks
intake -> risk -> consultation and owns the asyncio tasks it starts (the
optional auto-advance timer and any advisory retrievals), so restarting or
closing a session never leaves a task writing into discarded state.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from medagent.config.settings import settings
from medagent.models.assessment import AdvisoryResult, PatientRecord
from medagent.models.triage import AdvisoryStatus, AssessmentStage, RiskCategory
from medagent.services.advisory_service import AdvisoryService, get_advisory_service
from medagent.utils.errors import SessionNotFoundError, SessionStateError
from typing import Dict, Optional, Set
import asyncio
import logging
import uuid

logger = logging.getLogger(__name__)


@dataclass
class AssessmentSession:
    """In-memory state of one wizard run."""

    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    stage: AssessmentStage = AssessmentStage.INTAKE
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    record: Optional[PatientRecord] = None
    risk: Optional[RiskCategory] = None

    advisory_status: AdvisoryStatus = AdvisoryStatus.IDLE
    advisory: Optional[AdvisoryResult] = None

    # Bumped for every retrieval and on reset; only the latest may resolve
    generation: int = 0

    advisory_tasks: Set[asyncio.Task] = field(default_factory=set)
    latest_task: Optional[asyncio.Task] = None
    advance_task: Optional[asyncio.Task] = None

    def touch(self) -> None:
        self.updated_at = datetime.utcnow()


class SessionService:
    """Service for managing assessment wizard sessions."""

    def __init__(
        self,
        advisory_service: AdvisoryService,
        auto_advance_seconds: Optional[float] = None,
        idle_minutes: Optional[float] = None,
    ):
        self.advisory_service = advisory_service
        self.auto_advance_seconds = (
            auto_advance_seconds
            if auto_advance_seconds is not None
            else settings.auto_advance_seconds
        )
        self.idle_minutes = (
            idle_minutes if idle_minutes is not None else settings.session_idle_minutes
        )
        self._sessions: Dict[str, AssessmentSession] = {}

    async def create_session(self) -> AssessmentSession:
        """
        Create a new wizard session at the intake stage.

        Returns:
            Created AssessmentSession
        """
        await self.purge_idle_sessions()
        session = AssessmentSession()
        self._sessions[session.session_id] = session
        logger.info(f"Created session {session.session_id}")
        return session

    async def get_session(self, session_id: str) -> Optional[AssessmentSession]:
        return self._sessions.get(session_id)

    def _require(self, session_id: str) -> AssessmentSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        return session

    async def submit_record(
        self, session_id: str, record: PatientRecord, risk: RiskCategory
    ) -> AssessmentSession:
        """
        Store a validated record and its risk, moving the session to the risk stage.

        Args:
            session_id: Session identifier
            record: Validated patient record
            risk: Category computed for the record

        Returns:
            Updated AssessmentSession
        """
        session = self._require(session_id)
        self._cancel_tasks(session)
        self._reset_advisory(session)

        session.record = record
        session.risk = risk
        session.stage = AssessmentStage.RISK
        session.touch()
        logger.info(f"Session {session_id} classified as {risk.value}")

        if self.auto_advance_seconds > 0:
            session.advance_task = asyncio.create_task(
                self._auto_advance(session_id, self.auto_advance_seconds)
            )
        return session

    async def _auto_advance(self, session_id: str, delay: float) -> None:
        await asyncio.sleep(delay)
        session = self._sessions.get(session_id)
        if session is None or session.stage != AssessmentStage.RISK:
            return
        # Detach first so advance() does not cancel the running timer task
        session.advance_task = None
        logger.info(f"Auto-advancing session {session_id} to consultation")
        await self.advance(session_id)

    async def advance(self, session_id: str) -> AssessmentSession:
        """
        Move from the risk stage to consultation and start advisory retrieval.

        Raises:
            SessionNotFoundError: Unknown session
            SessionStateError: No record has been submitted yet
        """
        session = self._require(session_id)
        if session.record is None or session.risk is None:
            raise SessionStateError("Submit intake before continuing")

        self._cancel_timer(session)
        if session.stage == AssessmentStage.CONSULTATION:
            return session

        session.stage = AssessmentStage.CONSULTATION
        session.touch()
        self._start_advisory(session)
        return session

    async def refresh_advisory(self, session_id: str) -> AssessmentSession:
        """
        Start a new advisory retrieval; earlier in-flight calls keep running
        but can no longer resolve the session.

        Raises:
            SessionNotFoundError: Unknown session
            SessionStateError: Session is not at the consultation stage
        """
        session = self._require(session_id)
        if session.stage != AssessmentStage.CONSULTATION:
            raise SessionStateError("Advisory can only be refreshed during consultation")
        self._start_advisory(session)
        return session

    def _start_advisory(self, session: AssessmentSession) -> None:
        session.generation += 1
        session.advisory_status = AdvisoryStatus.PENDING
        task = asyncio.create_task(
            self._run_advisory(session, session.generation, session.record, session.risk)
        )
        session.advisory_tasks.add(task)
        task.add_done_callback(session.advisory_tasks.discard)
        session.latest_task = task

    async def _run_advisory(
        self,
        session: AssessmentSession,
        generation: int,
        record: PatientRecord,
        risk: RiskCategory,
    ) -> AdvisoryResult:
        result = await self.advisory_service.get_advisory(record, risk)

        if generation != session.generation or self._sessions.get(session.session_id) is not session:
            logger.info(
                f"Discarding stale advisory for session {session.session_id} "
                f"(generation {generation}, current {session.generation})"
            )
            return result

        session.advisory = result
        session.advisory_status = AdvisoryStatus.RESOLVED
        session.touch()
        logger.info(f"Session {session.session_id} advisory resolved ({result.origin.value})")
        return result

    async def wait_for_advisory(self, session_id: str) -> AssessmentSession:
        """Wait for the most recently started retrieval to finish."""
        session = self._require(session_id)
        task = session.latest_task
        if task is not None and not task.done():
            try:
                await asyncio.shield(task)
            except asyncio.CancelledError:
                if not task.cancelled():
                    raise
        return session

    async def restart(self, session_id: str) -> AssessmentSession:
        """
        Discard the record and any pending work, returning to intake.

        Returns:
            Reset AssessmentSession
        """
        session = self._require(session_id)
        self._cancel_tasks(session)
        self._reset_advisory(session)
        session.record = None
        session.risk = None
        session.stage = AssessmentStage.INTAKE
        session.touch()
        logger.info(f"Restarted session {session_id}")
        return session

    async def close_session(self, session_id: str) -> bool:
        """
        Cancel a session's tasks and forget it.

        Returns:
            True if the session existed
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        self._cancel_tasks(session)
        logger.info(f"Closed session {session_id}")
        return True

    async def purge_idle_sessions(self, now: Optional[datetime] = None) -> int:
        """
        Close sessions whose last activity is older than the idle limit.

        Args:
            now: Reference time (defaults to utcnow)

        Returns:
            Number of sessions closed
        """
        if self.idle_minutes <= 0:
            return 0
        cutoff = (now or datetime.utcnow()) - timedelta(minutes=self.idle_minutes)
        stale = [sid for sid, s in self._sessions.items() if s.updated_at < cutoff]
        for session_id in stale:
            await self.close_session(session_id)
        if stale:
            logger.info(f"Purged {len(stale)} idle session(s)")
        return len(stale)

    async def shutdown(self) -> None:
        """Close every session (application shutdown)."""
        for session_id in list(self._sessions):
            await self.close_session(session_id)

    def _reset_advisory(self, session: AssessmentSession) -> None:
        session.generation += 1
        session.advisory = None
        session.advisory_status = AdvisoryStatus.IDLE
        session.latest_task = None

    def _cancel_timer(self, session: AssessmentSession) -> None:
        if session.advance_task is not None:
            session.advance_task.cancel()
            session.advance_task = None

    def _cancel_tasks(self, session: AssessmentSession) -> None:
        self._cancel_timer(session)
        for task in list(session.advisory_tasks):
            task.cancel()
        session.advisory_tasks.clear()


# Global service instance
_session_service: Optional[SessionService] = None


def get_session_service() -> SessionService:
    """Get or create SessionService instance."""
    global _session_service
    if _session_service is None:
        _session_service = SessionService(advisory_service=get_advisory_service())
    return _session_service
