"""Service exposing fact-checks to a host, one at a time."""

import logging
from typing import Optional

from pydantic import BaseModel

from ..cancellation import CancellationToken
from ..errors import CancelReason, SessionBusyError
from ..models.fact_check_result import FactCheckResult
from .fact_check_orchestrator import FactCheckOrchestrator, FactCheckSession, ProgressCallback, SessionState

logger = logging.getLogger(__name__)


class FactCheckStatus(BaseModel):
    """Snapshot of the service's current or last session."""

    busy: bool
    finished: bool = False
    state: Optional[SessionState] = None
    model: Optional[str] = None
    claim: Optional[str] = None
    searches_performed: int = 0


class FactCheckingService:
    """Busy gate in front of the orchestrator.

    A second ``fact_check`` while one is in flight is rejected with
    ``SessionBusyError``. ``cancel`` aborts the in-flight session.
    """

    def __init__(self, orchestrator: FactCheckOrchestrator):
        """Initialize the service.

        Args:
            orchestrator: Runs the fact-check conversations
        """
        self.orchestrator = orchestrator
        self._token: Optional[CancellationToken] = None
        self._session: Optional[FactCheckSession] = None
        logger.info("🔧 FactCheckingService initialized")

    def is_busy(self) -> bool:
        return self._token is not None

    async def fact_check(
        self, claim: str, model: str, progress: Optional[ProgressCallback] = None
    ) -> FactCheckResult:
        """Fact-check a claim.

        Args:
            claim: Claim text
            model: Model name on the model server
            progress: Optional milestone callback

        Returns:
            Parsed fact-check result

        Raises:
            SessionBusyError: A fact-check is already running
        """
        if self.is_busy():
            logger.warning("⚠️ Fact-check already in progress, rejecting request")
            raise SessionBusyError("A fact-check is already in progress.")

        # Validation errors surface before the gate is taken
        session = self.orchestrator.create_session(claim, model)
        self._token = session.token
        self._session = session
        try:
            return await self.orchestrator.execute(session, progress)
        finally:
            self._token = None

    def cancel(self, reason: CancelReason = CancelReason.USER) -> bool:
        """Cancel the in-flight fact-check.

        Returns:
            True if a running session was cancelled
        """
        if self._token is None:
            return False
        logger.info(f"🛑 Cancelling fact-check ({reason.value})")
        return self._token.cancel(reason)

    def status(self) -> FactCheckStatus:
        session = self._session
        if session is None:
            return FactCheckStatus(busy=self.is_busy())
        return FactCheckStatus(
            busy=self.is_busy(),
            finished=session.is_finished,
            state=session.state,
            model=session.model,
            claim=session.claim.text,
            searches_performed=session.iteration_count,
        )
