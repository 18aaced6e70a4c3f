"""Drives one fact-check conversation between a local model and web search."""

import asyncio
import logging
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from ..cancellation import CancellationToken
from ..errors import CancelReason, FactCheckValidationError, SessionAbortedError
from ..models.claim import Claim
from ..models.conversation import (
    AssistantMessage,
    ConversationMessage,
    SystemMessage,
    ToolCallRequest,
    ToolMessage,
    UserMessage,
    extract_tool_calls,
)
from ..models.fact_check_result import FactCheckResult
from ..models.search import RankedResult
from ..ports.model_server import ModelServer
from .capability_cache import CapabilityCache
from .prompts import WEB_SEARCH_TOOL, WEB_SEARCH_TOOL_NAME, empty_answer_fallback, system_prompt, user_prompt
from .response_extraction import extract_content, signals_completion
from .search_executor import SearchExecutor, unavailable_summary
from .verdict_parser import VerdictParser

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle of a fact-check session."""

    INIT = "init"
    CAPABILITY_CHECK = "capability_check"
    REQUEST_SENT = "request_sent"
    TOOL_CALL_PENDING = "tool_call_pending"
    SEARCHING = "searching"
    COMPLETE = "complete"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


TERMINAL_STATES = (SessionState.COMPLETE, SessionState.FAILED, SessionState.TIMED_OUT)


class ProgressStage(str, Enum):
    ANALYZING = "analyzing"
    SEARCHING = "searching"
    FINALIZING = "finalizing"


class FactCheckProgress(BaseModel):
    """Progress milestone reported while a session runs."""

    stage: ProgressStage
    percent: int = Field(..., ge=0, le=100)
    message: str

    class Config:
        frozen = True


ProgressCallback = Callable[[FactCheckProgress], None]


class OrchestratorConfig(BaseModel):
    """Limits applied to every session."""

    max_search_iterations: int = Field(default=3, ge=0, description="Tool-call rounds before the answer is accepted")
    request_timeout: float = Field(default=120.0, gt=0, description="Whole-session timeout in seconds")

    class Config:
        frozen = True


class FactCheckSession:
    """Mutable state of one fact-check. Owned by a single orchestrator run."""

    def __init__(self, claim: Claim, model: str, token: CancellationToken):
        self.claim = claim
        self.model = model
        self.token = token
        self.state = SessionState.INIT
        self.supports_tools: Optional[bool] = None
        self.transcript: List[ConversationMessage] = []
        self.iteration_count = 0
        self.tool_calls_seen = 0
        self._sources: Dict[str, RankedResult] = {}

    def merge_sources(self, results: Iterable[RankedResult]) -> int:
        """Add results not seen before, keyed by URL. Returns how many were new."""
        added = 0
        for result in results:
            if result.url and result.url not in self._sources:
                self._sources[result.url] = result
                added += 1
        return added

    @property
    def collected_sources(self) -> List[RankedResult]:
        return list(self._sources.values())

    @property
    def is_finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def transcript_payload(self) -> List[Dict[str, Any]]:
        return [message.to_payload() for message in self.transcript]


class FactCheckOrchestrator:
    """Runs the tool-calling conversation for a claim.

    The model is asked for a verdict; while it requests ``web_search`` calls
    (up to ``max_search_iterations`` rounds) the searches are executed, their
    tiered results appended to the transcript, and the conversation re-sent.
    The final answer is parsed into a ``FactCheckResult``.
    """

    def __init__(
        self,
        model_server: ModelServer,
        capability_cache: CapabilityCache,
        search_executor: SearchExecutor,
        verdict_parser: Optional[VerdictParser] = None,
        config: Optional[OrchestratorConfig] = None,
    ):
        self._server = model_server
        self._capabilities = capability_cache
        self._search = search_executor
        self._parser = verdict_parser or VerdictParser()
        self.config = config or OrchestratorConfig()

    def create_session(
        self, claim_text: str, model: str, token: Optional[CancellationToken] = None
    ) -> FactCheckSession:
        """Validate input and build a fresh session. No network activity."""
        claim = Claim.from_text(claim_text)
        if not model or not model.strip():
            raise FactCheckValidationError("Please select a model first.")
        return FactCheckSession(claim, model.strip(), token or CancellationToken())

    async def run(
        self,
        claim_text: str,
        model: str,
        token: Optional[CancellationToken] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> FactCheckResult:
        """Fact-check ``claim_text`` with ``model``.

        Raises:
            FactCheckValidationError: Empty or oversized claim, no model
            FactCheckTimeoutError: Session timeout expired
            FactCheckCancelledError: Token cancelled externally
            RequestError: Model server failure
        """
        session = self.create_session(claim_text, model, token)
        return await self.execute(session, progress)

    async def execute(self, session: FactCheckSession, progress: Optional[ProgressCallback] = None) -> FactCheckResult:
        """Run a session created by ``create_session``."""
        session.token.start_timer(self.config.request_timeout)
        try:
            result = await self._converse(session, progress)
        except SessionAbortedError as e:
            session.state = SessionState.TIMED_OUT if e.reason == CancelReason.TIMEOUT else SessionState.FAILED
            logger.warning(f"⏱️ Fact-check aborted ({e.reason.value}) in {session.model}")
            raise
        except asyncio.CancelledError:
            session.state = SessionState.FAILED
            logger.warning(f"🛑 Fact-check task cancelled in {session.model}")
            raise
        except Exception as e:
            session.state = SessionState.FAILED
            logger.error(f"❌ Fact-check failed with {session.model}: {e}")
            raise
        finally:
            session.token.clear_timer()

        session.state = SessionState.COMPLETE
        logger.info(
            f"✅ Fact-check complete: {result.verdict.value} "
            f"({session.iteration_count} search round(s), {len(result.sources)} source(s))"
        )
        return result

    async def _converse(self, session: FactCheckSession, progress: Optional[ProgressCallback]) -> FactCheckResult:
        logger.info(f"🔍 Fact-checking with {session.model}: {session.claim.text[:100]}")

        session.state = SessionState.CAPABILITY_CHECK
        session.supports_tools = await session.token.guard(self._capabilities.has_tool_support(session.model))
        logger.info(f"🔧 {session.model} supports tools: {session.supports_tools}")

        session.transcript = [
            SystemMessage(content=system_prompt(session.supports_tools)),
            UserMessage(content=user_prompt(session.claim.text, session.supports_tools)),
        ]

        self._report(progress, ProgressStage.ANALYZING, 25, "Analyzing claim and determining search needs...")
        response = await self._send(session)

        max_iterations = self.config.max_search_iterations
        while True:
            calls = extract_tool_calls(response, first_placeholder=session.tool_calls_seen + 1)
            if not calls:
                break
            if session.iteration_count >= max_iterations:
                logger.warning(f"⚠️ Search iteration cap ({max_iterations}) reached, accepting current answer")
                break

            session.iteration_count += 1
            session.tool_calls_seen += len(calls)
            session.state = SessionState.TOOL_CALL_PENDING
            session.transcript.append(AssistantMessage(content=_assistant_content(response), tool_calls=calls))

            self._report(
                progress,
                ProgressStage.SEARCHING,
                40 + session.iteration_count * 15,
                f"Searching the web ({session.iteration_count}/{max_iterations})...",
            )
            for call in calls:
                tool_message = await self._dispatch(session, call, progress)
                if tool_message is not None:
                    session.transcript.append(tool_message)

            self._report(
                progress, ProgressStage.ANALYZING, 60 + session.iteration_count * 10, "Analyzing search results..."
            )
            response = await self._send(session)

        self._report(progress, ProgressStage.FINALIZING, 90, "Formatting results...")
        content = extract_content(response)
        if content is None:
            logger.warning(
                f"⚠️ No usable content in model response (done={signals_completion(response)}), "
                "using UNVERIFIABLE fallback"
            )
            content = empty_answer_fallback(session.claim.text)

        return self._parser.parse(
            content,
            collected_sources=session.collected_sources,
            searches_performed=session.iteration_count,
        )

    async def _send(self, session: FactCheckSession) -> Any:
        session.token.raise_if_cancelled()
        session.state = SessionState.REQUEST_SENT
        tools = [WEB_SEARCH_TOOL] if session.supports_tools else None
        logger.debug(f"📤 Sending {len(session.transcript)} message(s) to {session.model}")
        return await self._server.chat(
            session.model,
            session.transcript_payload(),
            tools=tools,
            cancel_token=session.token,
        )

    async def _dispatch(
        self, session: FactCheckSession, call: ToolCallRequest, progress: Optional[ProgressCallback]
    ) -> Optional[ToolMessage]:
        session.token.raise_if_cancelled()
        if call.name != WEB_SEARCH_TOOL_NAME:
            logger.warning(f"⚠️ Ignoring unknown tool call: {call.name!r}")
            return None

        query = call.arguments.get("query")
        if not isinstance(query, str) or not query.strip():
            logger.warning(f"⚠️ web_search call {call.id} has no query")
            return ToolMessage(
                tool_call_id=call.id,
                name=WEB_SEARCH_TOOL_NAME,
                content=unavailable_summary("no search query was provided"),
            )

        session.state = SessionState.SEARCHING
        self._report(progress, ProgressStage.SEARCHING, 50, f'Searching: "{query}"...')
        outcome = await self._search.search(query, cancel_token=session.token)
        added = session.merge_sources(outcome.results)
        logger.info(f"🌐 Search '{query}': {len(outcome.results)} result(s), {added} new source(s)")

        return ToolMessage(tool_call_id=call.id, name=WEB_SEARCH_TOOL_NAME, content=outcome.summary)

    @staticmethod
    def _report(progress: Optional[ProgressCallback], stage: ProgressStage, percent: int, message: str) -> None:
        if progress is None:
            return
        try:
            progress(FactCheckProgress(stage=stage, percent=min(percent, 100), message=message))
        except Exception as e:
            logger.warning(f"⚠️ Progress callback failed: {e}")


def _assistant_content(response: Any) -> str:
    message = response.get("message") if isinstance(response, dict) else None
    if isinstance(message, dict) and isinstance(message.get("content"), str):
        return message["content"]
    return ""
