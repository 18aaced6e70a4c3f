"""Cancellation token shared by every suspension point of a session."""

import asyncio
import contextlib
import logging
from typing import Awaitable, Optional, TypeVar

from .errors import CancelReason, FactCheckCancelledError, FactCheckTimeoutError, SessionAbortedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CancellationToken:
    """One-shot cancellation signal with an optional timeout timer.

    The timeout timer and explicit cancellation both feed ``cancel()``.
    Cancellation is idempotent: the first reason wins and the token never
    resets.
    """

    def __init__(self):
        self._event = asyncio.Event()
        self._reason: Optional[CancelReason] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def is_cancelled(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> Optional[CancelReason]:
        return self._reason

    def cancel(self, reason: CancelReason = CancelReason.USER) -> bool:
        """Trigger the token.

        Returns:
            True if this call triggered the token, False if it already was
        """
        if self._reason is not None:
            return False
        self._reason = reason
        self._event.set()
        self.clear_timer()
        logger.info(f"🛑 Cancellation token triggered: {reason.value}")
        return True

    def start_timer(self, timeout: float) -> None:
        """Cancel the token with ``CancelReason.TIMEOUT`` after ``timeout`` seconds."""
        self.clear_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(timeout, self.cancel, CancelReason.TIMEOUT)

    def clear_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    @property
    def has_timer(self) -> bool:
        return self._timer is not None

    def error(self) -> SessionAbortedError:
        """Build the error matching the cancellation reason."""
        if self._reason == CancelReason.TIMEOUT:
            return FactCheckTimeoutError()
        return FactCheckCancelledError(self._reason or CancelReason.USER)

    def raise_if_cancelled(self) -> None:
        if self._reason is not None:
            raise self.error()

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first.

        When the token fires the pending operation is cancelled and the
        matching ``SessionAbortedError`` is raised.
        """
        self.raise_if_cancelled()
        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task in done:
            return task.result()

        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        raise self.error()
