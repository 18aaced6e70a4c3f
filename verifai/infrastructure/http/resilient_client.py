"""HTTP request client with bounded retries and exponential backoff."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import httpx

from ...domain.cancellation import CancellationToken
from ...domain.errors import FatalRequestError, RequestError, TransientNetworkError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = {429}

# Signatures of transient transport failures, matched against the error text
TRANSIENT_ERROR_MARKERS = (
    "econnrefused",
    "connection refused",
    "etimedout",
    "timed out",
    "timeout",
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo",
    "network is unreachable",
    "429",
    "502",
    "503",
    "504",
)


def is_retryable_error(error: BaseException) -> bool:
    """Check if a transport error is transient (connection, timeout, DNS)."""
    if isinstance(error, (httpx.TimeoutException, httpx.ConnectError, httpx.NetworkError)):
        return True
    message = str(error).lower()
    return any(marker in message for marker in TRANSIENT_ERROR_MARKERS)


def is_retryable_status(status_code: int) -> bool:
    return status_code >= 500 or status_code in RETRYABLE_STATUS_CODES


class ResilientRequestClient:
    """Sends ``httpx`` requests, retrying transient failures.

    The delay before attempt ``n`` (n >= 2) is ``base_delay * 2 ** (n - 2)``.
    Client errors other than 429 fail immediately; cancellation is never
    retried.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the client.

        Args:
            client: Underlying HTTP client
            max_attempts: Total number of attempts, including the first
            base_delay: Backoff delay before the second attempt, in seconds
            sleep: Coroutine used for backoff delays
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._client = client
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._sleep = sleep

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def backoff_delay(self, attempt: int) -> float:
        """Delay to wait before ``attempt`` (1-based)."""
        if attempt < 2:
            return 0.0
        return self._base_delay * 2 ** (attempt - 2)

    async def send(
        self,
        request: httpx.Request,
        cancel_token: Optional[CancellationToken] = None,
    ) -> httpx.Response:
        """Send a request, retrying transient failures.

        Args:
            request: Request to send
            cancel_token: Session token; aborts dispatch and backoff

        Returns:
            A response with a non-error status

        Raises:
            SessionAbortedError: If the token fired
            FatalRequestError: On a non-retryable status or transport error
            TransientNetworkError: When retries are exhausted
        """
        last_error: Optional[RequestError] = None

        for attempt in range(1, self._max_attempts + 1):
            if attempt > 1:
                delay = self.backoff_delay(attempt)
                logger.info(
                    f"🔁 Retry {attempt - 1}/{self._max_attempts - 1} for {request.method} {request.url} "
                    f"after {delay:.1f}s: {last_error}"
                )
                await self._await(self._sleep(delay), cancel_token)

            if cancel_token is not None:
                cancel_token.raise_if_cancelled()

            try:
                response = await self._await(self._client.send(request), cancel_token)
            except httpx.HTTPError as e:
                if not is_retryable_error(e):
                    raise FatalRequestError(f"Request to {request.url} failed: {e}") from e
                last_error = TransientNetworkError(f"Request to {request.url} failed: {e}")
                last_error.__cause__ = e
                continue

            if response.is_success or response.is_redirect:
                return response

            detail = response.text[:100]
            if is_retryable_status(response.status_code):
                last_error = TransientNetworkError(
                    f"Server error ({response.status_code}): {detail}",
                    status_code=response.status_code,
                )
                continue

            raise FatalRequestError(
                f"Request failed ({response.status_code}): {detail}",
                status_code=response.status_code,
            )

        logger.warning(f"⚠️ Giving up on {request.method} {request.url} after {self._max_attempts} attempt(s)")
        raise last_error

    @staticmethod
    async def _await(awaitable, cancel_token: Optional[CancellationToken]):
        if cancel_token is None:
            return await awaitable
        return await cancel_token.guard(awaitable)
