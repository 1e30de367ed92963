"""
Request Executor for InterviewPilot

Wraps a single AI provider call with:
- Rate limit gating (immediate rejection, never queued)
- A per-attempt deadline
- Bounded retries with linear backoff for transient failures
- Error classification into the service error taxonomy
"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, TypeVar

from src.core.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Substrings the provider uses to signal a broken credential
AUTH_ERROR_MARKERS = ("API_KEY_INVALID", "PERMISSION_DENIED", "UNAUTHENTICATED")

# Substrings the provider uses to signal an exhausted quota
QUOTA_ERROR_MARKERS = ("QUOTA_EXCEEDED", "RESOURCE_EXHAUSTED")


class ErrorKind(str, Enum):
    """Service error taxonomy."""

    AUTH_ERROR = "AUTH_ERROR"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    TIMEOUT = "TIMEOUT"
    PARSE_ERROR = "PARSE_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    REQUEST_FAILED = "REQUEST_FAILED"

    @property
    def retryable(self) -> bool:
        return self in _RETRYABLE_KINDS


_RETRYABLE_KINDS = {
    ErrorKind.QUOTA_EXCEEDED,
    ErrorKind.RATE_LIMIT_EXCEEDED,
    ErrorKind.TIMEOUT,
    ErrorKind.PARSE_ERROR,
    ErrorKind.INVALID_RESPONSE,
}


class AIServiceError(Exception):
    """Raised by the AI service layer with a classified kind."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        retryable: bool | None = None,
        wait_ms: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.retryable = kind.retryable if retryable is None else retryable
        self.wait_ms = wait_ms

    def __repr__(self) -> str:
        return f"AIServiceError(kind={self.kind.value}, message={self.message!r})"


def classify_error(error: BaseException) -> ErrorKind | None:
    """
    Classify a provider failure by its message.

    Returns AUTH_ERROR or QUOTA_EXCEEDED for the non-retried failures,
    None for anything that should be treated as transient.
    """
    if isinstance(error, AIServiceError) and error.kind in (
        ErrorKind.AUTH_ERROR,
        ErrorKind.QUOTA_EXCEEDED,
    ):
        return error.kind

    message = str(error)
    if any(marker in message for marker in AUTH_ERROR_MARKERS):
        return ErrorKind.AUTH_ERROR
    if any(marker in message for marker in QUOTA_ERROR_MARKERS):
        return ErrorKind.QUOTA_EXCEEDED
    return None


class RequestExecutor:
    """
    Runs provider operations with timeout, retry and classification.

    Only transient or unknown failures are retried here. Auth and quota
    failures propagate immediately so the calling service can fall back.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        max_attempts: int = 3,
        retry_delay_seconds: float = 1.0,
        timeout_seconds: float = 30.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """
        Args:
            rate_limiter: Shared sliding-window limiter
            max_attempts: Total attempts for transient failures
            retry_delay_seconds: Backoff unit, multiplied by the attempt number
            timeout_seconds: Deadline for a single attempt
            sleep: Awaitable sleep, injectable for tests
        """
        self.rate_limiter = rate_limiter
        self.max_attempts = max_attempts
        self.retry_delay_seconds = retry_delay_seconds
        self.timeout_seconds = timeout_seconds
        self._sleep = sleep

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        context: str,
    ) -> T:
        """
        Execute a provider operation.

        Args:
            operation: Zero-argument coroutine function performing one call
            context: Label used in logs and error messages

        Returns:
            The operation's result from the first successful attempt

        Raises:
            AIServiceError: RATE_LIMIT_EXCEEDED, AUTH_ERROR, QUOTA_EXCEEDED
                or REQUEST_FAILED
        """
        # The check and the first slot are taken without yielding to the loop
        if not self.rate_limiter.try_acquire():
            wait_ms = self.rate_limiter.get_wait_time_ms()
            wait_seconds = -(-wait_ms // 1000)
            logger.warning(f"[{context}] Rate limit reached, rejecting request (wait {wait_ms}ms)")
            raise AIServiceError(
                f"Rate limit exceeded. Please wait {wait_seconds} seconds.",
                ErrorKind.RATE_LIMIT_EXCEEDED,
                wait_ms=wait_ms,
            )

        last_error: BaseException | None = None

        for attempt in range(1, self.max_attempts + 1):
            if attempt > 1:
                self.rate_limiter.record_request()

            try:
                # A timed-out attempt is cancelled; its result is never observed
                return await asyncio.wait_for(operation(), timeout=self.timeout_seconds)

            except asyncio.TimeoutError:
                last_error = AIServiceError("Request timeout", ErrorKind.TIMEOUT)
                logger.warning(
                    f"[{context}] Attempt {attempt}/{self.max_attempts} timed out "
                    f"after {self.timeout_seconds}s"
                )

            except Exception as e:
                last_error = e
                kind = classify_error(e)

                if kind == ErrorKind.AUTH_ERROR:
                    logger.error(f"[{context}] Authentication failed: {e}")
                    raise AIServiceError(
                        f"AI API authentication failed: {e}",
                        ErrorKind.AUTH_ERROR,
                        retryable=False,
                    ) from e

                if kind == ErrorKind.QUOTA_EXCEEDED:
                    logger.error(f"[{context}] Quota exceeded: {e}")
                    raise AIServiceError(
                        "AI API quota exceeded. Please try again later.",
                        ErrorKind.QUOTA_EXCEEDED,
                    ) from e

                logger.warning(f"[{context}] Attempt {attempt}/{self.max_attempts} failed: {e}")

            if attempt < self.max_attempts:
                await self._sleep(self.retry_delay_seconds * attempt)

        raise AIServiceError(
            f"AI request failed after {self.max_attempts} attempts: {last_error}",
            ErrorKind.REQUEST_FAILED,
            retryable=False,
        ) from last_error
