"""
AI Service for InterviewPilot

The single entry point every consumer uses to reach the text provider.
Built once at the composition root and passed by reference.

Tracks provider health:
- Availability check
- Last failure, with a persistent auth-failure indicator

Integrated with Langfuse for observability and tracing.
"""

import logging
from datetime import datetime
from typing import Any

from langfuse import Langfuse
from pydantic import BaseModel, Field

from src.config.settings import Settings
from src.core.provider import GeminiProvider, TextProvider
from src.core.rate_limiter import RateLimiter
from src.core.request_executor import AIServiceError, ErrorKind, RequestExecutor

logger = logging.getLogger(__name__)

HEALTH_CHECK_PROMPT = "Test connection"


class AIServiceStatus(BaseModel):
    """Provider health as last observed."""

    available: bool = False
    model: str
    last_checked: datetime = Field(default_factory=datetime.utcnow)
    error: str | None = None
    auth_error: bool = Field(
        default=False,
        description="The provider rejected our credentials; fallbacks cannot fix this"
    )


def build_tracer(settings: Settings) -> Langfuse | None:
    """Langfuse client when tracing is enabled and keys are configured."""
    if not settings.langfuse_enabled:
        return None
    if not (settings.langfuse_secret_key and settings.langfuse_public_key):
        logger.info("Langfuse keys not configured, tracing disabled")
        return None

    try:
        tracer = Langfuse(
            secret_key=settings.langfuse_secret_key,
            public_key=settings.langfuse_public_key,
            host=settings.langfuse_base_url,
        )
    except Exception as e:
        logger.warning(f"Failed to initialize Langfuse: {e}")
        return None

    logger.info("Langfuse initialized for LLM observability")
    return tracer


class AIService:
    """
    Provider access with rate limiting, retries and health tracking.

    Services call ``generate_text``; the orchestrator and API read
    ``status`` to decide whether to show an explicit error indicator.

    Features:
    - Every provider call runs inside a Langfuse span when tracing is on
    - Scores (AI or fallback) are reported with ``record_score``
    """

    def __init__(
        self,
        provider: TextProvider,
        executor: RequestExecutor,
        offline: bool = False,
        tracer: Any = None,
    ):
        """
        Args:
            provider: Text generation backend
            executor: Request executor wrapping every provider call
            offline: Serve fallbacks only, never call the provider
            tracer: Langfuse client; tracing is off when omitted
        """
        self.provider = provider
        self.executor = executor
        self.offline = offline
        self.tracer = tracer
        self._status = AIServiceStatus(model=provider.model_name)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        provider: TextProvider | None = None,
    ) -> "AIService":
        """Build the service, its Gemini provider and the shared rate limiter."""
        rate_limiter = RateLimiter(
            max_requests=settings.ai_requests_per_minute,
            window_ms=settings.ai_rate_window_seconds * 1000,
        )
        executor = RequestExecutor(
            rate_limiter,
            max_attempts=settings.ai_max_retries,
            retry_delay_seconds=settings.ai_retry_delay_seconds,
            timeout_seconds=settings.ai_request_timeout_seconds,
        )
        provider = provider or GeminiProvider(
            api_key=settings.gemini_api_key,
            model_name=settings.gemini_model,
            base_url=settings.gemini_base_url,
        )
        return cls(
            provider,
            executor,
            offline=settings.offline_mode,
            tracer=build_tracer(settings),
        )

    async def close(self):
        """Release the provider's HTTP resources and flush Langfuse."""
        close = getattr(self.provider, "close", None)
        if close is not None:
            await close()

        if self.tracer:
            try:
                self.tracer.flush()
            except Exception as e:
                logger.warning(f"Failed to flush Langfuse: {e}")

    @property
    def status(self) -> AIServiceStatus:
        return self._status.model_copy()

    @property
    def rate_limiter(self) -> RateLimiter:
        return self.executor.rate_limiter

    async def generate_text(self, prompt: str, context: str) -> str:
        """
        Generate text through the request executor.

        Raises:
            AIServiceError: Any classified failure (offline mode raises
                REQUEST_FAILED without touching the provider)
        """
        if self.offline:
            raise AIServiceError(
                "AI service is running in offline mode",
                ErrorKind.REQUEST_FAILED,
                retryable=False,
            )

        span = self._start_span(context, {"model": self.provider.model_name, "prompt_length": len(prompt)})

        try:
            text = await self.executor.execute(
                lambda: self.provider.generate_text(prompt),
                context,
            )
        except AIServiceError as e:
            self._record_failure(e)
            self._end_span(span, {"error": e.kind.value, "message": e.message})
            raise

        self._record_success()
        self._end_span(span, {"response_length": len(text)})
        return text

    def record_score(self, name: str, value: float, comment: str) -> None:
        """Report a score to Langfuse; a no-op when tracing is off."""
        if not self.tracer:
            return
        try:
            self.tracer.create_score(name=name, value=value, comment=comment)
        except Exception as e:
            logger.warning(f"Langfuse score failed: {e}")

    async def check_availability(self) -> AIServiceStatus:
        """Check the provider with a trivial prompt."""
        if self.offline:
            self._status = AIServiceStatus(
                available=False,
                model=self.provider.model_name,
                error="Offline mode",
            )
            return self.status

        try:
            await self.generate_text(HEALTH_CHECK_PROMPT, "health_check")
        except AIServiceError as e:
            logger.warning(f"AI service not available: {e}")

        return self.status

    def _start_span(self, name: str, metadata: dict[str, Any]) -> Any:
        if not self.tracer:
            return None
        try:
            return self.tracer.start_span(name=name, metadata=metadata)
        except Exception as e:
            logger.warning(f"Langfuse span start failed: {e}")
            return None

    def _end_span(self, span: Any, output: dict[str, Any]) -> None:
        if span is None:
            return
        try:
            span.end(output=output)
        except Exception as e:
            logger.warning(f"Langfuse span end failed: {e}")

    def _record_success(self) -> None:
        self._status = AIServiceStatus(available=True, model=self.provider.model_name)

    def _record_failure(self, error: AIServiceError) -> None:
        # Rate limiting is local bookkeeping, not a verdict on provider health
        if error.kind == ErrorKind.RATE_LIMIT_EXCEEDED:
            return
        self._status = AIServiceStatus(
            available=False,
            model=self.provider.model_name,
            error=error.message,
            auth_error=error.kind == ErrorKind.AUTH_ERROR,
        )
