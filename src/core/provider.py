"""
Text generation provider boundary.

The core only needs one capability from the outside world:
turn a prompt into text. GeminiProvider implements it against the
Gemini REST API; tests substitute scripted providers.
"""

import logging
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)


class TextProvider(Protocol):
    """Anything that can generate text from a prompt."""

    model_name: str

    async def generate_text(self, prompt: str) -> str: ...


class ProviderError(Exception):
    """Transport or API-level failure reported by the provider."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class GeminiProvider:
    """
    Gemini generateContent client over httpx.

    Error messages carry the API's status and reason codes
    (e.g. ``API_KEY_INVALID``, ``RESOURCE_EXHAUSTED``) so the request
    executor can classify them.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "models/gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    @property
    def _endpoint(self) -> str:
        model = self.model_name if self.model_name.startswith("models/") else f"models/{self.model_name}"
        return f"/{model}:generateContent"

    async def generate_text(self, prompt: str) -> str:
        """
        Send a single-turn prompt and return the concatenated text parts.

        Raises:
            ProviderError: Missing key, HTTP error or empty response
        """
        if not self.api_key:
            raise ProviderError("API_KEY_INVALID: no Gemini API key configured")

        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": prompt}]}
            ],
        }

        try:
            response = await self.client.post(
                self._endpoint,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
            )
        except httpx.HTTPError as e:
            logger.error(f"Gemini transport error: {e}")
            raise ProviderError(f"Gemini transport failed: {e}") from e

        if response.status_code >= 400:
            raise ProviderError(self._describe_error(response), status_code=response.status_code)

        return self._extract_content(response.json())

    def _describe_error(self, response: httpx.Response) -> str:
        """Build an error message that keeps the API's status and reasons."""
        try:
            error = response.json().get("error", {})
        except ValueError:
            return f"Gemini API error {response.status_code}: {response.text[:200]}"

        reasons = [
            detail.get("reason")
            for detail in error.get("details", [])
            if isinstance(detail, dict) and detail.get("reason")
        ]
        parts = [f"Gemini API error {response.status_code}"]
        if error.get("status"):
            parts.append(error["status"])
        if reasons:
            parts.append(",".join(reasons))
        message = " ".join(parts)
        if error.get("message"):
            message = f"{message}: {error['message']}"
        return message

    def _extract_content(self, result: dict[str, Any]) -> str:
        """Extract text content from a generateContent response."""
        candidates = result.get("candidates") or []
        if not candidates:
            feedback = result.get("promptFeedback", {})
            raise ProviderError(f"Gemini returned no candidates: {feedback}")

        parts = candidates[0].get("content", {}).get("parts", [])
        text_parts = [part["text"] for part in parts if isinstance(part, dict) and "text" in part]
        return "".join(text_parts)
