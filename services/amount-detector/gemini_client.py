"""Async HTTP client for the Gemini generateContent REST endpoint.

One request per call: no retries, no streaming. Replies are normalized into
ModelReply so callers never inspect the raw response shape.
"""

import logging

import httpx

from config import Settings
from models import ModelReply

logger = logging.getLogger(__name__)


class GeminiServiceError(Exception):
    """Gemini could not be reached or returned a non-200 response."""


class GeminiClient:
    """Thin async wrapper around ``models/{model}:generateContent``."""

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.model = model
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"X-goog-api-key": api_key},
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            base_url=settings.GEMINI_API_BASE,
            timeout=settings.GEMINI_TIMEOUT_SECONDS,
        )

    async def aclose(self):
        await self._client.aclose()

    async def generate_content(self, contents: list[dict], generation_config: dict) -> ModelReply:
        """Send a single generateContent request and return the normalized reply.

        Raises GeminiServiceError on transport failures and non-200 responses.
        """
        payload = {"contents": contents, "generationConfig": generation_config}

        try:
            resp = await self._client.post(f"/models/{self.model}:generateContent", json=payload)
        except httpx.HTTPError as e:
            logger.error("Gemini request failed: %s", e)
            raise GeminiServiceError(f"Cannot reach Gemini: {e}") from e

        if resp.status_code != 200:
            detail = _error_detail(resp)
            logger.error("Gemini error %d: %s", resp.status_code, detail)
            raise GeminiServiceError(detail)

        return reply_from_response(resp.json())


def reply_from_response(data: dict) -> ModelReply:
    """Collapse a generateContent response body into a ModelReply.

    Text is joined from the first candidate's parts. A bare top-level
    ``text`` field is accepted as well. Anything else yields empty text.
    """
    text = ""
    finish_reason = None

    candidates = data.get("candidates") or []
    if candidates:
        first = candidates[0]
        finish_reason = first.get("finishReason")
        parts = (first.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
    elif isinstance(data.get("text"), str):
        text = data["text"]

    usage = data.get("usageMetadata") or {}
    return ModelReply(
        text=text,
        finish_reason=finish_reason,
        prompt_tokens=usage.get("promptTokenCount", 0),
        output_tokens=usage.get("candidatesTokenCount", 0),
    )


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return f"HTTP {resp.status_code}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    return f"HTTP {resp.status_code}"
