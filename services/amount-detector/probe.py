"""Connectivity probe: one plain generateContent call to check the API key.

Usage: python probe.py
Exits 0 and prints the raw response on success, 1 on any failure.
"""

import json
import logging
import sys

import httpx
from pydantic import ValidationError

from config import Settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

PROBE_PROMPT = "Hello from Gemini 2.0 via Python!"


def run_probe(settings: Settings, transport: httpx.BaseTransport | None = None) -> dict:
    """POST the probe prompt and return the decoded response body.

    Raises httpx.HTTPError on transport failures and non-2xx statuses.
    """
    url = f"{settings.GEMINI_API_BASE.rstrip('/')}/models/{settings.GEMINI_MODEL}:generateContent"
    payload = {"contents": [{"parts": [{"text": PROBE_PROMPT}]}]}

    with httpx.Client(timeout=httpx.Timeout(settings.GEMINI_TIMEOUT_SECONDS), transport=transport) as client:
        resp = client.post(url, json=payload, headers={"X-goog-api-key": settings.GEMINI_API_KEY})
        resp.raise_for_status()
        return resp.json()


def main() -> int:
    try:
        settings = Settings()
    except ValidationError:
        logger.error("GEMINI_API_KEY is not set")
        return 1

    try:
        data = run_probe(settings)
    except httpx.HTTPStatusError as e:
        logger.error("Gemini returned HTTP %d: %s", e.response.status_code, e.response.text[:500])
        return 1
    except httpx.HTTPError as e:
        logger.error("Gemini request failed: %s", e)
        return 1
    except ValueError:
        logger.error("Gemini returned a body that is not JSON")
        return 1

    print(f"Gemini {settings.GEMINI_MODEL} response:")
    print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
