"""Extraction pipeline: build the Gemini request, strip fences, parse JSON."""

import asyncio
import base64
import json
import logging
import re
import time
from typing import Any

from pydantic import ValidationError

from gemini_client import GeminiClient
from models import ExtractionResult
from prompts import AMOUNT_PROMPT
from schema import AMOUNT_SCHEMA
from uploads import UploadedDocument

logger = logging.getLogger(__name__)

_OPENING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\s*```$")


class ExtractionError(Exception):
    """A failure that is reported to the client as an error envelope."""

    status_code = 500
    reason = "Extraction failed."

    def __init__(self, raw_model_output: str | None = None):
        self.raw_model_output = raw_model_output
        super().__init__(self.reason)


class EmptyModelResponse(ExtractionError):
    reason = "Model returned an empty response."


class InvalidModelJSON(ExtractionError):
    reason = "Invalid JSON returned by model."


class SchemaMismatch(ExtractionError):
    reason = "Model output does not match the extraction schema."


def build_contents(image_bytes: bytes, mime_type: str) -> list[dict]:
    """Single user turn: the inlined image followed by the instruction."""
    return [
        {
            "role": "user",
            "parts": [
                {
                    "inlineData": {
                        "mimeType": mime_type,
                        "data": base64.b64encode(image_bytes).decode(),
                    }
                },
                {"text": AMOUNT_PROMPT},
            ],
        }
    ]


def build_generation_config(temperature: float = 0.1) -> dict:
    return {
        "responseMimeType": "application/json",
        "responseSchema": AMOUNT_SCHEMA,
        "temperature": temperature,
    }


def _strip_once(text: str) -> str:
    cleaned = _OPENING_FENCE.sub("", text.strip())
    return _CLOSING_FENCE.sub("", cleaned).strip()


def strip_json_fence(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence; repeated calls are no-ops."""
    cleaned = _strip_once(text)
    while (again := _strip_once(cleaned)) != cleaned:
        cleaned = again
    return cleaned


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def parse_model_output(raw: str) -> Any:
    """Parse the model text into JSON.

    Raises EmptyModelResponse for empty text and InvalidModelJSON (carrying
    the fence-stripped text) when it does not parse. NaN and Infinity are
    rejected as in strict JSON.
    """
    if not raw:
        raise EmptyModelResponse()

    cleaned = strip_json_fence(raw)
    try:
        return json.loads(cleaned, parse_constant=_reject_constant)
    except ValueError as e:
        logger.warning("Could not parse JSON from model response (%d chars): %s", len(cleaned), e)
        raise InvalidModelJSON(raw_model_output=cleaned) from e


def validate_result(result: Any) -> None:
    """Check a parsed result against ExtractionResult without altering it."""
    try:
        ExtractionResult.model_validate(result)
    except ValidationError as e:
        logger.warning("Model output failed schema validation: %d error(s)", e.error_count())
        raise SchemaMismatch(raw_model_output=json.dumps(result)) from e


async def detect_amounts(
    document: UploadedDocument,
    client: GeminiClient,
    temperature: float = 0.1,
    validate: bool = False,
) -> Any:
    """Run the pipeline for one stored document: read -> Gemini -> parse."""
    start = time.monotonic()

    image_bytes = await asyncio.to_thread(document.read_bytes)
    reply = await client.generate_content(
        build_contents(image_bytes, document.mime_type),
        build_generation_config(temperature),
    )

    elapsed_ms = int((time.monotonic() - start) * 1000)
    logger.info(
        "Gemini replied in %dms: %d chars, finish_reason=%s, tokens=%d/%d",
        elapsed_ms,
        len(reply.text),
        reply.finish_reason,
        reply.prompt_tokens,
        reply.output_tokens,
    )

    result = parse_model_output(reply.text)
    if validate:
        validate_result(result)
    return result
