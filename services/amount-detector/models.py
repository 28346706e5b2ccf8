"""Pydantic models for extraction results, error envelopes and provider replies."""

from typing import Literal

from pydantic import BaseModel, Field

AmountType = Literal["total_bill", "paid", "due", "discount", "tax", "subtotal", "other"]
ResultStatus = Literal["ok", "no_amounts_found", "document_too_noisy"]


class AmountItem(BaseModel):
    type: AmountType
    value: float
    source: str
    confidence: float = Field(ge=0.0, le=1.0)


class ExtractionResult(BaseModel):
    currency: str
    ocr_confidence: float = Field(ge=0.0, le=1.0)
    amounts: list[AmountItem]
    status: ResultStatus


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    reason: str
    raw_model_output: str | None = None


class ModelReply(BaseModel):
    """Provider response normalized to the fields the service cares about."""

    text: str = ""
    finish_reason: str | None = None
    prompt_tokens: int = 0
    output_tokens: int = 0
