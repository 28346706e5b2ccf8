"""Structured-output schema sent to Gemini with every extraction request.

The provider is asked to honor this contract; it is not enforced locally
unless VALIDATE_RESULT is enabled (see models.ExtractionResult).
"""

AMOUNT_TYPES = ["total_bill", "paid", "due", "discount", "tax", "subtotal", "other"]
RESULT_STATUSES = ["ok", "no_amounts_found", "document_too_noisy"]

AMOUNT_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "currency": {
            "type": "string",
            "description": "Three-letter currency code (e.g., INR, USD).",
        },
        "ocr_confidence": {
            "type": "number",
            "description": "Overall confidence (0-1) for OCR/extraction step.",
        },
        "amounts": {
            "type": "array",
            "description": "List of financial amounts extracted, normalized, and classified.",
            "items": {
                "type": "object",
                "properties": {
                    "type": {
                        "type": "string",
                        "enum": AMOUNT_TYPES,
                        "description": "Classification of the amount based on context.",
                    },
                    "value": {
                        "type": "number",
                        "description": "Normalized numeric value, corrected for OCR errors.",
                    },
                    "source": {
                        "type": "string",
                        "description": "Raw text snippet (provenance) where this amount was found.",
                    },
                    "confidence": {
                        "type": "number",
                        "description": "Confidence (0-1) that this classification is correct.",
                    },
                },
                "required": ["type", "value", "source", "confidence"],
            },
        },
        "status": {
            "type": "string",
            "enum": RESULT_STATUSES,
            "description": "Processing status. 'ok' if successful, otherwise guardrail.",
        },
    },
    "required": ["currency", "amounts", "status", "ocr_confidence"],
}
