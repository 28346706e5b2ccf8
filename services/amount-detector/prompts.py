"""Fixed extraction instruction sent alongside the bill image."""

AMOUNT_PROMPT = """Analyze the attached image, which is a medical bill or financial receipt.
Perform the following steps and return the result as a single JSON object strictly following the provided schema:

1. OCR/Extraction: Extract all relevant text and amounts, handling OCR errors. Provide an overall "ocr_confidence".
2. Normalization: Convert extracted tokens into clean numeric 'value' fields.
3. Classification: Classify each amount into the required 'type' and provide a per-item 'confidence'.
4. Provenance: Include the raw text snippet for the 'source' field.

If the document is too blurry, crumpled, or has no amounts, return 'status' = 'document_too_noisy' or 'no_amounts_found'
with empty arrays for amounts, but ensure all other required fields exist."""
