"""FastAPI amount detection service.

Accepts a medical bill image, asks Gemini for the financial amounts on it
under a fixed JSON schema and returns the parsed result.
Uploads live on disk only for the duration of the request.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile

from config import Settings
from extraction import ExtractionError, detect_amounts
from gemini_client import GeminiClient
from models import ErrorResponse
from uploads import stored_upload

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

router = APIRouter()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_client(request: Request) -> GeminiClient:
    return request.app.state.client


def error_response(status_code: int, reason: str, raw_model_output: str | None = None) -> JSONResponse:
    body = ErrorResponse(reason=reason, raw_model_output=raw_model_output)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@router.post("/api/v1/detect-amounts")
async def detect_amounts_endpoint(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: GeminiClient = Depends(get_client),
):
    """Extract, normalize and classify the amounts on an uploaded bill image.

    Expects exactly one file part named ``document``; text parts of that name
    do not count as a file.
    """
    async with request.form() as form:
        files = [value for value in form.getlist("document") if isinstance(value, UploadFile)]
        if not files:
            return error_response(400, "No document file uploaded.")
        if len(files) > 1:
            return error_response(400, "Exactly one document file is accepted.")

        return await _process_document(files[0], settings, client)


async def _process_document(document: UploadFile, settings: Settings, client: GeminiClient) -> JSONResponse:
    try:
        async with stored_upload(document, settings.UPLOAD_DIR, settings.DEFAULT_MIME_TYPE) as stored:
            # Log size and type only, never document content
            logger.info("Processing document: size=%d bytes mime=%s", stored.size, stored.mime_type)
            result = await detect_amounts(
                stored,
                client,
                temperature=settings.GEMINI_TEMPERATURE,
                validate=settings.VALIDATE_RESULT,
            )
    except ExtractionError as e:
        return error_response(e.status_code, e.reason, e.raw_model_output)
    except Exception as e:
        logger.exception("Error processing document with Gemini")
        return error_response(500, f"Internal processing error: {e}")

    return JSONResponse(content=result)


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """Return service status and the configured model."""
    return {"status": "healthy", "model": settings.GEMINI_MODEL}


def create_app(settings: Settings | None = None, client: GeminiClient | None = None) -> FastAPI:
    """Build the app; settings and client are created at startup unless injected."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings or Settings()
        app.state.client = client or GeminiClient.from_settings(app.state.settings)
        Path(app.state.settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
        logger.info(
            "Amount detector ready (model=%s, upload_dir=%s)",
            app.state.settings.GEMINI_MODEL,
            app.state.settings.UPLOAD_DIR,
        )

        yield

        if client is None:
            await app.state.client.aclose()

    app = FastAPI(title="Medical Bill Amount Detector", version="1.0.0", lifespan=lifespan)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=Settings().PORT)
