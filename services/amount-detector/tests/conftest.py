"""Shared test fixtures for amount detector tests."""

import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add parent directory to path so we can import the modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Settings
from models import ModelReply


class FakeGeminiClient:
    """Stands in for GeminiClient; records calls and the upload dir contents."""

    model = "gemini-test"

    def __init__(self, upload_dir: str | None = None):
        self.upload_dir = upload_dir
        self.text = ""
        self.error: Exception | None = None
        self.calls: list[tuple[list[dict], dict]] = []
        self.files_during_call: list[Path] = []

    async def generate_content(self, contents: list[dict], generation_config: dict) -> ModelReply:
        self.calls.append((contents, generation_config))
        if self.upload_dir is not None and Path(self.upload_dir).is_dir():
            self.files_during_call = list(Path(self.upload_dir).iterdir())
        if self.error is not None:
            raise self.error
        return ModelReply(text=self.text)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(GEMINI_API_KEY="test-key", UPLOAD_DIR=str(tmp_path / "uploads"))


@pytest.fixture
def upload_dir(settings: Settings) -> Path:
    return Path(settings.UPLOAD_DIR)


@pytest.fixture
def fake_gemini(settings: Settings) -> FakeGeminiClient:
    return FakeGeminiClient(upload_dir=settings.UPLOAD_DIR)


@pytest.fixture
def api(settings: Settings, fake_gemini: FakeGeminiClient):
    """TestClient with lifespan running and the fake provider injected."""
    from main import create_app

    with TestClient(create_app(settings=settings, client=fake_gemini)) as client:
        yield client


@pytest.fixture
def sample_image_bytes() -> bytes:
    """JPEG magic bytes followed by filler; the service never decodes images."""
    return b"\xff\xd8\xff\xe0" + b"\x00" * 64


@pytest.fixture
def valid_result() -> dict:
    return {
        "currency": "INR",
        "ocr_confidence": 0.9,
        "amounts": [
            {"type": "total_bill", "value": 500, "source": "Total: 500", "confidence": 0.95},
        ],
        "status": "ok",
    }


@pytest.fixture
def valid_result_text(valid_result: dict) -> str:
    return json.dumps(valid_result)


@pytest.fixture
def fenced_result_text(valid_result_text: str) -> str:
    """Model reply wrapped in a markdown code fence."""
    return f"```json\n{valid_result_text}\n```"
