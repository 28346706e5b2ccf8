"""Environment-based configuration for the amount detection service."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Amount detector settings, loaded from environment variables (and .env)."""

    # Provider
    GEMINI_API_KEY: str
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_TEMPERATURE: float = 0.1
    GEMINI_TIMEOUT_SECONDS: float | None = None  # None = wait indefinitely

    # Uploads
    UPLOAD_DIR: str = "uploads"
    DEFAULT_MIME_TYPE: str = "image/jpeg"

    # Reject model output that does not match AMOUNT_SCHEMA (off = pass-through)
    VALIDATE_RESULT: bool = False

    # Server
    PORT: int = 3000

    model_config = {
        "env_prefix": "",
        "case_sensitive": True,
        "env_file": ".env",
        "extra": "ignore",
    }
