"""Application configuration loaded from environment variables."""

import os
from pathlib import Path

from pydantic import BaseModel

from exceptions import ConfigurationError

DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024


class GeminiConfig(BaseModel, frozen=True):
    """Gemini configuration shared by transcription and summarization."""

    api_key: str
    transcription_model: str = "gemini-2.5-flash"
    summary_model: str = "gemini-2.5-flash"
    transcription_temperature: float = 0.2
    summary_temperature: float = 0.3
    file_poll_interval_seconds: float = 1.0
    file_poll_timeout_seconds: float = 120.0


class UploadConfig(BaseModel, frozen=True):
    """Multipart upload limits and temp storage."""

    max_file_size_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    temp_dir: Path | None = None


class AppConfig(BaseModel, frozen=True):
    """Root application configuration."""

    gemini: GeminiConfig
    upload: UploadConfig = UploadConfig()


def load_config() -> AppConfig:
    """
    Loads configuration from environment variables.

    Raises:
        ConfigurationError: If a numeric setting cannot be parsed.
    """
    try:
        return _config_from_env()
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}", cause=e) from e


def _config_from_env() -> AppConfig:
    temp_dir = os.getenv("UPLOAD_TEMP_DIR")
    return AppConfig(
        gemini=GeminiConfig(
            api_key=os.getenv("GEMINI_API_KEY", ""),
            transcription_model=os.getenv(
                "GEMINI_TRANSCRIPTION_MODEL", "gemini-2.5-flash"
            ),
            summary_model=os.getenv("GEMINI_SUMMARY_MODEL", "gemini-2.5-flash"),
            transcription_temperature=float(
                os.getenv("TRANSCRIPTION_TEMPERATURE", "0.2")
            ),
            summary_temperature=float(os.getenv("SUMMARY_TEMPERATURE", "0.3")),
            file_poll_interval_seconds=float(
                os.getenv("GEMINI_FILE_POLL_INTERVAL_SECONDS", "1.0")
            ),
            file_poll_timeout_seconds=float(
                os.getenv("GEMINI_FILE_POLL_TIMEOUT_SECONDS", "120")
            ),
        ),
        upload=UploadConfig(
            max_file_size_bytes=int(
                os.getenv("MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))
            ),
            temp_dir=Path(temp_dir) if temp_dir else None,
        ),
    )
