"""FastAPI dependency injection configuration."""

from google import genai
from starlette.requests import Request

from common.logging import setup_logging
from config import AppConfig
from domain import SYSTEM_PROMPT
from exceptions import ConfigurationError
from handlers import SessionSummaryHandler
from infrastructure import GeminiLLMService, GeminiTranscriber, MultipartIngester
from infrastructure.interfaces import LLMService, TranscriptionService

logger = setup_logging()


def build_gemini_services(
    config: AppConfig,
) -> tuple[TranscriptionService, LLMService]:
    """Creates the Gemini-backed transcription and summary services."""
    client = genai.Client(api_key=config.gemini.api_key)
    transcriber = GeminiTranscriber(
        client,
        config.gemini.transcription_model,
        temperature=config.gemini.transcription_temperature,
        poll_interval_seconds=config.gemini.file_poll_interval_seconds,
        poll_timeout_seconds=config.gemini.file_poll_timeout_seconds,
    )
    llm = GeminiLLMService(
        client,
        config.gemini.summary_model,
        SYSTEM_PROMPT,
        temperature=config.gemini.summary_temperature,
    )
    return transcriber, llm


def get_summary_handler(request: Request) -> SessionSummaryHandler:
    """
    Returns the pipeline handler built at startup.

    Raises:
        ConfigurationError: If the Gemini credential was not configured.
    """
    config: AppConfig = request.app.state.config
    handler: SessionSummaryHandler | None = request.app.state.summary_handler
    if not config.gemini.api_key or handler is None:
        raise ConfigurationError("GEMINI_API_KEY is not configured")
    return handler


def get_ingester(request: Request) -> MultipartIngester:
    """Returns the multipart ingester configured with upload limits."""
    return request.app.state.ingester
