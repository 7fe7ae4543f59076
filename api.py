"""Application factory and error rendering."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from common.logging import setup_logging
from config import AppConfig
from dependencies import build_gemini_services
from exceptions import ConfigurationError, UpstreamError, ValidationError
from handlers import SessionSummaryHandler
from infrastructure import MultipartIngester
from infrastructure.interfaces import LLMService, TranscriptionService
from routes import session_summary_router

logger = setup_logging()


def _error_response(status_code: int, message: str, headers=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Renders every pre-stream failure as ``{"error": message}``."""

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError):
        logger.info("Rejected request", extra={"reason": str(exc)})
        return _error_response(400, str(exc))

    @app.exception_handler(ConfigurationError)
    async def _configuration_error(request: Request, exc: ConfigurationError):
        logger.error("Service misconfigured", extra={"reason": str(exc)})
        return _error_response(500, str(exc))

    @app.exception_handler(UpstreamError)
    async def _upstream_error(request: Request, exc: UpstreamError):
        logger.error("Upstream service failed", extra={"reason": str(exc)})
        return _error_response(500, str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return _error_response(405, "Method not allowed", headers=exc.headers)
        return _error_response(exc.status_code, str(exc.detail), headers=exc.headers)

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):
        logger.exception("Session summary API error")
        return _error_response(500, str(exc) or "Unexpected error")


def create_app(
    config: AppConfig,
    transcription_service: TranscriptionService | None = None,
    llm_service: LLMService | None = None,
) -> FastAPI:
    """
    Builds the FastAPI application.

    Gemini-backed services are created from ``config`` unless both services
    are supplied. Without a credential the app still starts, but every
    request is answered with a configuration error.
    """
    app = FastAPI(title="Session Summary Service")
    app.state.config = config
    app.state.ingester = MultipartIngester(
        config.upload.max_file_size_bytes, config.upload.temp_dir
    )

    if transcription_service is None or llm_service is None:
        if config.gemini.api_key:
            transcription_service, llm_service = build_gemini_services(config)
        else:
            logger.error("GEMINI_API_KEY is not configured")

    if transcription_service is not None and llm_service is not None:
        app.state.summary_handler = SessionSummaryHandler(
            transcription_service, llm_service
        )
    else:
        app.state.summary_handler = None

    app.include_router(session_summary_router)
    register_exception_handlers(app)
    return app
