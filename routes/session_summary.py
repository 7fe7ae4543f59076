"""Session summary endpoint."""

import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from common.logging import setup_logging
from dependencies import get_ingester, get_summary_handler
from domain import normalize_roster
from exceptions import ValidationError
from handlers import ProgressStreamEmitter, SessionSummaryHandler
from handlers.progress_stream import STREAM_HEADERS, STREAM_MEDIA_TYPE
from infrastructure import MultipartIngester
from response_models import ErrorResponse

logger = setup_logging()

router = APIRouter(prefix="/api", tags=["session-summary"])

HandlerDep = Annotated[SessionSummaryHandler, Depends(get_summary_handler)]
IngesterDep = Annotated[MultipartIngester, Depends(get_ingester)]


async def _wait_for_pipeline(task: asyncio.Task) -> None:
    """Lets the pipeline finish even if the client stopped reading."""
    await task


@router.post(
    "/session-summary",
    response_class=StreamingResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_session_summary(
    request: Request,
    handler: HandlerDep,
    ingester: IngesterDep,
) -> StreamingResponse:
    """
    Transcribes a session recording and summarizes it per player.

    Input problems are answered with a plain JSON error before streaming
    starts. After that, progress and the final result (or error) are sent
    as newline-delimited JSON frames.
    """
    logger.info("Incoming session summary request")

    form = await ingester.ingest(request)
    try:
        roster = normalize_roster(form.get_all("players"))
        audio = form.take_file("audio", "file")
        if audio is None:
            raise ValidationError("Audio file is required")
    finally:
        form.discard()

    emitter = ProgressStreamEmitter()
    task = asyncio.create_task(handler.run(roster, audio, emitter))

    return StreamingResponse(
        emitter.stream(),
        media_type=STREAM_MEDIA_TYPE,
        headers=STREAM_HEADERS,
        background=BackgroundTask(_wait_for_pipeline, task),
    )
