"""Orchestrates the streamed part of a session-summary request."""

from starlette.concurrency import run_in_threadpool

from common.logging import setup_logging
from domain import (
    FallbackSummary,
    SummaryResult,
    UploadedAudio,
    build_summary_prompt,
    parse_summary_response,
    readable_audio,
)
from exceptions import TranscriptionError
from infrastructure.interfaces import LLMService, TranscriptionService

from .progress_stream import ProgressStreamEmitter

logger = setup_logging()

UNEXPECTED_ERROR = "Unexpected error"


class SessionSummaryHandler:
    """Runs transcription and summarization, reporting through an emitter."""

    def __init__(
        self,
        transcription_service: TranscriptionService,
        llm_service: LLMService,
    ):
        self._transcription_service = transcription_service
        self._llm_service = llm_service

    async def run(
        self,
        roster: list[str],
        audio: UploadedAudio,
        emitter: ProgressStreamEmitter,
    ) -> None:
        """
        Processes one session and writes exactly one terminal frame.

        Never raises: the first failure becomes an error frame whose text is
        the exception message. The uploaded audio is deleted once
        transcription finishes, whatever the outcome.
        """
        try:
            result = await self._summarize(roster, audio, emitter)
            emitter.result(result)
            logger.info(
                "Summaries generated",
                extra={"summary_count": len(result.summaries)},
            )
        except Exception as e:
            logger.exception("Session summary failed")
            emitter.error(str(e) or UNEXPECTED_ERROR)
        finally:
            if not emitter.closed:
                emitter.error(UNEXPECTED_ERROR)

    async def _summarize(
        self,
        roster: list[str],
        audio: UploadedAudio,
        emitter: ProgressStreamEmitter,
    ) -> SummaryResult:
        transcript = await self._transcribe(audio, emitter)
        emitter.progress(
            "Transcription complete.",
            stage="transcription",
            transcriptLength=len(transcript),
        )

        prompt = build_summary_prompt(roster, transcript)
        logger.info("Requesting player summaries", extra={"player_count": len(roster)})
        emitter.progress(
            "Generating player summaries...",
            stage="summary",
            playerCount=len(roster),
        )
        completion = await run_in_threadpool(self._llm_service.complete, prompt)

        outcome = parse_summary_response(completion, roster)
        if isinstance(outcome, FallbackSummary):
            logger.warning("Model response could not be parsed, using placeholders")

        return SummaryResult(
            transcript=transcript,
            dm_summary=outcome.overall_summary,
            summaries=outcome.summaries,
        )

    async def _transcribe(
        self, audio: UploadedAudio, emitter: ProgressStreamEmitter
    ) -> str:
        with readable_audio(audio) as audio_path:
            logger.info(
                "Received audio file",
                extra={
                    "original_filename": audio.original_filename,
                    "content_type": audio.content_type,
                    "size": audio.size,
                    "readable_path": str(audio_path),
                },
            )
            emitter.progress(
                "Upload received.",
                stage="upload",
                fileSize=audio.size,
            )
            emitter.progress("Transcribing audio...", stage="transcription")
            file_name = (audio.original_filename or "").strip() or audio_path.name
            transcript = await run_in_threadpool(
                self._transcription_service.transcribe,
                audio_path,
                file_name,
                audio.content_type,
            )

        if not transcript:
            raise TranscriptionError("Transcription failed")
        return transcript
