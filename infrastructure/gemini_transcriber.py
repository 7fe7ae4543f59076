"""Gemini implementation of the TranscriptionService interface."""

import os
import time
from pathlib import Path

from google import genai
from google.genai import types

from common.logging import setup_logging
from domain.audio_extension import mime_type_for_path
from exceptions import TranscriptionError

from .interfaces import TranscriptionService

logger = setup_logging()

TRANSCRIPTION_INSTRUCTION = (
    "Transcribe this tabletop roleplaying session recording verbatim. "
    "Return only the transcript text, without commentary, headings or timestamps."
)


class GeminiTranscriber(TranscriptionService):
    """Handles audio transcription using the Gemini Files API."""

    def __init__(
        self,
        client: genai.Client,
        model_name: str,
        temperature: float = 0.2,
        poll_interval_seconds: float = 1.0,
        poll_timeout_seconds: float = 120.0,
    ):
        self._client = client
        self._model_name = model_name
        self._temperature = temperature
        self._poll_interval = poll_interval_seconds
        self._poll_timeout = poll_timeout_seconds

    def transcribe(
        self, audio_path: Path, file_name: str, content_type: str | None = None
    ) -> str:
        """
        Uploads the audio to Gemini and asks the model for a transcript.

        The upload is streamed from disk with a MIME type taken from the
        path's extension, falling back to the declared type. The remote
        copy is deleted once the call finishes.
        """
        size = os.path.getsize(audio_path)
        if size == 0:
            raise TranscriptionError("Uploaded audio file is empty")

        logger.info(
            "Starting transcription",
            extra={"file_size": size, "upload_file_name": file_name},
        )

        uploaded = None
        try:
            with open(audio_path, "rb") as stream:
                uploaded = self._client.files.upload(
                    file=stream,
                    config={
                        "mime_type": mime_type_for_path(audio_path, content_type),
                        "display_name": file_name,
                    },
                )
            uploaded = self._wait_until_active(uploaded)

            response = self._client.models.generate_content(
                model=self._model_name,
                contents=[uploaded, TRANSCRIPTION_INSTRUCTION],
                config={"temperature": self._temperature},
            )
            if not isinstance(response.text, str):
                raise TranscriptionError("Transcription response missing text field")

            transcript = response.text.strip()
            logger.info(
                "Transcription complete",
                extra={"transcript_length": len(transcript)},
            )
            return transcript

        except TranscriptionError:
            raise
        except Exception as e:
            logger.exception("Gemini transcription failed")
            raise TranscriptionError(f"Transcription failed: {e}", cause=e) from e
        finally:
            if uploaded is not None:
                self._delete_remote(uploaded.name)

    def _wait_until_active(self, uploaded: types.File) -> types.File:
        """Polls the uploaded file until Gemini has finished processing it."""
        deadline = time.monotonic() + self._poll_timeout
        while uploaded.state == types.FileState.PROCESSING:
            if time.monotonic() >= deadline:
                raise TranscriptionError("Timed out waiting for uploaded audio to process")
            time.sleep(self._poll_interval)
            uploaded = self._client.files.get(name=uploaded.name)

        if uploaded.state == types.FileState.FAILED:
            raise TranscriptionError("Gemini could not process the uploaded audio")
        return uploaded

    def _delete_remote(self, name: str | None) -> None:
        if not name:
            return
        try:
            self._client.files.delete(name=name)
        except Exception:
            logger.warning("Failed to delete uploaded audio", extra={"file": name})
