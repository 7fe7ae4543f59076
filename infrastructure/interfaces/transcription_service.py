"""Abstract interface for transcription service operations."""

from abc import ABC, abstractmethod
from pathlib import Path


class TranscriptionService(ABC):
    """Abstract base class for audio transcription backends."""

    @abstractmethod
    def transcribe(
        self, audio_path: Path, file_name: str, content_type: str | None = None
    ) -> str:
        """
        Transcribes an audio file and returns the transcript text.

        Args:
            audio_path: Readable path to the audio, extension included.
            file_name: Filename hint forwarded to the provider.
            content_type: MIME type declared with the upload, if any.

        Returns:
            The transcript, trimmed of surrounding whitespace.

        Raises:
            TranscriptionError: If the file is empty or transcription fails.
        """
        pass
