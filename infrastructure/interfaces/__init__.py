"""Abstract interfaces for external AI services."""

from .llm_service import LLMService
from .transcription_service import TranscriptionService

__all__ = ["LLMService", "TranscriptionService"]
