"""Concrete implementations of infrastructure interfaces."""

from .gemini_llm import GeminiLLMService
from .gemini_transcriber import GeminiTranscriber
from .multipart_ingester import IngestedForm, MultipartIngester

__all__ = ["GeminiLLMService", "GeminiTranscriber", "IngestedForm", "MultipartIngester"]
