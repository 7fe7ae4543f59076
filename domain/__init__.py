"""Domain layer exports."""

from .audio_extension import ensure_extension_on_path, readable_audio, resolve_extension
from .models import (
    FallbackSummary,
    ParsedSummary,
    PlayerSummary,
    SummaryOutcome,
    SummaryResult,
    UploadedAudio,
)
from .prompt_builder import SYSTEM_PROMPT, build_summary_prompt
from .roster import normalize_roster
from .summary_parser import parse_summary_response

__all__ = [
    "FallbackSummary",
    "ParsedSummary",
    "PlayerSummary",
    "SummaryOutcome",
    "SummaryResult",
    "UploadedAudio",
    "SYSTEM_PROMPT",
    "build_summary_prompt",
    "ensure_extension_on_path",
    "normalize_roster",
    "parse_summary_response",
    "readable_audio",
    "resolve_extension",
]
