"""Domain models for the session-summary pipeline."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class UploadedAudio(BaseModel, frozen=True):
    """An uploaded file spooled to a temp path for the lifetime of one request."""

    path: Path
    original_filename: str | None = None
    content_type: str | None = None
    size: int = 0


class PlayerSummary(BaseModel):
    """Bullet-point recap for a single player."""

    name: str
    points: list[str]


class SummaryResult(BaseModel):
    """Final payload returned to the client."""

    model_config = ConfigDict(populate_by_name=True)

    transcript: str
    dm_summary: str = Field(alias="dmSummary")
    summaries: list[PlayerSummary]


class ParsedSummary(BaseModel, frozen=True):
    """Model output that passed structural validation, reconciled to the roster."""

    kind: Literal["parsed"] = "parsed"
    overall_summary: str
    summaries: list[PlayerSummary]


class FallbackSummary(BaseModel, frozen=True):
    """Placeholder result used when the model output could not be parsed."""

    kind: Literal["fallback"] = "fallback"
    overall_summary: str
    summaries: list[PlayerSummary]


SummaryOutcome = ParsedSummary | FallbackSummary
