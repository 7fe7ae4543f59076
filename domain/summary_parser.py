"""Validation and repair of the model's summary reply."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from common.logging import setup_logging

from .models import FallbackSummary, ParsedSummary, PlayerSummary, SummaryOutcome
from .roster import distinct_names

logger = setup_logging()

MISSING_PLAYER_POINT = "No summary was generated for this player."
MISSING_DM_SUMMARY = (
    "The AI response did not include an overall summary for the Dungeon Master."
)
UNPARSEABLE_RESPONSE = "The AI response could not be parsed."


class _PlayerEntry(BaseModel):
    """One ``players`` item as it must look before it is trusted."""

    model_config = ConfigDict(strict=True)

    name: str
    points: list[Any]


def _clean_text(value: str) -> str:
    """Trims and replaces lone surrogates, which cannot be encoded as UTF-8."""
    return value.encode("utf-8", "replace").decode("utf-8").strip()


def _clean_points(points: list[Any]) -> list[str]:
    cleaned = [_clean_text(point) for point in points if isinstance(point, str)]
    return [point for point in cleaned if point]


def _fallback(roster: list[str]) -> FallbackSummary:
    return FallbackSummary(
        overall_summary=UNPARSEABLE_RESPONSE,
        summaries=[
            PlayerSummary(name=name, points=[UNPARSEABLE_RESPONSE])
            for name in distinct_names(roster)
        ],
    )


def parse_summary_response(raw: str, roster: list[str]) -> SummaryOutcome:
    """
    Turns raw model output into a roster-complete summary.

    Never raises. Output that is not a JSON object with a ``players`` array
    degrades to a ``FallbackSummary`` carrying one placeholder per distinct
    roster name. Otherwise malformed entries and entries for unknown or
    repeated names are dropped, and every roster name still missing gets a
    placeholder entry appended in roster order.

    Args:
        raw: The completion text returned by the model.
        roster: The player names used to build the prompt.

    Returns:
        ParsedSummary or FallbackSummary.
    """
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError, RecursionError):
        logger.warning("Model response is not valid JSON", extra={"length": len(raw or "")})
        return _fallback(roster)

    players = parsed.get("players") if isinstance(parsed, dict) else None
    if not isinstance(players, list):
        logger.warning("Model response is missing a players array")
        return _fallback(roster)

    expected = distinct_names(roster)
    summaries: dict[str, PlayerSummary] = {}
    for item in players:
        try:
            entry = _PlayerEntry.model_validate(item)
        except PydanticValidationError:
            continue
        name = _clean_text(entry.name)
        if name not in expected or name in summaries:
            continue
        summaries[name] = PlayerSummary(name=name, points=_clean_points(entry.points))

    missing = [name for name in expected if name not in summaries]
    for name in missing:
        summaries[name] = PlayerSummary(name=name, points=[MISSING_PLAYER_POINT])
    if missing:
        logger.info("Filled in missing player summaries", extra={"missing": missing})

    dm_summary = parsed.get("dmSummary")
    overall = _clean_text(dm_summary) if isinstance(dm_summary, str) else ""
    if not overall:
        overall = MISSING_DM_SUMMARY

    return ParsedSummary(overall_summary=overall, summaries=list(summaries.values()))
