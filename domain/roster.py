"""Normalization of the submitted player roster."""

import json
from collections.abc import Iterable

from exceptions import ValidationError


def _expand_entry(entry: str) -> list:
    """Returns the names carried by one ``players`` form value."""
    try:
        parsed = json.loads(entry)
    except ValueError:
        return [entry]
    if isinstance(parsed, list):
        return parsed
    return [entry]


def normalize_roster(values: Iterable[str]) -> list[str]:
    """
    Flattens the ``players`` form values into an ordered roster.

    Each value is either a bare name or a JSON array of names. Names are
    trimmed and empty ones discarded; duplicates are kept in submission order.

    Raises:
        ValidationError: If no usable player name remains.
    """
    names: list[str] = []
    for value in values:
        if not isinstance(value, str):
            continue
        names.extend(item for item in _expand_entry(value) if isinstance(item, str))

    if not names:
        raise ValidationError("At least one player name is required")

    roster = [name.strip() for name in names if name.strip()]
    if not roster:
        raise ValidationError("Player names cannot be empty")
    return roster


def distinct_names(roster: Iterable[str]) -> list[str]:
    """Roster names with duplicates collapsed, first occurrence wins."""
    return list(dict.fromkeys(roster))
