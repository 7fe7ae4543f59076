import pytest

from domain.roster import distinct_names, normalize_roster
from exceptions import ValidationError


def test_normalize_roster_expands_json_array() -> None:
    assert normalize_roster(['["Mira", " Tobo ", ""]']) == ["Mira", "Tobo"]


def test_normalize_roster_flattens_mixed_values() -> None:
    values = ["Mira", '["Tobo", "Quill"]', '"quoted"', "{not json", "  "]

    assert normalize_roster(values) == ["Mira", "Tobo", "Quill", '"quoted"', "{not json"]


def test_normalize_roster_treats_json_scalars_as_names() -> None:
    assert normalize_roster(["42", "true"]) == ["42", "true"]


def test_normalize_roster_skips_non_string_array_items() -> None:
    assert normalize_roster(['["Mira", 3, null]']) == ["Mira"]


def test_normalize_roster_keeps_duplicates() -> None:
    assert normalize_roster(["Mira", "Mira"]) == ["Mira", "Mira"]
    assert distinct_names(["Mira", "Tobo", "Mira"]) == ["Mira", "Tobo"]


def test_normalize_roster_requires_a_name() -> None:
    with pytest.raises(ValidationError, match="At least one player name is required"):
        normalize_roster([])
    with pytest.raises(ValidationError, match="At least one player name is required"):
        normalize_roster(["[]"])


def test_normalize_roster_rejects_blank_names() -> None:
    with pytest.raises(ValidationError, match="Player names cannot be empty"):
        normalize_roster(['["  ", ""]', " "])
