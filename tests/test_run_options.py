from __future__ import annotations

import pytest

from estat.schemas.run_options import RunOptions


def test_defaults() -> None:
    options = RunOptions.from_input({})

    assert options.search_keyword == ""
    assert options.survey_years == ""
    assert options.stats_field == ""
    assert options.max_items == 10
    assert options.include_metadata is True
    assert options.output_format == "structured"


def test_none_input_uses_defaults() -> None:
    assert RunOptions.from_input(None) == RunOptions.from_input({})


def test_strings_are_trimmed() -> None:
    options = RunOptions.from_input(
        {"searchKeyword": "  人口 ", "surveyYears": " 2020 ", "statsField": None}
    )

    assert options.search_keyword == "人口"
    assert options.survey_years == "2020"
    assert options.stats_field == ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        (5, 5),
        ("7", 7),
        ("3.9", 3),
        (0, 10),
        ("0", 10),
        (-4, 1),
        (250, 100),
        ("many", 10),
        (None, 10),
        ("", 10),
        (float("inf"), 10),
        ("1e3", 1),
        ("12abc", 12),
        (" +42 items", 42),
        (7.9, 7),
    ],
)
def test_max_items_is_coerced_and_clamped(raw: object, expected: int) -> None:
    assert RunOptions.from_input({"maxItems": raw}).max_items == expected


@pytest.mark.parametrize(
    "raw, expected",
    [(False, False), (True, True), (None, True), ("false", True), (0, True)],
)
def test_include_metadata_is_false_only_for_literal_false(raw: object, expected: bool) -> None:
    assert RunOptions.from_input({"includeMetadata": raw}).include_metadata is expected


@pytest.mark.parametrize(
    "raw, expected, wants_raw, wants_structured",
    [
        ("structured", "structured", False, True),
        ("raw", "raw", True, False),
        ("both", "both", True, True),
        ("csv", "structured", False, True),
        (None, "structured", False, True),
    ],
)
def test_output_format(raw, expected, wants_raw, wants_structured) -> None:
    options = RunOptions.from_input({"outputFormat": raw})

    assert options.output_format == expected
    assert options.wants_raw is wants_raw
    assert options.wants_structured is wants_structured


def test_unknown_keys_are_ignored_and_wire_shape_uses_aliases() -> None:
    options = RunOptions.from_input({"searchKeyword": "GDP", "maxItems": "2", "extra": 1})

    assert options.to_wire() == {
        "searchKeyword": "GDP",
        "surveyYears": "",
        "statsField": "",
        "maxItems": 2,
        "includeMetadata": True,
        "outputFormat": "structured",
    }


def test_accepts_field_names() -> None:
    assert RunOptions(search_keyword="人口", max_items=3).max_items == 3


def test_options_are_frozen() -> None:
    options = RunOptions.from_input({})

    with pytest.raises(Exception):
        options.max_items = 5
