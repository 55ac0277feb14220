from __future__ import annotations

import pytest

from estat.normalization.data_type_classifier import DATA_TYPES, classify


@pytest.mark.parametrize(
    "title, expected",
    [
        ("国勢調査 人口総数", "population"),
        ("World Population Prospects", "population"),
        ("国民経済計算", "economic"),
        ("Quarterly GDP estimates", "economic"),
        ("労働力調査 就業者数", "labor"),
        ("雇用動向調査", "labor"),
        ("Labor Force Survey", "labor"),
        ("経済センサス 産業別事業所数", "economic"),
        ("工業統計 産業分類", "industry"),
        ("学校基本調査 教育機関", "education"),
        ("医療施設調査", "health"),
        ("Environment statistics", "environment"),
        ("家計調査", "general"),
        ("", "general"),
    ],
)
def test_classify_titles(title: str, expected: str) -> None:
    assert classify(title) == expected


def test_first_matching_category_wins() -> None:
    assert classify("人口と労働の統計") == "population"
    assert classify("labor and HEALTH") == "labor"


def test_matching_is_case_insensitive() -> None:
    assert classify("POPULATION CENSUS") == "population"
    assert classify("Real Gdp") == "economic"


@pytest.mark.parametrize("title", [None, 42, {"$": "人口"}, ["人口"]])
def test_non_string_titles_are_general(title: object) -> None:
    assert classify(title) == "general"


def test_every_result_is_one_of_the_fixed_categories() -> None:
    titles = ["人口", "gdp", "雇用", "産業", "教育", "health", "環境", "other", "123"]
    assert {classify(title) for title in titles} <= set(DATA_TYPES)
    assert len(DATA_TYPES) == 8
