"""
estat/normalization/data_type_classifier.py

Keyword-based semantic category inference for statistic titles.
"""

from __future__ import annotations

from typing import Any

GENERAL = "general"

# Evaluation order is significant: the first matching category wins.
DATA_TYPE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("population", ("人口", "population")),
    ("economic", ("経済", "gdp", "economic", "economy")),
    ("labor", ("労働", "雇用", "labor", "labour", "employment")),
    ("industry", ("産業", "industry")),
    ("education", ("教育", "education")),
    ("health", ("医療", "健康", "health")),
    ("environment", ("環境", "environment")),
)

DATA_TYPES: tuple[str, ...] = tuple(name for name, _ in DATA_TYPE_KEYWORDS) + (GENERAL,)


def classify(title: Any) -> str:
    """
    Return the data type for a statistic title, or `general` when nothing matches.
    """

    if not isinstance(title, str):
        return GENERAL

    lowered = title.lower()
    for data_type, keywords in DATA_TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return data_type
    return GENERAL
