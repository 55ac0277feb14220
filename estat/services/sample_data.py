"""
estat/services/sample_data.py

Fixed sample dataset served when the e-Stat API cannot be used.
"""

from __future__ import annotations

from typing import Any

REGISTRATION_URL = "https://www.e-stat.go.jp/api/"

SAMPLE_RECORDS: tuple[dict[str, Any], ...] = (
    {
        "statName": "国勢調査 人口総数",
        "surveyDate": "2020年",
        "region": "全国",
        "category1": "総人口",
        "category2": "男女計",
        "value": 125836021,
        "unit": "人",
        "sourceTableId": "demo_001",
        "dataType": "population",
        "lastUpdated": "2021-06-25T00:00:00Z",
        "metadata": {
            "tableTitle": "国勢調査 人口総数",
            "categories": {"area": "全国", "gender": "男女計"},
            "note": "This is demo data",
        },
    },
    {
        "statName": "労働力調査 就業者数",
        "surveyDate": "2023年12月",
        "region": "全国",
        "category1": "就業者",
        "category2": "総数",
        "value": 67230000,
        "unit": "人",
        "sourceTableId": "demo_002",
        "dataType": "labor",
        "lastUpdated": "2024-01-30T00:00:00Z",
        "metadata": {
            "tableTitle": "労働力調査 就業者数",
            "categories": {"area": "全国", "employment": "就業者"},
            "note": "This is demo data",
        },
    },
)


def matches_keyword(record: dict[str, Any], keyword: str) -> bool:
    """
    Same case-insensitive predicate used to filter sample records by search keyword.
    """

    if not keyword:
        return True
    needle = keyword.lower()
    return any(
        needle in str(record.get(field, "")).lower()
        for field in ("statName", "category1", "dataType")
    )


def select_sample_records(keyword: str, max_items: int) -> list[dict[str, Any]]:
    """
    Return copies of the sample records matching `keyword`, capped at `max_items`.
    """

    selected = [dict(record) for record in SAMPLE_RECORDS if matches_keyword(record, keyword)]
    return selected[: max(0, max_items)]
