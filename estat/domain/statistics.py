"""
estat/domain/statistics.py

Domain models for e-Stat table normalization and pipeline runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


def as_list(value: Any) -> list[Any]:
    """
    Coerce e-Stat's singleton-or-list shape to a list.

    The API returns a bare object when a group holds one element and a
    list otherwise; None (absent group) becomes an empty list.
    """

    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def text_of(value: Any) -> str | None:
    """
    Extract display text from a plain value or a `{"$": text}` node.
    """

    if value is None:
        return None
    if isinstance(value, dict):
        value = value.get("$")
        if value is None:
            return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class TableDescriptor:
    """
    One statistical table returned by a search.
    """

    table_id: str
    title: str | None = None
    stat_name: str | None = None
    survey_date: str | None = None
    updated_date: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_table_inf(cls, entry: dict[str, Any]) -> "TableDescriptor":
        """
        Build a descriptor from one `DATALIST_INF.TABLE_INF` entry.
        """

        table_id = entry.get("@id")
        if not table_id:
            raise ValueError("TABLE_INF entry has no '@id'.")
        return cls(
            table_id=str(table_id),
            title=text_of(entry.get("TITLE")),
            stat_name=text_of(entry.get("STAT_NAME")),
            survey_date=text_of(entry.get("SURVEY_DATE")),
            updated_date=text_of(entry.get("UPDATED_DATE")),
            raw=entry,
        )


@dataclass(frozen=True)
class OutputRecord:
    """
    One normalized observation ready for emission.
    """

    stat_name: str
    survey_date: str
    region: str
    category1: str
    category2: str
    value: float
    unit: str
    source_table_id: str
    data_type: str
    last_updated: str
    extracted_at: str
    metadata: dict[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        """
        Serialize to the emitted wire shape (camelCase keys).
        """

        payload: dict[str, Any] = {
            "statName": self.stat_name,
            "surveyDate": self.survey_date,
            "region": self.region,
            "category1": self.category1,
            "category2": self.category2,
            "value": self.value,
            "unit": self.unit,
            "sourceTableId": self.source_table_id,
            "dataType": self.data_type,
            "lastUpdated": self.last_updated,
        }
        if self.metadata is not None:
            payload["metadata"] = self.metadata
        payload["extractedAt"] = self.extracted_at
        return payload


@dataclass(frozen=True)
class TableOutcome:
    """
    Result of processing one table.
    """

    table_id: str
    records_emitted: int
    raw_emitted: bool
    metadata_status: str


@dataclass
class RunSummary:
    """
    Counters accumulated across one pipeline run.
    """

    search_criteria: dict[str, Any]
    tables_attempted: int = 0
    tables_succeeded: int = 0
    total_records_emitted: int = 0
    mode: str = "api"
    demo_records: int = 0


@dataclass(frozen=True)
class Success:
    summary: RunSummary


@dataclass(frozen=True)
class AuthFallback:
    """
    Run switched to sample data because credentials were missing or rejected.
    """

    summary: RunSummary
    reason: str


@dataclass(frozen=True)
class ErrorFallback:
    """
    Run switched to sample data after an unclassified failure.
    """

    summary: RunSummary
    diagnostic: str


RunOutcome = Union[Success, AuthFallback, ErrorFallback]


def outcome_label(outcome: RunOutcome) -> str:
    if isinstance(outcome, Success):
        return "success"
    if isinstance(outcome, AuthFallback):
        return "auth_fallback"
    return "error_fallback"
