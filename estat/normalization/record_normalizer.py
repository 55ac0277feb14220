"""
estat/normalization/record_normalizer.py

Flattens one coded `STATISTICAL_DATA` payload into output records.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from estat.domain.statistics import OutputRecord, as_list, text_of
from estat.logging_utils import utc_now_iso
from estat.normalization.classification_index import ClassificationIndex
from estat.normalization.data_type_classifier import classify

logger = logging.getLogger(__name__)

UNKNOWN_STATISTIC = "Unknown Statistic"
UNKNOWN_DATE = "Unknown Date"
DEFAULT_REGION = "Japan"
DEFAULT_CATEGORY = "General"
UNKNOWN_DATA_TYPE = "unknown"

ATTRIBUTE_PREFIX = "@"
UNIT_KEY = "@unit"
VALUE_KEY = "$"

# Classification ids e-Stat attaches to value rows, in resolution order.
DECLARED_CLASS_IDS: tuple[str, ...] = (
    ("tab",)
    + tuple(f"cat{index:02d}" for index in range(1, 16))
    + ("area", "time")
)

REGION_KEYS = ("area", "region")
CATEGORY1_KEYS = ("cat01", "tab")
CATEGORY2_KEYS = ("cat02", "cat03")

_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def _now_seconds() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def parse_value(raw: Any) -> float:
    """
    Parse an observation value; anything unparsable becomes 0.

    Suppressed cells ("-", "***", "…") and blanks are common in e-Stat
    tables. A leading numeric prefix is accepted ("1234 " -> 1234).
    """

    if isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        number = float(raw)
    else:
        text = "" if raw is None else str(raw)
        try:
            number = float(text)
        except ValueError:
            match = _NUMERIC_PREFIX.match(text)
            if match is None:
                return 0.0
            number = float(match.group(0))
    return number if math.isfinite(number) else 0.0


def _first_present(categories: Mapping[str, str], keys: tuple[str, ...], default: str) -> str:
    for key in keys:
        label = categories.get(key)
        if label:
            return label
    return default


class RecordNormalizer:
    """
    Converts raw e-Stat payloads into flat `OutputRecord`s.

    `normalize` never raises: a payload it cannot traverse produces a
    single synthetic error record carrying the failure and the payload.
    """

    def normalize(
        self,
        raw_payload: Any,
        index: ClassificationIndex,
        source_table_id: str,
        *,
        include_metadata: bool = False,
        fallback_last_updated: str | None = None,
    ) -> list[OutputRecord]:
        """
        `fallback_last_updated` stands in when the payload has no UPDATED_DATE;
        the current time is used only when both are missing.
        """

        try:
            return self._normalize_rows(
                raw_payload, index, source_table_id, include_metadata, fallback_last_updated
            )
        except Exception as exc:
            logger.warning(
                "Failed to normalize statistical data table_id=%s error=%s",
                source_table_id,
                exc,
            )
            return [self._error_record(raw_payload, source_table_id, exc, fallback_last_updated)]

    def _normalize_rows(
        self,
        raw_payload: Any,
        index: ClassificationIndex,
        source_table_id: str,
        include_metadata: bool,
        fallback_last_updated: str | None,
    ) -> list[OutputRecord]:
        if not isinstance(raw_payload, Mapping):
            raise TypeError(f"Statistical data payload must be an object, got {type(raw_payload).__name__}.")

        table_inf = raw_payload.get("TABLE_INF") or {}
        if not isinstance(table_inf, Mapping):
            raise TypeError("TABLE_INF must be an object.")
        stat_name = text_of(table_inf.get("TITLE")) or UNKNOWN_STATISTIC
        survey_date = text_of(table_inf.get("SURVEY_DATE")) or UNKNOWN_DATE
        last_updated = text_of(table_inf.get("UPDATED_DATE")) or fallback_last_updated or _now_seconds()

        data_inf = raw_payload.get("DATA_INF")
        if not isinstance(data_inf, Mapping):
            raise ValueError("Statistical data payload has no DATA_INF section.")
        rows = as_list(data_inf.get("VALUE"))
        if not rows:
            raise ValueError("DATA_INF contains no VALUE rows.")

        data_type = classify(stat_name)
        records: list[OutputRecord] = []
        for row in rows:
            if not isinstance(row, Mapping):
                raise TypeError(f"VALUE row must be an object, got {type(row).__name__}.")

            categories = self._resolve_categories(row, index)
            metadata: dict[str, Any] | None = None
            if include_metadata:
                metadata = {
                    "tableTitle": stat_name,
                    "categories": categories,
                    "originalAttributes": dict(row),
                }

            unit = row.get(UNIT_KEY)
            records.append(
                OutputRecord(
                    stat_name=stat_name,
                    survey_date=survey_date,
                    region=_first_present(categories, REGION_KEYS, DEFAULT_REGION),
                    category1=_first_present(categories, CATEGORY1_KEYS, DEFAULT_CATEGORY),
                    category2=_first_present(categories, CATEGORY2_KEYS, ""),
                    value=parse_value(row.get(VALUE_KEY)),
                    unit="" if unit is None else str(unit),
                    source_table_id=source_table_id,
                    data_type=data_type,
                    last_updated=last_updated,
                    extracted_at=utc_now_iso(),
                    metadata=metadata,
                )
            )
        return records

    @staticmethod
    def _resolve_categories(row: Mapping[str, Any], index: ClassificationIndex) -> dict[str, str]:
        categories: dict[str, str] = {}
        for class_id in DECLARED_CLASS_IDS:
            key = ATTRIBUTE_PREFIX + class_id
            if key in row:
                categories[class_id] = index.resolve(class_id, row[key])

        # Unlisted classification ids still resolve through the same index.
        for key, code in row.items():
            if not isinstance(key, str) or not key.startswith(ATTRIBUTE_PREFIX) or key == UNIT_KEY:
                continue
            class_id = key[len(ATTRIBUTE_PREFIX):]
            if class_id not in categories:
                categories[class_id] = index.resolve(class_id, code)
        return categories

    @staticmethod
    def _error_record(
        raw_payload: Any,
        source_table_id: str,
        exc: Exception,
        fallback_last_updated: str | None,
    ) -> OutputRecord:
        table_inf = raw_payload.get("TABLE_INF") if isinstance(raw_payload, Mapping) else None
        if not isinstance(table_inf, Mapping):
            table_inf = {}
        return OutputRecord(
            stat_name=text_of(table_inf.get("TITLE")) or UNKNOWN_STATISTIC,
            survey_date=text_of(table_inf.get("SURVEY_DATE")) or UNKNOWN_DATE,
            region=DEFAULT_REGION,
            category1=DEFAULT_CATEGORY,
            category2="",
            value=0,
            unit="",
            source_table_id=source_table_id,
            data_type=UNKNOWN_DATA_TYPE,
            last_updated=text_of(table_inf.get("UPDATED_DATE")) or fallback_last_updated or _now_seconds(),
            extracted_at=utc_now_iso(),
            metadata={"error": str(exc) or type(exc).__name__, "rawData": raw_payload},
        )
