"""
estat/schemas/run_options.py

User-supplied run options with lenient coercion.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

OutputFormat = Literal["structured", "raw", "both"]

OUTPUT_FORMATS = ("structured", "raw", "both")
DEFAULT_MAX_ITEMS = 10
MIN_MAX_ITEMS = 1
MAX_MAX_ITEMS = 100

_LEADING_INTEGER = re.compile(r"\s*[+-]?\d+")


class RunOptions(BaseModel):
    """
    Validated search and output options for one pipeline run.

    Inputs are coerced rather than rejected: strings are trimmed,
    `maxItems` is clamped to [1, 100] and unknown output formats fall
    back to `structured`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    search_keyword: str = Field(default="", alias="searchKeyword")
    survey_years: str = Field(default="", alias="surveyYears")
    stats_field: str = Field(default="", alias="statsField")
    max_items: int = Field(default=DEFAULT_MAX_ITEMS, alias="maxItems")
    include_metadata: bool = Field(default=True, alias="includeMetadata")
    output_format: OutputFormat = Field(default="structured", alias="outputFormat")

    @field_validator("search_keyword", "survey_years", "stats_field", mode="before")
    @classmethod
    def _trim(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("max_items", mode="before")
    @classmethod
    def _clamp_max_items(cls, value: Any) -> int:
        # Leading integer only: "12abc" -> 12, "1e3" -> 1.
        match = _LEADING_INTEGER.match("" if value is None else str(value))
        parsed = int(match.group(0)) if match else 0
        if parsed == 0:
            parsed = DEFAULT_MAX_ITEMS
        return min(max(parsed, MIN_MAX_ITEMS), MAX_MAX_ITEMS)

    @field_validator("include_metadata", mode="before")
    @classmethod
    def _include_unless_false(cls, value: Any) -> bool:
        return value is not False

    @field_validator("output_format", mode="before")
    @classmethod
    def _known_format(cls, value: Any) -> str:
        return value if value in OUTPUT_FORMATS else "structured"

    @property
    def wants_raw(self) -> bool:
        return self.output_format in {"raw", "both"}

    @property
    def wants_structured(self) -> bool:
        return self.output_format in {"structured", "both"}

    @classmethod
    def from_input(cls, raw: dict[str, Any] | None) -> "RunOptions":
        """
        Build options from an arbitrary input mapping, ignoring unknown keys.
        """

        return cls.model_validate(dict(raw or {}))

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
