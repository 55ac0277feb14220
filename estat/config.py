"""
estat/config.py

Environment-driven settings for the e-Stat connector and pipeline.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import TypeVar

from db.config import load_env_files

DEFAULT_ESTAT_BASE_URL = "https://api.e-stat.go.jp/rest/3.0/app"

T = TypeVar("T")


@lru_cache(maxsize=1)
def _ensure_env_loaded() -> None:
    load_env_files()


def _read_env(name: str) -> str | None:
    """
    Return the trimmed value of `name`, treating blank values as unset.
    """

    _ensure_env_loaded()
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_env(name: str, parse: Callable[[str], T], default: T) -> T:
    """
    Parse `name` with `parse`; unset or malformed values yield `default`.
    """

    value = _read_env(name)
    if value is None:
        return default
    try:
        return parse(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class EStatSettings:
    """
    e-Stat REST API connection settings.

    `app_id` is the registered application ID; without it the pipeline
    runs against the bundled sample dataset.
    """

    app_id: str | None = None
    base_url: str = DEFAULT_ESTAT_BASE_URL
    lang: str = "J"
    timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls) -> "EStatSettings":
        return cls(
            app_id=_read_env("ESTAT_APP_ID"),
            base_url=_read_env("ESTAT_BASE_URL") or DEFAULT_ESTAT_BASE_URL,
            lang=_read_env("ESTAT_LANG") or "J",
            timeout_seconds=max(1.0, _parse_env("ESTAT_HTTP_TIMEOUT_SECONDS", float, 30.0)),
        )


@dataclass(frozen=True)
class PipelineSettings:
    """
    Pacing, search and persistence knobs for one pipeline run.
    """

    request_delay_seconds: float = 1.0
    max_search_limit: int = 100
    sink_batch_size: int = 500

    @classmethod
    def from_env(cls) -> "PipelineSettings":
        return cls(
            request_delay_seconds=max(0.0, _parse_env("ESTAT_REQUEST_DELAY_SECONDS", float, 1.0)),
            max_search_limit=max(1, _parse_env("ESTAT_MAX_SEARCH_LIMIT", int, 100)),
            sink_batch_size=max(1, _parse_env("ESTAT_SINK_BATCH_SIZE", int, 500)),
        )


@lru_cache(maxsize=1)
def get_estat_settings() -> EStatSettings:
    return EStatSettings.from_env()


@lru_cache(maxsize=1)
def get_pipeline_settings() -> PipelineSettings:
    return PipelineSettings.from_env()
