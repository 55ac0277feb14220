"""
Structured logging helpers for pipeline monitoring events.
"""

from __future__ import annotations

import json
import logging
import os
from collections import Counter
from datetime import datetime, timezone
from typing import Any


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.
    """

    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, ensure_ascii=False, sort_keys=True))


class EventLog:
    """
    Process-scoped monitoring event sink.

    Created at run start, injected into the runner and table processor,
    and flushed once at run end. Every event is written immediately as a
    JSON log line; the sink also keeps the events so callers and tests
    can inspect what a run reported.
    """

    def __init__(self, *, name: str = "estat.events", run_id: str | None = None) -> None:
        self._logger = logging.getLogger(name)
        self._run_id = run_id
        self._events: list[dict[str, Any]] = []
        self._flushed = False

    @property
    def events(self) -> list[dict[str, Any]]:
        return list(self._events)

    def names(self) -> list[str]:
        return [event["event"] for event in self._events]

    def emit(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        payload: dict[str, Any] = {"timestamp": utc_now_iso(), **fields}
        if self._run_id is not None:
            payload.setdefault("run_id", self._run_id)
        self._events.append({"event": event, **payload})
        log_event(self._logger, level, event, **payload)

    def warning(self, event: str, **fields: Any) -> None:
        self.emit(event, logging.WARNING, **fields)

    def flush(self) -> None:
        """
        Close out the run: log per-event counts once and flush handlers.
        """

        if self._flushed:
            return
        self._flushed = True
        counts = Counter(self.names())
        log_event(
            self._logger,
            logging.INFO,
            "events.flushed",
            run_id=self._run_id,
            total=len(self._events),
            counts=dict(counts),
        )
        for handler in self._logger.handlers:
            handler.flush()


def configure_logging() -> None:
    """
    Configure root logging once for the process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
