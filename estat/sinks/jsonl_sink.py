"""
JSON-lines file sink.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Any

from estat.sinks.base import RecordSink


class JsonLinesSink(RecordSink):
    """
    Write each emitted item as one UTF-8 JSON line.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._handle: IO[str] | None = self.path.open("a", encoding="utf-8")
        self.items_written = 0

    def emit(self, item: dict[str, Any]) -> None:
        if self._handle is None:
            raise RuntimeError(f"Sink for {self.path} is closed.")
        self._handle.write(json.dumps(item, ensure_ascii=False, default=str))
        self._handle.write("\n")
        self.items_written += 1

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
