"""
Emission sink interfaces for pipeline output items.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class RecordSink(ABC):
    """
    Append-only, ordered output stream for emitted items.

    Implementations never reorder or mutate the items they receive.
    """

    @abstractmethod
    def emit(self, item: dict[str, Any]) -> None:
        """
        Append one item to the output stream.
        """

    def close(self) -> None:
        """
        Flush pending items and release resources.
        """

    def __enter__(self) -> "RecordSink":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ListSink(RecordSink):
    """
    In-memory sink, used by tests and short interactive runs.
    """

    def __init__(self) -> None:
        self.items: list[dict[str, Any]] = []

    def emit(self, item: dict[str, Any]) -> None:
        self.items.append(item)

    def of_type(self, item_type: str) -> list[dict[str, Any]]:
        return [item for item in self.items if item.get("type") == item_type]

    def records(self) -> list[dict[str, Any]]:
        """
        Emitted items that are normalized records (no `type` tag).
        """

        return [item for item in self.items if "type" not in item]
