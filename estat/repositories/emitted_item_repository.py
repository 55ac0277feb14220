"""
estat/repositories/emitted_item_repository.py

Persistence layer for emitted pipeline items.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models.emitted_item import EmittedItem

_DEFAULT_BATCH_SIZE = 500


class EmittedItemRepository:
    """
    Repository for batch persistence and lookup of emitted items.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def bulk_insert(
        self,
        rows: Sequence[dict[str, Any]],
        *,
        batch_size: int = _DEFAULT_BATCH_SIZE,
    ) -> int:
        """
        Insert prepared row mappings in configurable chunks.
        """

        if not rows:
            return 0

        size = max(1, batch_size)
        inserted = 0
        for start in range(0, len(rows), size):
            chunk = list(rows[start : start + size])
            self._session.bulk_insert_mappings(EmittedItem, chunk)
            inserted += len(chunk)
        return inserted

    def list_for_run(self, run_id: str) -> list[EmittedItem]:
        stmt = (
            select(EmittedItem)
            .where(EmittedItem.run_id == run_id)
            .order_by(EmittedItem.sequence)
        )
        return list(self._session.scalars(stmt))
