"""
SQLAlchemy-backed dataset sink for emitted pipeline items.
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.emitted_item import EmittedItemType
from estat.repositories.emitted_item_repository import EmittedItemRepository
from estat.sinks.base import RecordSink


def _item_type(item: dict[str, Any]) -> str:
    return str(item.get("type") or EmittedItemType.RECORD)


def _source_table_id(item: dict[str, Any]) -> str | None:
    table_id = item.get("sourceTableId") or item.get("tableId")
    return str(table_id) if table_id is not None else None


class SQLAlchemyDatasetSink(RecordSink):
    """
    Buffer emitted items and persist them to `emitted_items` in batches.

    Each item keeps its emission order through a per-run sequence number.
    """

    def __init__(
        self,
        *,
        session: Session,
        run_id: str | None = None,
        batch_size: int = 500,
        owns_session: bool = False,
    ) -> None:
        self._session = session
        self._owns_session = owns_session
        self._repository = EmittedItemRepository(session)
        self._batch_size = max(1, batch_size)
        self.run_id = run_id or uuid.uuid4().hex
        self._pending: list[dict[str, Any]] = []
        self._sequence = 0
        self.items_persisted = 0

    def emit(self, item: dict[str, Any]) -> None:
        self._pending.append(
            {
                "id": uuid.uuid4(),
                "run_id": self.run_id,
                "sequence": self._sequence,
                "item_type": _item_type(item),
                "source_table_id": _source_table_id(item),
                "payload": item,
            }
        )
        self._sequence += 1
        if len(self._pending) >= self._batch_size:
            self.flush()

    def flush(self) -> None:
        if not self._pending:
            return
        try:
            inserted = self._repository.bulk_insert(self._pending, batch_size=self._batch_size)
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        self.items_persisted += inserted
        self._pending = []

    def close(self) -> None:
        try:
            self.flush()
        finally:
            if self._owns_session:
                self._session.close()
