"""
db/models/emitted_item.py

One item emitted by a pipeline run (record, raw payload, error or summary).
"""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, CreatedAtMixin, JSONType


class EmittedItemType:
    RECORD = "record"
    RAW = "raw"
    ERROR = "error"
    SUMMARY = "summary"
    DEMO_SUMMARY = "demo_summary"
    NO_DATA = "no_data"


class EmittedItem(Base, CreatedAtMixin):
    __tablename__ = "emitted_items"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    run_id: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        comment="Pipeline run identifier",
    )
    sequence: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Emission order within the run",
    )
    item_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="record, raw, error, summary, demo_summary, no_data",
    )
    source_table_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    payload: Mapped[dict[str, Any]] = mapped_column(
        JSONType,
        nullable=False,
        comment="Emitted item exactly as produced by the pipeline",
    )

    __table_args__ = (
        Index("ix_emitted_items_run_id_sequence", "run_id", "sequence", unique=True),
        Index("ix_emitted_items_item_type", "item_type"),
        Index("ix_emitted_items_source_table_id", "source_table_id"),
    )
