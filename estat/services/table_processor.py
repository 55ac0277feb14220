"""
estat/services/table_processor.py

Per-table fetch, normalize and emit step of the pipeline.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from estat.connectors.base import StatisticsClient
from estat.domain.statistics import TableDescriptor, TableOutcome
from estat.logging_utils import EventLog, utc_now_iso
from estat.normalization.classification_index import ClassificationIndex
from estat.normalization.record_normalizer import RecordNormalizer
from estat.schemas.run_options import RunOptions
from estat.sinks.base import RecordSink

logger = logging.getLogger(__name__)


class MetadataStatus:
    FETCHED = "fetched"
    SKIPPED = "skipped"
    FAILED = "failed"


class TableProcessor:
    """
    Runs one table through metadata fetch, data fetch and emission.

    A metadata failure only degrades label resolution. A data fetch
    failure propagates so the caller can report it for this table.
    The inter-request delay is applied whichever way the table ends.
    """

    def __init__(
        self,
        *,
        connector: StatisticsClient,
        sink: RecordSink,
        events: EventLog,
        normalizer: RecordNormalizer | None = None,
        request_delay_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._connector = connector
        self._sink = sink
        self._events = events
        self._normalizer = normalizer or RecordNormalizer()
        self._request_delay_seconds = max(0.0, request_delay_seconds)
        self._sleep = sleep

    def process(self, table: TableDescriptor, options: RunOptions) -> TableOutcome:
        try:
            return self._process(table, options)
        finally:
            if self._request_delay_seconds > 0:
                self._sleep(self._request_delay_seconds)

    def _process(self, table: TableDescriptor, options: RunOptions) -> TableOutcome:
        table_id = table.table_id

        metadata: dict[str, Any] | None = None
        metadata_status = MetadataStatus.SKIPPED
        if options.include_metadata:
            metadata, metadata_status = self._fetch_metadata(table_id)

        self._events.emit("api.call_initiated", api="getStatsData", tableId=table_id)
        raw_data = self._connector.fetch_data(table_id)
        self._events.emit("api.call_successful", api="getStatsData", tableId=table_id)

        # Without metadata, labels come from the payload's own CLASS_INF.
        index = ClassificationIndex.from_metadata(metadata if metadata is not None else raw_data)

        raw_emitted = False
        if options.wants_raw:
            self._sink.emit(
                {
                    "type": "raw",
                    "tableId": table_id,
                    "tableInfo": table.raw or {"@id": table_id, "TITLE": table.title},
                    "metadata": metadata,
                    "rawData": raw_data,
                    "extractedAt": utc_now_iso(),
                }
            )
            raw_emitted = True

        records_emitted = 0
        if options.wants_structured:
            records = self._normalizer.normalize(
                raw_data,
                index,
                table_id,
                include_metadata=options.include_metadata,
                fallback_last_updated=table.updated_date,
            )
            for record in records:
                self._sink.emit(record.to_payload())
                records_emitted += 1
            logger.info("Processed data points table_id=%s count=%s", table_id, records_emitted)

        self._events.emit(
            "table.processing_successful",
            tableId=table_id,
            recordsEmitted=records_emitted,
            rawEmitted=raw_emitted,
        )
        return TableOutcome(
            table_id=table_id,
            records_emitted=records_emitted,
            raw_emitted=raw_emitted,
            metadata_status=metadata_status,
        )

    def _fetch_metadata(self, table_id: str) -> tuple[dict[str, Any] | None, str]:
        self._events.emit("api.call_initiated", api="getMetaInfo", tableId=table_id)
        try:
            metadata = self._connector.fetch_metadata(table_id)
        except Exception as exc:
            self._events.warning("api.call_failed", api="getMetaInfo", tableId=table_id, error=str(exc))
            logger.warning("Could not retrieve metadata table_id=%s error=%s", table_id, exc)
            return None, MetadataStatus.FAILED

        self._events.emit("api.call_successful", api="getMetaInfo", tableId=table_id)
        return metadata, MetadataStatus.FETCHED
