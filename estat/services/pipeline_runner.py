"""
estat/services/pipeline_runner.py

Orchestration of a full e-Stat pipeline run.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

from estat.config import PipelineSettings, get_estat_settings, get_pipeline_settings
from estat.connectors.base import ConnectorRequestError, StatisticsClient
from estat.connectors.estat_connector import EStatConnector
from estat.domain.statistics import (
    AuthFallback,
    ErrorFallback,
    RunOutcome,
    RunSummary,
    Success,
    TableDescriptor,
)
from estat.logging_utils import EventLog, utc_now_iso
from estat.schemas.run_options import RunOptions
from estat.services.sample_data import REGISTRATION_URL, select_sample_records
from estat.services.table_processor import TableProcessor
from estat.sinks.base import RecordSink

logger = logging.getLogger(__name__)


class PipelineRunner:
    """
    Drives search, per-table processing and the sample-data fallback.

    Tables are processed strictly one after another; a failing table is
    reported as an `error` item and the run moves on.
    """

    def __init__(
        self,
        *,
        connector: StatisticsClient | None,
        sink: RecordSink,
        events: EventLog,
        settings: PipelineSettings | None = None,
        table_processor: TableProcessor | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._connector = connector
        self._sink = sink
        self._events = events
        self._settings = settings or PipelineSettings()
        if table_processor is None and connector is not None:
            table_processor = TableProcessor(
                connector=connector,
                sink=sink,
                events=events,
                request_delay_seconds=self._settings.request_delay_seconds,
                sleep=sleep,
            )
        self._table_processor = table_processor

    def execute(self, options: RunOptions) -> RunOutcome:
        """
        Run search plus table processing, falling back to sample data when needed.
        """

        self._events.emit("actor.started", input=options.to_wire())
        try:
            return self._execute(options)
        finally:
            self._events.flush()

    def _execute(self, options: RunOptions) -> RunOutcome:
        if self._connector is None or self._table_processor is None:
            self._events.emit("actor.demo_mode")
            logger.info("Running in demo mode - no e-Stat API key provided")
            summary = self.run_sample_mode(options)
            self._events.emit("actor.completed", mode="demo")
            return AuthFallback(summary=summary, reason="missing_credentials")

        try:
            search_params = self.build_search_params(options)
            self._events.emit("api.call_initiated", api="getStatsList", params=search_params)
            tables = self._connector.search(
                keyword=options.search_keyword,
                survey_years=options.survey_years,
                stats_field=options.stats_field,
                limit=search_params["limit"],
            )
            self._events.emit("api.call_successful", api="getStatsList", resultCount=len(tables))
            logger.info("Found statistical tables count=%s", len(tables))

            if not tables:
                self._sink.emit(
                    {
                        "type": "no_data",
                        "message": "No statistical tables found for the given search criteria",
                        "searchParams": search_params,
                        "extractedAt": utc_now_iso(),
                    }
                )
                self._events.emit("actor.completed", mode="api", status="no_data")
                return Success(summary=RunSummary(search_criteria=options.to_wire()))

            summary = self.run(tables, options)
            self._events.emit(
                "actor.completed",
                mode="api",
                status="success",
                tablesProcessed=summary.tables_attempted,
                totalDataPoints=summary.total_records_emitted,
            )
            return Success(summary=summary)

        except ConnectorRequestError as exc:
            if not exc.is_auth_failure:
                return self._error_fallback(options, exc)
            self._events.warning(
                "api.call_failed",
                error=str(exc),
                statusCode=exc.status_code,
                apiStatus=exc.api_status,
            )
            logger.warning("Falling back to demo mode due to API authentication issues error=%s", exc)
            summary = self.run_sample_mode(options)
            self._events.emit("actor.completed", mode="demo", status="fallback")
            return AuthFallback(summary=summary, reason=str(exc))

        except Exception as exc:
            return self._error_fallback(options, exc)

    def run(self, candidate_tables: Sequence[TableDescriptor], options: RunOptions) -> RunSummary:
        """
        Process up to `max_items` tables and emit the run summary item.
        """

        if self._table_processor is None:
            raise RuntimeError("PipelineRunner.run requires a connector.")

        tables = list(candidate_tables)[: options.max_items]
        summary = RunSummary(search_criteria=options.to_wire())
        logger.info("Processing tables count=%s", len(tables))

        for table in tables:
            summary.tables_attempted += 1
            self._events.emit("table.processing_started", tableId=table.table_id, title=table.title)
            logger.info(
                "Processing table %s/%s table_id=%s title=%s",
                summary.tables_attempted,
                len(tables),
                table.table_id,
                table.title,
            )
            try:
                outcome = self._table_processor.process(table, options)
            except Exception as exc:
                self._events.warning("table.processing_failed", tableId=table.table_id, error=str(exc))
                logger.warning(
                    "Error processing table table_id=%s title=%s error=%s",
                    table.table_id,
                    table.title,
                    exc,
                )
                self._sink.emit(
                    {
                        "type": "error",
                        "tableId": table.table_id,
                        "tableTitle": table.title,
                        "error": str(exc),
                        "extractedAt": utc_now_iso(),
                    }
                )
                continue

            summary.tables_succeeded += 1
            summary.total_records_emitted += outcome.records_emitted

        self._sink.emit(
            {
                "type": "summary",
                "tablesProcessed": summary.tables_attempted,
                "tablesSucceeded": summary.tables_succeeded,
                "totalDataPoints": summary.total_records_emitted,
                "searchCriteria": summary.search_criteria,
                "completedAt": utc_now_iso(),
            }
        )
        logger.info(
            "Processing completed tables_processed=%s tables_succeeded=%s total_data_points=%s",
            summary.tables_attempted,
            summary.tables_succeeded,
            summary.total_records_emitted,
        )
        return summary

    def run_sample_mode(self, options: RunOptions) -> RunSummary:
        """
        Emit the fixed sample records matching the keyword, then a `demo_summary` item.
        """

        records = select_sample_records(options.search_keyword, options.max_items)
        for record in records:
            record["extractedAt"] = utc_now_iso()
            self._sink.emit(record)

        self._sink.emit(
            {
                "type": "demo_summary",
                "message": "Demo mode completed. To access real e-Stat data, please provide ESTAT_APP_ID.",
                "demoDataPoints": len(records),
                "searchCriteria": options.to_wire(),
                "registrationInfo": {
                    "url": REGISTRATION_URL,
                    "note": "Register for free e-Stat API access",
                },
                "completedAt": utc_now_iso(),
            }
        )
        logger.info(
            "Demo mode completed data_points=%s search_keyword=%s",
            len(records),
            options.search_keyword,
        )
        return RunSummary(
            search_criteria=options.to_wire(),
            total_records_emitted=len(records),
            mode="demo",
            demo_records=len(records),
        )

    def build_search_params(self, options: RunOptions) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if options.search_keyword:
            params["searchWord"] = options.search_keyword
        if options.survey_years:
            params["surveyYears"] = options.survey_years
        if options.stats_field:
            params["statsField"] = options.stats_field
        params["limit"] = min(options.max_items * 2, self._settings.max_search_limit)
        return params

    def _error_fallback(self, options: RunOptions, exc: Exception) -> ErrorFallback:
        self._events.warning("api.call_failed", error=str(exc))
        logger.exception("API error occurred, falling back to demo mode error=%s", exc)
        self._sink.emit(
            {
                "type": "error",
                "error": str(exc),
                "message": "An error occurred while processing. Falling back to demo mode.",
                "input": options.to_wire(),
                "extractedAt": utc_now_iso(),
            }
        )
        summary = self.run_sample_mode(options)
        self._events.emit("actor.completed", mode="demo", status="error_fallback")
        return ErrorFallback(summary=summary, diagnostic=str(exc))


def build_pipeline_runner(*, sink: RecordSink, events: EventLog) -> PipelineRunner:
    """
    Build a runner from environment settings; without ESTAT_APP_ID it serves sample data.
    """

    estat_settings = get_estat_settings()
    connector = EStatConnector(settings=estat_settings) if estat_settings.app_id else None
    return PipelineRunner(
        connector=connector,
        sink=sink,
        events=events,
        settings=get_pipeline_settings(),
    )
