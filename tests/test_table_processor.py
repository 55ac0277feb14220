from __future__ import annotations

import pytest

from estat.connectors.base import ConnectorRequestError
from estat.schemas.run_options import RunOptions
from estat.services.table_processor import MetadataStatus, TableProcessor


def _processor(client, sink, events, record_sleep, delay: float = 1.0) -> TableProcessor:
    return TableProcessor(
        connector=client,
        sink=sink,
        events=events,
        request_delay_seconds=delay,
        sleep=record_sleep,
    )


def test_structured_records_use_resolved_labels(
    client_factory, table_factory, payload_factory, area_metadata, sink, events, sleeps, record_sleep
) -> None:
    client = client_factory(
        metadata={"T1": area_metadata},
        data={"T1": payload_factory([{"@area": "13000", "@cat01": "001", "@unit": "人", "$": "7000"}])},
    )

    outcome = _processor(client, sink, events, record_sleep).process(
        table_factory("T1"), RunOptions.from_input({})
    )

    assert outcome.records_emitted == 1
    assert outcome.raw_emitted is False
    assert outcome.metadata_status == MetadataStatus.FETCHED
    record = sink.records()[0]
    assert record["region"] == "東京都"
    assert record["category1"] == "男"
    assert record["value"] == 7000
    assert record["metadata"]["categories"] == {"cat01": "男", "area": "東京都"}
    assert sleeps == [1.0]
    assert client.metadata_calls == ["T1"]
    assert "table.processing_successful" in events.names()


def test_metadata_failure_is_not_fatal(
    client_factory, table_factory, payload_factory, sink, events, record_sleep
) -> None:
    client = client_factory(
        metadata={"T1": ConnectorRequestError("metadata unavailable")},
        data={"T1": payload_factory([{"@area": "13000", "$": "1"}])},
    )

    outcome = _processor(client, sink, events, record_sleep).process(
        table_factory("T1"), RunOptions.from_input({})
    )

    assert outcome.metadata_status == MetadataStatus.FAILED
    assert outcome.records_emitted == 1
    assert sink.records()[0]["region"] == "13000"
    failed = [event for event in events.events if event["event"] == "api.call_failed"]
    assert failed and failed[0]["api"] == "getMetaInfo"


def test_metadata_is_skipped_when_not_requested(
    client_factory, table_factory, payload_factory, area_metadata, sink, events, record_sleep
) -> None:
    client = client_factory(
        metadata={"T1": area_metadata},
        data={"T1": payload_factory([{"@area": "00000", "$": "1"}])},
    )

    outcome = _processor(client, sink, events, record_sleep).process(
        table_factory("T1"), RunOptions.from_input({"includeMetadata": False})
    )

    assert outcome.metadata_status == MetadataStatus.SKIPPED
    assert client.metadata_calls == []
    record = sink.records()[0]
    assert record["region"] == "00000"
    assert "metadata" not in record


def _with_payload_classes(payload: dict) -> dict:
    payload["CLASS_INF"] = {
        "CLASS_OBJ": {"@id": "area", "@name": "地域", "CLASS": {"@code": "00000", "@name": "全国"}}
    }
    return payload


def test_payload_class_inf_labels_when_metadata_skipped(
    client_factory, table_factory, payload_factory, sink, events, record_sleep
) -> None:
    client = client_factory(data={"T1": _with_payload_classes(payload_factory([{"@area": "00000", "$": "1"}]))})

    _processor(client, sink, events, record_sleep).process(
        table_factory("T1"), RunOptions.from_input({"includeMetadata": False})
    )

    assert client.metadata_calls == []
    assert sink.records()[0]["region"] == "全国"


def test_payload_class_inf_labels_when_metadata_fails(
    client_factory, table_factory, payload_factory, sink, events, record_sleep
) -> None:
    client = client_factory(
        metadata={"T1": ConnectorRequestError("metadata unavailable")},
        data={"T1": _with_payload_classes(payload_factory([{"@area": "00000", "$": "1"}]))},
    )

    outcome = _processor(client, sink, events, record_sleep).process(
        table_factory("T1"), RunOptions.from_input({})
    )

    assert outcome.metadata_status == MetadataStatus.FAILED
    assert sink.records()[0]["region"] == "全国"


def test_metadata_document_takes_precedence_over_payload_classes(
    client_factory, table_factory, payload_factory, area_metadata, sink, events, record_sleep
) -> None:
    payload = payload_factory([{"@area": "13000", "$": "1"}])
    payload["CLASS_INF"] = {"CLASS_OBJ": {"@id": "area", "CLASS": {"@code": "13000", "@name": "Tokyo"}}}
    client = client_factory(metadata={"T1": area_metadata}, data={"T1": payload})

    _processor(client, sink, events, record_sleep).process(table_factory("T1"), RunOptions.from_input({}))

    assert sink.records()[0]["region"] == "東京都"


def test_table_updated_date_fills_missing_payload_date(
    client_factory, table_factory, payload_factory, sink, events, record_sleep
) -> None:
    client = client_factory(data={"T1": payload_factory([{"$": "1"}, {"$": "2"}], updated=None)})

    _processor(client, sink, events, record_sleep).process(
        table_factory("T1"), RunOptions.from_input({"includeMetadata": False})
    )

    assert [record["lastUpdated"] for record in sink.records()] == ["2021-04-20", "2021-04-20"]


def test_data_failure_propagates_and_still_sleeps(
    client_factory, table_factory, sink, events, sleeps, record_sleep
) -> None:
    client = client_factory(data={"T1": ConnectorRequestError("boom")})

    with pytest.raises(ConnectorRequestError):
        _processor(client, sink, events, record_sleep, delay=0.5).process(
            table_factory("T1"), RunOptions.from_input({})
        )

    assert sleeps == [0.5]
    assert sink.items == []


def test_raw_only_emits_raw_item(
    client_factory, table_factory, payload_factory, sink, events, record_sleep
) -> None:
    payload = payload_factory([{"$": "1"}, {"$": "2"}])
    client = client_factory(data={"T1": payload})

    outcome = _processor(client, sink, events, record_sleep).process(
        table_factory("T1"), RunOptions.from_input({"outputFormat": "raw", "includeMetadata": False})
    )

    assert outcome.raw_emitted is True
    assert outcome.records_emitted == 0
    assert len(sink.items) == 1
    raw = sink.items[0]
    assert raw["type"] == "raw"
    assert raw["tableId"] == "T1"
    assert raw["rawData"] is payload
    assert raw["metadata"] is None
    assert raw["tableInfo"]["@id"] == "T1"
    assert "extractedAt" in raw


def test_both_emits_raw_before_records(
    client_factory, table_factory, payload_factory, sink, events, record_sleep
) -> None:
    client = client_factory(data={"T1": payload_factory([{"$": "1"}, {"$": "2"}])})

    outcome = _processor(client, sink, events, record_sleep).process(
        table_factory("T1"), RunOptions.from_input({"outputFormat": "both", "includeMetadata": False})
    )

    assert outcome.raw_emitted is True
    assert outcome.records_emitted == 2
    assert [item.get("type") for item in sink.items] == ["raw", None, None]


def test_malformed_payload_emits_single_error_record(
    client_factory, table_factory, sink, events, record_sleep
) -> None:
    client = client_factory(data={"T1": {"TABLE_INF": {"TITLE": "人口推計"}}})

    outcome = _processor(client, sink, events, record_sleep).process(
        table_factory("T1"), RunOptions.from_input({"includeMetadata": False})
    )

    assert outcome.records_emitted == 1
    record = sink.records()[0]
    assert record["dataType"] == "unknown"
    assert record["value"] == 0
    assert "error" in record["metadata"]


def test_zero_delay_does_not_sleep(
    client_factory, table_factory, payload_factory, sink, events, sleeps, record_sleep
) -> None:
    client = client_factory(data={"T1": payload_factory([{"$": "1"}])})

    _processor(client, sink, events, record_sleep, delay=0).process(
        table_factory("T1"), RunOptions.from_input({"includeMetadata": False})
    )

    assert sleeps == []
