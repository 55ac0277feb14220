from __future__ import annotations

from typing import Any

import pytest

from estat.logging_utils import EventLog
from estat.sinks.base import ListSink
from tests.fakes import AREA_METADATA, FakeStatisticsClient, make_payload, make_table


@pytest.fixture()
def sink() -> ListSink:
    return ListSink()

@pytest.fixture()
def events() -> EventLog:
    return EventLog(run_id="test-run")

@pytest.fixture()
def sleeps() -> list[float]:
    return []

@pytest.fixture()
def record_sleep(sleeps: list[float]):
    return sleeps.append

@pytest.fixture()
def table_factory():
    return make_table

@pytest.fixture()
def payload_factory():
    return make_payload

@pytest.fixture()
def area_metadata() -> dict[str, Any]:
    return AREA_METADATA

@pytest.fixture()
def client_factory():
    return FakeStatisticsClient
