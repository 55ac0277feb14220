"""
estat/sinks package marker.
"""

from estat.sinks.base import ListSink, RecordSink
from estat.sinks.jsonl_sink import JsonLinesSink
from estat.sinks.sqlalchemy_sink import SQLAlchemyDatasetSink

__all__ = [
    "JsonLinesSink",
    "ListSink",
    "RecordSink",
    "SQLAlchemyDatasetSink",
]
