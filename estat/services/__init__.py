"""
estat/services package marker.
"""

from estat.services.pipeline_runner import PipelineRunner, build_pipeline_runner
from estat.services.table_processor import MetadataStatus, TableProcessor

__all__ = [
    "MetadataStatus",
    "PipelineRunner",
    "TableProcessor",
    "build_pipeline_runner",
]
