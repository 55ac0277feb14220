"""
estat/normalization package marker.
"""

from estat.normalization.classification_index import ClassificationIndex
from estat.normalization.data_type_classifier import DATA_TYPES, classify
from estat.normalization.record_normalizer import RecordNormalizer, parse_value

__all__ = [
    "ClassificationIndex",
    "DATA_TYPES",
    "RecordNormalizer",
    "classify",
    "parse_value",
]
