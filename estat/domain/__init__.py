"""
estat/domain package marker.
"""

from estat.domain.statistics import (
    AuthFallback,
    ErrorFallback,
    OutputRecord,
    RunOutcome,
    RunSummary,
    Success,
    TableDescriptor,
    TableOutcome,
    as_list,
    outcome_label,
    text_of,
)

__all__ = [
    "AuthFallback",
    "ErrorFallback",
    "OutputRecord",
    "RunOutcome",
    "RunSummary",
    "Success",
    "TableDescriptor",
    "TableOutcome",
    "as_list",
    "outcome_label",
    "text_of",
]
