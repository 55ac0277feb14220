"""
estat/schemas/pipeline.py

Response schemas for pipeline runs.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from estat.domain.statistics import AuthFallback, ErrorFallback, RunOutcome, outcome_label


class RunOutcomeResponse(BaseModel):
    """
    API response model for one pipeline run.
    """

    outcome: Literal["success", "auth_fallback", "error_fallback"]
    run_id: str = Field(..., serialization_alias="runId")
    mode: Literal["api", "demo"]
    tables_processed: int = Field(..., ge=0, serialization_alias="tablesProcessed")
    tables_succeeded: int = Field(..., ge=0, serialization_alias="tablesSucceeded")
    total_data_points: int = Field(..., ge=0, serialization_alias="totalDataPoints")
    demo_data_points: int = Field(default=0, ge=0, serialization_alias="demoDataPoints")
    diagnostic: str | None = None

    @classmethod
    def from_outcome(cls, outcome: RunOutcome, *, run_id: str) -> "RunOutcomeResponse":
        summary = outcome.summary
        diagnostic: str | None = None
        if isinstance(outcome, AuthFallback):
            diagnostic = outcome.reason
        elif isinstance(outcome, ErrorFallback):
            diagnostic = outcome.diagnostic
        return cls(
            outcome=outcome_label(outcome),
            run_id=run_id,
            mode=summary.mode,
            tables_processed=summary.tables_attempted,
            tables_succeeded=summary.tables_succeeded,
            total_data_points=summary.total_records_emitted,
            demo_data_points=summary.demo_records,
            diagnostic=diagnostic,
        )
