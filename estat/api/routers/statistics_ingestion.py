"""
estat/api/routers/statistics_ingestion.py

e-Stat pipeline HTTP endpoints.
"""

from __future__ import annotations

from collections.abc import Callable

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.session import get_db
from estat.config import get_pipeline_settings
from estat.logging_utils import EventLog
from estat.schemas.pipeline import RunOutcomeResponse
from estat.schemas.run_options import RunOptions
from estat.services.pipeline_runner import PipelineRunner, build_pipeline_runner
from estat.sinks.sqlalchemy_sink import SQLAlchemyDatasetSink

router = APIRouter(tags=["statistics-ingestion"])


def get_runner_factory() -> Callable[..., PipelineRunner]:
    """
    Return the callable that builds a runner for one request.
    """

    return build_pipeline_runner


@router.post("/ingest-estat", response_model=RunOutcomeResponse)
def ingest_estat(
    options: RunOptions,
    db: Session = Depends(get_db),
    runner_factory: Callable[..., PipelineRunner] = Depends(get_runner_factory),
) -> RunOutcomeResponse:
    """
    Run the pipeline and persist every emitted item to the dataset store.
    """

    sink = SQLAlchemyDatasetSink(session=db, batch_size=get_pipeline_settings().sink_batch_size)
    events = EventLog(run_id=sink.run_id)
    runner = runner_factory(sink=sink, events=events)

    try:
        outcome = runner.execute(options)
        sink.close()
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to persist emitted items.",
        ) from exc

    return RunOutcomeResponse.from_outcome(outcome, run_id=sink.run_id)
