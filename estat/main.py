from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy import text

from estat.config import get_estat_settings
from estat.logging_utils import configure_logging

logger = logging.getLogger(__name__)


def _prepare_dataset_store() -> None:
    """
    Verify the dataset store answers, then create missing tables.

    Raises RuntimeError when no database is configured or reachable.
    """

    from db.session import get_engine, init_schema

    try:
        engine = get_engine()
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception as exc:
        raise RuntimeError("Dataset store unavailable.") from exc
    init_schema(engine)


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    _prepare_dataset_store()
    if not get_estat_settings().app_id:
        logger.warning("ESTAT_APP_ID is not set; ingestion runs will serve sample data")
    logger.info("Dataset store ready")
    yield


def create_app() -> FastAPI:
    configure_logging()

    application = FastAPI(
        title="e-Stat Statistics Pipeline API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from estat.api.routers import statistics_ingestion_router

    application.include_router(statistics_ingestion_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
