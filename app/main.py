from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.config import configure_logging, get_ingestion_settings
from app.state import get_sample_store


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Load the demo batch into the store before serving requests."""
    store = get_sample_store()
    settings = get_ingestion_settings()
    logging.getLogger(__name__).info(
        "Sample store ready source=%r samples=%d strict_validation=%s",
        store.current.source_name,
        len(store.current.samples),
        settings.strict_validation,
    )
    yield


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    configure_logging()

    application = FastAPI(
        title="HMPI Dashboard API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import export_router, samples_router

    application.include_router(samples_router)
    application.include_router(export_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
