"""Thin HTTP surface over the persisted collections and the refresh cycle."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from errors import PersistenceError
from json_store import JsonStore
from models import HARDWARE, PAPERS
from refresh import RefreshOrchestrator
from scheduler import IntervalScheduler

LOGGER = logging.getLogger(__name__)


def create_app(
    orchestrator: RefreshOrchestrator,
    store: JsonStore | None = None,
    scheduler: IntervalScheduler | None = None,
    run_on_startup: bool = True,
) -> FastAPI:
    """Build the app; startup runs one cycle and starts ``scheduler`` if given."""
    store = store or orchestrator.store

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if run_on_startup:
            LOGGER.info("Performing initial data update...")
            await run_in_threadpool(orchestrator.on_startup)
        else:
            for domain in (HARDWARE, PAPERS):
                try:
                    store.ensure(domain)
                except PersistenceError as exc:
                    LOGGER.error("Could not initialize %s collection: %s", domain.name, exc)
        if scheduler is not None:
            scheduler.start()
        yield
        if scheduler is not None:
            scheduler.stop()
        LOGGER.info("Shutting down")

    app = FastAPI(title="Dexterous Hand Tracker", version="0.1.0", lifespan=lifespan)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "healthy"}

    @app.get("/api/hardware")
    async def list_hardware() -> list[dict]:
        return store.read(HARDWARE)

    @app.get("/api/papers")
    async def list_papers() -> list[dict]:
        return store.read(PAPERS)

    @app.get("/api/update")
    async def trigger_update():
        LOGGER.info("Manual update triggered...")
        report = await run_in_threadpool(orchestrator.run_cycle, "manual")
        if not report.ok:
            LOGGER.error("Manual update failed: %s", report.as_dict())
            return JSONResponse(status_code=500, content={"error": "Update failed"})
        return {"message": "Update completed successfully", **report.as_dict()}

    return app
