from __future__ import annotations

import time
from contextlib import asynccontextmanager, suppress
from typing import AsyncIterator

import structlog
from fastapi import FastAPI

from sortviz.api import router as api_router
from sortviz.core.config.settings import AppSettings, settings
from sortviz.core.engine.driver import Sleeper
from sortviz.core.errors import InvalidTransition
from sortviz.core.logging.setup import configure_logging
from sortviz.core.run.assembly import build_session
from sortviz.core.run.worker import RunWorker

log = structlog.get_logger()


def create_app(*, app_settings: AppSettings = settings, sleep: Sleeper = time.sleep) -> FastAPI:
    """
    Application factory.

    The single place where the FastAPI app is created and configured. The
    sorting session is built here and lives on app.state; routes reach it
    through dependencies.
    """
    configure_logging(level=app_settings.log_level)

    session = build_session(app_settings=app_settings, sleep=sleep)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("app.startup", environment=app_settings.env)
        yield
        # a run that ends between the check and the pause is fine
        with suppress(InvalidTransition):
            if app.state.session.controller.status == "running":
                app.state.session.controller.pause()
        app.state.worker.join(timeout=5.0)
        app.state.session.close()
        log.info("app.shutdown")

    app = FastAPI(
        title="sortviz",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.session = session
    app.state.worker = RunWorker(session.controller)

    # Mount API
    app.include_router(api_router, prefix="/api")

    return app


# ASGI entrypoint
app = create_app()
