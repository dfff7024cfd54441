"""
Main entrypoint for the Survey Data API.

This module assembles the FastAPI application, sets up logging, CORS
and the record store handle, and includes the API router.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn survey_data_api.app.main:app --reload

The store handle is created here, once, and attached to
``app.state.store``; request handlers reach it through the
``get_record_service`` dependency.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.router import router as api_router
from .core.config import Settings, settings as default_settings
from .core.db import RecordStore
from .core.errors import StoreFailure
from .core.logging_config import setup_logging
from .schemas.record import ErrorResponse
from .services.record_service import RecordService


logger = logging.getLogger(__name__)

INVALID_REQUEST = "Invalid request body"


def create_app(settings: Optional[Settings] = None, store: Optional[RecordStore] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use; defaults to the environment‑derived
        module settings.
    store : Optional[RecordStore]
        Store handle to serve from.  When omitted one is built from
        ``settings.database_url``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file)

    app = FastAPI(title=settings.project_name, version=settings.api_version)
    app.state.settings = settings
    app.state.store = store or RecordStore.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Same body shape as every other error this service returns.
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(
            status_code=422,
            content=ErrorResponse(error=INVALID_REQUEST).model_dump(),
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        store: RecordStore = app.state.store
        # Schema errors are fatal; the server cannot do anything useful
        # without the records table.
        store.init_schema()
        logger.info("Connected to record store at %s", store.database_path)
        if not settings.seed_on_startup:
            return
        service = RecordService(store)
        try:
            logger.info("Current document count: %d", await service.count())
            await service.ensure_seeded()
        except StoreFailure as e:
            # Keep serving; the failure is already logged by the service
            # and /api/seed can populate the store later.
            logger.error("Initial seeding did not complete: %s", e)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
