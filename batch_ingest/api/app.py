"""FastAPI application factory for the batch ingest API."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from batch_ingest.api.middleware import request_id_middleware
from batch_ingest.api.routes import progress, system, uploads
from batch_ingest.config import Config
from batch_ingest.core.batch import BatchCoordinator
from batch_ingest.core.logging import logger
from batch_ingest.core.progress import ProgressLedger
from batch_ingest.infrastructure.storage import LocalCollectionStorage
from batch_ingest.integrations.langflow import LangflowClient


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors in the {success, message} envelope."""
    if exc.status_code == 405:
        message = f"Method {request.method} Not Allowed"
    else:
        message = str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request validation errors in the {success, message} envelope."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part not in ("query", "body"))
        message = f"Invalid {location}: {first.get('msg', 'invalid value')}" if location else first.get("msg", "")
    else:
        message = "Invalid request."
    return JSONResponse(status_code=422, content={"success": False, "message": message})


def create_app(
    ledger: Optional[ProgressLedger] = None,
    storage: Optional[LocalCollectionStorage] = None,
    langflow_client: Optional[LangflowClient] = None,
    coordinator: Optional[BatchCoordinator] = None,
) -> FastAPI:
    """Create and configure FastAPI app. Factory pattern for testability.

    Application-scoped state is built here exactly once and shared through
    app.state. Any piece can be injected; the rest comes from Config.
    """
    # An injected coordinator fixes the ledger and storage the routes must read
    if coordinator is not None:
        if ledger is None:
            ledger = coordinator.ledger
        if storage is None:
            storage = coordinator.storage
    if ledger is None:
        ledger = ProgressLedger()
    if storage is None:
        storage = LocalCollectionStorage(Config.file_upload_directory())
    if langflow_client is None:
        langflow_client = LangflowClient()
    if coordinator is None:
        coordinator = BatchCoordinator(ledger=ledger, storage=storage, client=langflow_client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not Config.is_configured():
            logger.warning("missing_config", keys=Config.get_missing_config())
        logger.info(
            "service_started",
            storage=str(storage.base_path),
            langflow_url=langflow_client.api_url,
            concurrency_limit=coordinator.concurrency_limit,
            retention_seconds=coordinator.retention_seconds,
        )
        yield
        await coordinator.shutdown()
        await langflow_client.aclose()
        logger.info("service_stopped")

    app = FastAPI(
        title="batch-ingest",
        description=(
            "Collection upload service: stores a batch of files, hands each file to a "
            "Langflow flow under a concurrency cap and exposes live progress for polling."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware
    app.middleware("http")(request_id_middleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Register routes
    app.include_router(system.router)
    app.include_router(uploads.router)
    app.include_router(progress.router)

    # Application-scoped state
    app.state.ledger = ledger
    app.state.storage = storage
    app.state.langflow_client = langflow_client
    app.state.coordinator = coordinator

    return app
