"""FastAPI dependencies for the batch ingest API.

Application-scoped objects live on app.state and are constructed once by create_app().
"""

from fastapi import Request

from batch_ingest.core.batch import BatchCoordinator
from batch_ingest.core.progress import ProgressLedger
from batch_ingest.infrastructure.storage import LocalCollectionStorage
from batch_ingest.integrations.langflow import LangflowClient


def get_ledger(request: Request) -> ProgressLedger:
    """Get the progress ledger from app state."""
    return request.app.state.ledger


def get_coordinator(request: Request) -> BatchCoordinator:
    """Get the batch coordinator from app state."""
    return request.app.state.coordinator


def get_storage(request: Request) -> LocalCollectionStorage:
    """Get collection storage from app state."""
    return request.app.state.storage


def get_langflow_client(request: Request) -> LangflowClient:
    """Get the shared Langflow client from app state."""
    return request.app.state.langflow_client
