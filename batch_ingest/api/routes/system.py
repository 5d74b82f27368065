"""System routes for the batch ingest API."""

from fastapi import APIRouter, Depends

from batch_ingest.api.dependencies import get_coordinator, get_langflow_client, get_storage
from batch_ingest.api.models import HealthResponse
from batch_ingest.core.batch import BatchCoordinator
from batch_ingest.infrastructure.health import get_health_status
from batch_ingest.infrastructure.storage import LocalCollectionStorage
from batch_ingest.integrations.langflow import LangflowClient

router = APIRouter(tags=["System"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    coordinator: BatchCoordinator = Depends(get_coordinator),
    storage: LocalCollectionStorage = Depends(get_storage),
    langflow_client: LangflowClient = Depends(get_langflow_client),
):
    """Health check with storage/Langflow testing. Returns service status, active batches and dependency health."""
    return await get_health_status(coordinator, storage, langflow_client)
