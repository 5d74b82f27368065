"""Health check endpoint handler for the batch ingest service.

Provides the /health payload with dependency testing.
"""

import asyncio
from datetime import datetime
from typing import Any, Dict

from batch_ingest.core.batch import BatchCoordinator
from batch_ingest.infrastructure.health.checks import check_langflow_connection, check_storage
from batch_ingest.infrastructure.storage import LocalCollectionStorage
from batch_ingest.integrations.langflow import LangflowClient


async def get_health_status(
    coordinator: BatchCoordinator,
    storage: LocalCollectionStorage,
    langflow_client: LangflowClient,
    service_name: str = "batch-ingest",
) -> Dict[str, Any]:
    """Get comprehensive health status.

    Returns:
        Dict with overall status and dependency health
    """
    # Test dependencies in parallel
    storage_health, langflow_health = await asyncio.gather(
        check_storage(storage), check_langflow_connection(langflow_client), return_exceptions=True
    )

    # Handle exceptions from gather
    if isinstance(storage_health, Exception):
        storage_health = {"status": "error", "error": str(storage_health)}
    if isinstance(langflow_health, Exception):
        langflow_health = {"status": "error", "error": str(langflow_health)}

    all_healthy = (
        storage_health.get("status") == "healthy" and langflow_health.get("status") == "healthy"
    )

    return {
        "status": "healthy" if all_healthy else "degraded",
        "service": service_name,
        "version": "1.0.0",
        "active_batches": len(coordinator.active_uploads()),
        "concurrency_limit": coordinator.concurrency_limit,
        "dependencies": {"storage": storage_health, "langflow": langflow_health},
        "timestamp": datetime.now().isoformat() + "Z",
    }
