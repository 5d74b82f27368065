"""Health check functions for the batch ingest service.

Tests the storage root and connectivity to Langflow.
"""

import asyncio
from typing import Any, Dict

from batch_ingest.infrastructure.storage import LocalCollectionStorage
from batch_ingest.integrations.langflow import LangflowClient


async def check_langflow_connection(client: LangflowClient, timeout: float = 2.0) -> Dict[str, Any]:
    """Test Langflow connectivity against its /health endpoint.

    Returns:
        Dict with status ("healthy", "unhealthy", "timeout", "unavailable")
        and optional error message
    """
    try:
        healthy = await asyncio.wait_for(client.check_health(timeout=timeout), timeout=timeout)
        if healthy:
            return {"status": "healthy", "url": client.health_url()}
        return {"status": "unhealthy", "url": client.health_url()}

    except asyncio.TimeoutError:
        return {"status": "timeout", "error": f"Request timed out after {timeout:g}s"}

    except Exception as e:
        return {"status": "unavailable", "error": str(e)[:100]}


async def check_storage(storage: LocalCollectionStorage) -> Dict[str, Any]:
    """Test that the storage root accepts writes."""
    writable = await asyncio.to_thread(storage.is_writable)
    if writable:
        return {"status": "healthy", "path": str(storage.base_path)}
    return {"status": "unavailable", "path": str(storage.base_path), "error": "Storage root is not writable"}
