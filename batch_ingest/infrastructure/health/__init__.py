"""Health checks for the batch ingest service."""

from batch_ingest.infrastructure.health.checks import check_langflow_connection, check_storage
from batch_ingest.infrastructure.health.endpoints import get_health_status

__all__ = ["check_langflow_connection", "check_storage", "get_health_status"]
