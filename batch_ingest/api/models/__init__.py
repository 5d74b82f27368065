"""API models for the batch ingest service."""

from batch_ingest.api.models.responses import (
    ErrorResponse,
    HealthResponse,
    ProgressResponse,
    UploadAcceptedResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "ProgressResponse",
    "UploadAcceptedResponse",
]
