"""API utilities for the batch ingest service."""

from batch_ingest.api.utils.sse import create_sse_event

__all__ = ["create_sse_event"]
