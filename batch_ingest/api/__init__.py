"""HTTP API for the batch ingest service."""

from batch_ingest.api.app import create_app

__all__ = ["create_app"]
