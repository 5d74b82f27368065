"""Routes for the batch ingest API."""

from batch_ingest.api.routes import progress, system, uploads

__all__ = ["progress", "system", "uploads"]
