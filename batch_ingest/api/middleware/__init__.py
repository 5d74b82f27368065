"""Middleware for the batch ingest API."""

from batch_ingest.api.middleware.request_id import request_id_middleware

__all__ = ["request_id_middleware"]
