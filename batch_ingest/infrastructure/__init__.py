"""Infrastructure for the batch ingest service."""
