"""Core pipeline for the batch ingest service."""
