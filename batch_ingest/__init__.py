"""Batch ingest: collection uploads processed through Langflow with live progress."""

__version__ = "1.0.0"
