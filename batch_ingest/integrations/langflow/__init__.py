"""Langflow integration."""

from batch_ingest.integrations.langflow.client import LangflowClient

__all__ = ["LangflowClient"]
