"""Configuration management for the batch ingest service.

Centralizes all environment variable access for better testability and maintainability.
Values are read on every call so tests can patch the environment freely.
"""

import os
from typing import Optional

DEFAULT_CONCURRENCY = 3
DEFAULT_RETENTION_SECONDS = 60.0
DEFAULT_LANGFLOW_API_URL = "http://localhost:7860/api/v1/webhook/file-processing"


def _parse_positive_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        value = int(raw.strip())
    except ValueError:
        return None
    return value if value > 0 else None


def _parse_non_negative_float(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    return value if value >= 0 else None


class Config:
    """Application configuration loaded from environment variables."""

    # Storage
    @staticmethod
    def file_upload_directory() -> str:
        """Get the storage root that collections are created under."""
        return os.environ.get("FILE_UPLOAD_DIRECTORY") or os.path.join(os.getcwd(), "uploads")

    # Processing
    @staticmethod
    def concurrency_limit() -> int:
        """Get max concurrent downstream calls per batch.

        Falls back to DEFAULT_CONCURRENCY when unset, non-numeric or not positive.
        """
        value = _parse_positive_int(os.environ.get("FILE_PROCESSING_CONCURRENCY"))
        return value if value is not None else DEFAULT_CONCURRENCY

    @staticmethod
    def progress_retention_seconds() -> float:
        """Get how long a completed progress record stays pollable."""
        value = _parse_non_negative_float(os.environ.get("PROGRESS_RETENTION_SECONDS"))
        return value if value is not None else DEFAULT_RETENTION_SECONDS

    # Langflow (downstream processing service)
    @staticmethod
    def langflow_api_url() -> str:
        """Get the Langflow endpoint each file is posted to."""
        return os.environ.get("LANGFLOW_API_URL") or DEFAULT_LANGFLOW_API_URL

    @staticmethod
    def langflow_api_key() -> Optional[str]:
        """Get optional Langflow API key (sent as x-api-key)."""
        return os.environ.get("LANGFLOW_API_KEY")

    @staticmethod
    def langflow_timeout_seconds() -> Optional[float]:
        """Get per-call timeout. None means calls never time out."""
        value = _parse_non_negative_float(os.environ.get("LANGFLOW_TIMEOUT_SECONDS"))
        return value or None

    # Logging
    @staticmethod
    def log_level() -> str:
        """Get log level name (INFO, DEBUG, ...)."""
        return (os.environ.get("LOG_LEVEL") or "INFO").upper()

    # Helper methods
    @staticmethod
    def is_configured() -> bool:
        """Check if all required configuration is present."""
        return not Config.get_missing_config()

    @staticmethod
    def get_missing_config() -> list[str]:
        """Get list of missing required configuration keys."""
        missing = []
        if not Config.langflow_api_url():
            missing.append("LANGFLOW_API_URL")
        return missing
