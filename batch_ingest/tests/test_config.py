"""Unit tests for environment configuration."""

import os

import pytest

from batch_ingest.config import DEFAULT_LANGFLOW_API_URL, Config


class TestConcurrency:
    """Test FILE_PROCESSING_CONCURRENCY parsing."""

    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("FILE_PROCESSING_CONCURRENCY", raising=False)
        assert Config.concurrency_limit() == 3

    @pytest.mark.parametrize("raw", ["abc", "0", "-2", "", "2.5"])
    def test_invalid_values_fall_back(self, monkeypatch, raw):
        """Test non-numeric and non-positive values use the default."""
        monkeypatch.setenv("FILE_PROCESSING_CONCURRENCY", raw)
        assert Config.concurrency_limit() == 3

    def test_valid_value(self, monkeypatch):
        monkeypatch.setenv("FILE_PROCESSING_CONCURRENCY", " 5 ")
        assert Config.concurrency_limit() == 5


class TestRetentionAndTimeout:
    """Test float settings."""

    def test_retention_default(self, monkeypatch):
        monkeypatch.delenv("PROGRESS_RETENTION_SECONDS", raising=False)
        assert Config.progress_retention_seconds() == 60.0

    def test_retention_override(self, monkeypatch):
        monkeypatch.setenv("PROGRESS_RETENTION_SECONDS", "2.5")
        assert Config.progress_retention_seconds() == 2.5

    def test_retention_invalid(self, monkeypatch):
        monkeypatch.setenv("PROGRESS_RETENTION_SECONDS", "-1")
        assert Config.progress_retention_seconds() == 60.0

    def test_timeout_disabled_by_default(self, monkeypatch):
        """Test downstream calls have no timeout unless configured."""
        monkeypatch.delenv("LANGFLOW_TIMEOUT_SECONDS", raising=False)
        assert Config.langflow_timeout_seconds() is None

    def test_timeout_zero_means_disabled(self, monkeypatch):
        monkeypatch.setenv("LANGFLOW_TIMEOUT_SECONDS", "0")
        assert Config.langflow_timeout_seconds() is None

    def test_timeout_value(self, monkeypatch):
        monkeypatch.setenv("LANGFLOW_TIMEOUT_SECONDS", "30")
        assert Config.langflow_timeout_seconds() == 30.0


class TestPathsAndServices:
    """Test string settings."""

    def test_upload_directory_default(self, monkeypatch):
        monkeypatch.delenv("FILE_UPLOAD_DIRECTORY", raising=False)
        assert Config.file_upload_directory() == os.path.join(os.getcwd(), "uploads")

    def test_upload_directory_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FILE_UPLOAD_DIRECTORY", str(tmp_path))
        assert Config.file_upload_directory() == str(tmp_path)

    def test_langflow_url_default(self, monkeypatch):
        monkeypatch.delenv("LANGFLOW_API_URL", raising=False)
        assert Config.langflow_api_url() == DEFAULT_LANGFLOW_API_URL
        assert Config.is_configured() is True
        assert Config.get_missing_config() == []

    def test_log_level_uppercased(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Config.log_level() == "DEBUG"
