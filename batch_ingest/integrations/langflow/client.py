"""Langflow client for the batch ingest service.

Posts one file reference per call to the configured Langflow flow endpoint.
"""

import uuid
from typing import Any, Dict, List, Optional

import httpx

from batch_ingest.config import Config
from batch_ingest.core.logging import logger


class LangflowClient:
    """Async HTTP client for the downstream processing flow.

    One instance is shared by every batch; httpx pools connections across calls.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Langflow client.

        Args:
            api_url: Flow endpoint. If not provided, reads from environment.
            api_key: Optional API key sent as x-api-key. Reads from environment if not provided.
            timeout: Per-call timeout in seconds. None disables the timeout.
            transport: Optional httpx transport (used by tests)
        """
        self.api_url = api_url or Config.langflow_api_url()
        self.api_key = api_key if api_key is not None else Config.langflow_api_key()
        if timeout is None:
            timeout = Config.langflow_timeout_seconds()

        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key

        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @staticmethod
    def build_payload(file_path: str, metadata: List[Dict[str, str]]) -> Dict[str, Any]:
        """Build the request body for one file.

        Args:
            file_path: Absolute destination of the persisted file
            metadata: [{"collection": name}, {label_key: label_value}, ...]

        Returns:
            JSON-serializable payload with a fresh correlation id
        """
        return {
            "request_id": str(uuid.uuid4()),
            "file_path": file_path.replace("\\", "/"),
            "metadata": metadata,
        }

    async def process_file(self, file_path: str, metadata: List[Dict[str, str]]) -> Any:
        """Ask the flow to process one persisted file.

        Returns:
            Decoded JSON body, or raw text when the body is not JSON

        Raises:
            httpx.HTTPStatusError: On a non-2xx response
            httpx.HTTPError: On transport failures
        """
        payload = self.build_payload(file_path, metadata)

        logger.debug(
            "langflow_request_started",
            request_id=payload["request_id"],
            file_path=payload["file_path"],
        )

        response = await self._client.post(self.api_url, json=payload)
        response.raise_for_status()

        logger.debug(
            "langflow_request_succeeded",
            request_id=payload["request_id"],
            status_code=response.status_code,
        )

        try:
            return response.json()
        except ValueError:
            return response.text

    def health_url(self) -> str:
        """Langflow's health endpoint on the same origin as the flow endpoint."""
        url = httpx.URL(self.api_url)
        return f"{url.scheme}://{url.netloc.decode('ascii')}/health"

    async def check_health(self, timeout: float = 2.0) -> bool:
        response = await self._client.get(self.health_url(), timeout=timeout)
        return response.is_success

    async def aclose(self) -> None:
        await self._client.aclose()
