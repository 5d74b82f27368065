"""Shared fixtures for batch ingest tests."""

import asyncio
import io
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest

from batch_ingest.core.batch import BatchCoordinator
from batch_ingest.core.progress import ProgressLedger
from batch_ingest.infrastructure.storage import IncomingFile, LocalCollectionStorage


class FakeLangflowClient:
    """In-process stand-in for LangflowClient that tracks concurrency."""

    api_url = "http://langflow.test/api/v1/webhook/file-processing"

    def __init__(self, delay: float = 0.01, fail_suffixes: Iterable[str] = ()):
        self.delay = delay
        self.fail_suffixes = tuple(fail_suffixes)
        self.calls: List[Tuple[str, List[Dict[str, str]]]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.in_flight_paths: List[str] = []
        self.duplicate_dispatch = False
        self.healthy = True

    async def process_file(self, file_path: str, metadata: List[Dict[str, str]]) -> Any:
        self.calls.append((file_path, metadata))
        if file_path in self.in_flight_paths:
            self.duplicate_dispatch = True
        self.in_flight_paths.append(file_path)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            if file_path.endswith(self.fail_suffixes):
                raise RuntimeError(f"flow rejected {file_path}")
            return {"ok": True}
        finally:
            self.in_flight -= 1
            self.in_flight_paths.remove(file_path)

    def health_url(self) -> str:
        return "http://langflow.test/health"

    async def check_health(self, timeout: float = 2.0) -> bool:
        return self.healthy

    async def aclose(self) -> None:
        pass


def make_files(*paths: str, content: bytes = b"data") -> List[IncomingFile]:
    return [IncomingFile(relative_path=path, content=io.BytesIO(content)) for path in paths]


async def wait_until(predicate, timeout: float = 3.0, interval: float = 0.005) -> None:
    """Poll predicate until true or fail the test."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(interval)


@pytest.fixture
def storage(tmp_path) -> LocalCollectionStorage:
    return LocalCollectionStorage(tmp_path / "uploads")


@pytest.fixture
def ledger() -> ProgressLedger:
    return ProgressLedger()


@pytest.fixture
def fake_client() -> FakeLangflowClient:
    return FakeLangflowClient()


@pytest.fixture
def make_coordinator(ledger, storage):
    """Factory building a coordinator around the shared ledger and storage."""

    def _make(
        client: Optional[Any] = None,
        concurrency_limit: Optional[int] = 2,
        retention_seconds: float = 60.0,
        **kwargs: Any,
    ) -> BatchCoordinator:
        return BatchCoordinator(
            ledger=ledger,
            storage=kwargs.pop("storage", storage),
            client=client or FakeLangflowClient(),
            concurrency_limit=concurrency_limit,
            retention_seconds=retention_seconds,
            **kwargs,
        )

    return _make
