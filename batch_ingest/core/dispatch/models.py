"""Dispatch models for the batch ingest service.

Type-safe models for per-file dispatch and its results.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional


@dataclass(frozen=True)
class FileDescriptor:
    """A persisted file inside a batch.

    relative_path doubles as the in-flight identifier in progress records.
    """

    relative_path: str
    destination: Path
    size: int = 0

    @property
    def posix_destination(self) -> str:
        """Absolute destination with forward slashes on every platform."""
        return Path(self.destination).absolute().as_posix()


ProcessFn = Callable[[FileDescriptor], Awaitable[Any]]
StartCallback = Callable[[FileDescriptor], Awaitable[None]]
FinishCallback = Callable[[FileDescriptor, Optional[str]], Awaitable[None]]


@dataclass
class DispatchResult:
    """Result of one dispatcher run."""

    batch_id: str
    status: str  # 'completed', 'completed_with_errors'
    total_files: int
    successful: int
    failed: int
    processing_time_seconds: float
    processing_mode: str  # 'bounded_concurrent', 'sequential'
    failures: List[Dict[str, str]] = field(default_factory=list)
    timestamp: str = ""

    @classmethod
    def create(
        cls,
        batch_id: str,
        total_files: int,
        failures: List[Dict[str, str]],
        processing_time: float,
        processing_mode: str,
    ) -> "DispatchResult":
        """Factory method to create DispatchResult with auto-generated timestamp."""
        failed = len(failures)
        return cls(
            batch_id=batch_id,
            status="completed" if failed == 0 else "completed_with_errors",
            total_files=total_files,
            successful=total_files - failed,
            failed=failed,
            processing_time_seconds=round(processing_time, 2),
            processing_mode=processing_mode,
            failures=failures,
            timestamp=datetime.now().isoformat() + "Z",
        )
