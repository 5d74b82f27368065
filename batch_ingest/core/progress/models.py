"""Progress models for the batch ingest service.

Immutable progress record. Every change produces a new record, so a reader
always sees one consistent snapshot.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class ProgressRecord:
    """Observable progress of one upload."""

    total_files: int
    processed_files: int = 0
    processing_files: Tuple[str, ...] = ()
    is_complete: bool = False
    failed_files: Tuple[str, ...] = ()

    @classmethod
    def create(cls, total_files: int) -> "ProgressRecord":
        """Factory for a fresh record. An empty batch is complete from the start."""
        if total_files < 0:
            raise ValueError("total_files must not be negative")
        return cls(total_files=total_files, is_complete=total_files == 0)

    def start(self, relative_path: str) -> "ProgressRecord":
        """Mark a file as in flight."""
        if self.is_complete or relative_path in self.processing_files:
            return self
        return replace(self, processing_files=self.processing_files + (relative_path,))

    def finish(self, relative_path: str, failed: bool = False) -> "ProgressRecord":
        """Mark a file as attempted, whatever the outcome."""
        if self.is_complete:
            return self

        processing = list(self.processing_files)
        if relative_path in processing:
            processing.remove(relative_path)

        processed = min(self.processed_files + 1, self.total_files)
        failed_files = self.failed_files + (relative_path,) if failed else self.failed_files
        is_complete = processed == self.total_files

        return replace(
            self,
            processed_files=processed,
            processing_files=() if is_complete else tuple(processing),
            is_complete=is_complete,
            failed_files=failed_files,
        )

    def complete(self) -> "ProgressRecord":
        """Force the terminal state. A no-op when already complete."""
        if self.is_complete:
            return self
        return replace(
            self,
            processed_files=self.total_files,
            processing_files=(),
            is_complete=True,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase keys polling clients expect."""
        return {
            "totalFiles": self.total_files,
            "processedFiles": self.processed_files,
            "processingFiles": list(self.processing_files),
            "isComplete": self.is_complete,
            "failedFiles": list(self.failed_files),
        }
