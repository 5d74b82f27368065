"""Progress ledger for the batch ingest service.

Process-wide, in-memory map from upload id to ProgressRecord.
"""

import asyncio
from typing import Callable, Dict, Optional

from batch_ingest.core.logging import logger
from batch_ingest.core.progress.models import ProgressRecord


class ProgressLedger:
    """Key-partitioned progress store.

    Records are immutable and replaced wholesale. Read-modify-write goes through
    update(), which holds a lock scoped to a single upload id, so batches never
    contend with each other. Reads take no lock.
    """

    def __init__(self):
        self._records: Dict[str, ProgressRecord] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def set(self, upload_id: str, record: ProgressRecord) -> None:
        """Install a record for an upload id, replacing any previous one."""
        self._records[upload_id] = record
        self._locks.setdefault(upload_id, asyncio.Lock())

    def get(self, upload_id: str) -> Optional[ProgressRecord]:
        """Get current record, or None if absent."""
        return self._records.get(upload_id)

    def delete(self, upload_id: str) -> None:
        """Remove a record. Deleting an absent id is a no-op."""
        removed = self._records.pop(upload_id, None)
        self._locks.pop(upload_id, None)
        if removed is not None:
            logger.debug("progress_record_deleted", upload_id=upload_id)

    def contains(self, upload_id: str) -> bool:
        return upload_id in self._records

    async def update(
        self, upload_id: str, mutate: Callable[[ProgressRecord], ProgressRecord]
    ) -> Optional[ProgressRecord]:
        """Atomically replace a record with mutate(record).

        Args:
            upload_id: Upload whose record to change
            mutate: Pure function from the current record to the new one

        Returns:
            The new record, or None if the upload id is absent. A deleted
            record is never recreated by a late update.
        """
        lock = self._locks.get(upload_id)
        if lock is None:
            return None

        async with lock:
            current = self._records.get(upload_id)
            if current is None:
                return None
            updated = mutate(current)
            self._records[upload_id] = updated
            return updated

    def __len__(self) -> int:
        return len(self._records)
