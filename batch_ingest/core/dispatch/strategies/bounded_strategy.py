"""Bounded concurrent dispatch strategy.

Uses asyncio.gather() with an asyncio.Semaphore capping in-flight downstream calls.
"""

import asyncio
import time
from collections import defaultdict
from typing import Dict, List

from batch_ingest.core.dispatch.models import (
    DispatchResult,
    FileDescriptor,
    FinishCallback,
    ProcessFn,
    StartCallback,
)
from batch_ingest.core.dispatch.strategies.base import DispatchStrategy
from batch_ingest.core.logging import logger


class BoundedDispatchStrategy(DispatchStrategy):
    """Concurrent dispatch with at most concurrency_limit calls in flight.

    One task per file; excess tasks wait for a semaphore slot. Files sharing a
    relative path also wait on a per-path lock, taken before the slot, so the
    same identifier is never in flight twice.
    """

    processing_mode = "bounded_concurrent"

    async def execute(
        self,
        batch_id: str,
        files: List[FileDescriptor],
        concurrency_limit: int,
        process: ProcessFn,
        on_start: StartCallback,
        on_finish: FinishCallback,
    ) -> DispatchResult:
        start_time = time.time()

        logger.info(
            "bounded_dispatch_started",
            batch_id=batch_id,
            total_files=len(files),
            concurrency_limit=concurrency_limit,
        )

        semaphore = asyncio.Semaphore(concurrency_limit)
        path_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

        async def dispatch_bounded(file: FileDescriptor):
            async with path_locks[file.relative_path]:
                async with semaphore:
                    return await self._dispatch_one(
                        batch_id, file, process, on_start, on_finish
                    )

        results = await asyncio.gather(
            *[dispatch_bounded(file) for file in files], return_exceptions=True
        )

        # Callback errors are batch-level; surface the first one once all files settled
        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            raise errors[0]

        failures = [r for r in results if r is not None]
        result = self._result(batch_id, files, failures, start_time)

        logger.info(
            "bounded_dispatch_completed",
            batch_id=batch_id,
            successful=result.successful,
            failed=result.failed,
            processing_time=result.processing_time_seconds,
        )
        return result
