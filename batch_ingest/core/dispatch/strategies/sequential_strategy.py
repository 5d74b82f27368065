"""Sequential dispatch strategy.

Dispatches files one by one. Used when the concurrency limit is 1 or the batch
is too small to benefit from concurrency.
"""

import time
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


class SequentialDispatchStrategy(DispatchStrategy):
    """Sequential dispatch strategy.

    At most one downstream call is ever in flight, whatever the limit.
    """

    processing_mode = "sequential"

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

        logger.info("sequential_dispatch_started", batch_id=batch_id, total_files=len(files))

        failures: List[Dict[str, str]] = []
        for file in files:
            failure = await self._dispatch_one(batch_id, file, process, on_start, on_finish)
            if failure is not None:
                failures.append(failure)

        result = self._result(batch_id, files, failures, start_time)

        logger.info(
            "sequential_dispatch_completed",
            batch_id=batch_id,
            successful=result.successful,
            failed=result.failed,
            processing_time=result.processing_time_seconds,
        )
        return result
