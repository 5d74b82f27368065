"""Base dispatch strategy.

Defines the strategy interface and the per-file unit of work shared by every
strategy: start callback, downstream call, finish callback in a finally block.
"""

import time
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from batch_ingest.core.dispatch.models import (
    DispatchResult,
    FileDescriptor,
    FinishCallback,
    ProcessFn,
    StartCallback,
)
from batch_ingest.core.logging import logger


class DispatchStrategy(ABC):
    """Abstract base class for dispatch strategies.

    - BoundedDispatchStrategy: Concurrent, capped by a semaphore
    - SequentialDispatchStrategy: One file at a time
    """

    processing_mode = "unknown"

    @abstractmethod
    async def execute(
        self,
        batch_id: str,
        files: List[FileDescriptor],
        concurrency_limit: int,
        process: ProcessFn,
        on_start: StartCallback,
        on_finish: FinishCallback,
    ) -> DispatchResult:
        """Attempt every file exactly once.

        Args:
            batch_id: Identifier used for logging
            files: Persisted files to dispatch
            concurrency_limit: Max downstream calls in flight
            process: Downstream call for one file
            on_start: Awaited before the downstream call
            on_finish: Awaited after the downstream call, with the error message or None

        Returns:
            DispatchResult with execution summary
        """

    async def _dispatch_one(
        self,
        batch_id: str,
        file: FileDescriptor,
        process: ProcessFn,
        on_start: StartCallback,
        on_finish: FinishCallback,
    ) -> Optional[Dict[str, str]]:
        """Run one file. Returns a failure entry, or None on success.

        Downstream errors are isolated here. Callback errors are not.
        """
        await on_start(file)
        error: Optional[str] = None
        try:
            await process(file)
            logger.debug("file_dispatched", batch_id=batch_id, file=file.relative_path)
        except Exception as e:
            error = str(e) or type(e).__name__
            logger.warning(
                "file_dispatch_failed",
                batch_id=batch_id,
                file=file.relative_path,
                error=error,
                error_type=type(e).__name__,
            )
        finally:
            await on_finish(file, error)

        if error is None:
            return None
        return {"file": file.relative_path, "error": error}

    def _result(
        self,
        batch_id: str,
        files: List[FileDescriptor],
        failures: List[Dict[str, str]],
        start_time: float,
    ) -> DispatchResult:
        return DispatchResult.create(
            batch_id=batch_id,
            total_files=len(files),
            failures=failures,
            processing_time=time.time() - start_time,
            processing_mode=self.processing_mode,
        )
