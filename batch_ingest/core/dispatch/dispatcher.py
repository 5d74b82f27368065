"""Dispatcher for the batch ingest service.

Hands each file of a batch to the downstream service under a concurrency cap.
"""

import secrets
import time
from typing import List, Optional

from batch_ingest.core.dispatch.models import (
    DispatchResult,
    FileDescriptor,
    FinishCallback,
    ProcessFn,
    StartCallback,
)
from batch_ingest.core.dispatch.strategies import (
    BoundedDispatchStrategy,
    DispatchStrategy,
    SequentialDispatchStrategy,
)
from batch_ingest.core.logging import logger


class Dispatcher:
    """Runs one unit of work per file, never more than the limit at once.

    Uses Strategy pattern to route to the appropriate execution strategy.
    Guarantees every file is attempted exactly once and that on_finish runs for
    every started file, even when the downstream call fails.
    """

    def __init__(self):
        self.strategies = {
            "bounded": BoundedDispatchStrategy(),
            "sequential": SequentialDispatchStrategy(),
        }

    async def run(
        self,
        files: List[FileDescriptor],
        concurrency_limit: int,
        process: ProcessFn,
        on_start: StartCallback,
        on_finish: FinishCallback,
        batch_id: Optional[str] = None,
    ) -> DispatchResult:
        """Dispatch a batch of files.

        Args:
            files: Persisted files to dispatch
            concurrency_limit: Positive cap on concurrent downstream calls
            process: Downstream call for one file
            on_start: Awaited before each downstream call
            on_finish: Awaited after each downstream call with error message or None
            batch_id: Optional identifier for logging (generated if not provided)

        Returns:
            DispatchResult once every file has been attempted

        Raises:
            ValueError: If the limit or the file list is malformed. Nothing has
                been dispatched when this is raised.
        """
        self._validate(files, concurrency_limit)

        if batch_id is None:
            batch_id = f"dispatch_{int(time.time() * 1000)}_{secrets.token_urlsafe(8)}"

        strategy = self._select_strategy(len(files), concurrency_limit)

        logger.info(
            "dispatch_strategy_selected",
            batch_id=batch_id,
            strategy=type(strategy).__name__,
            total_files=len(files),
            concurrency_limit=concurrency_limit,
        )

        return await strategy.execute(
            batch_id=batch_id,
            files=list(files),
            concurrency_limit=concurrency_limit,
            process=process,
            on_start=on_start,
            on_finish=on_finish,
        )

    def _validate(self, files: List[FileDescriptor], concurrency_limit: int) -> None:
        if isinstance(concurrency_limit, bool) or not isinstance(concurrency_limit, int):
            raise ValueError(f"concurrency_limit must be an int, got {concurrency_limit!r}")
        if concurrency_limit < 1:
            raise ValueError(f"concurrency_limit must be positive, got {concurrency_limit}")
        if files is None:
            raise ValueError("files must be a list of FileDescriptor")

        for index, file in enumerate(files):
            if not isinstance(file, FileDescriptor):
                raise ValueError(f"files[{index}] is not a FileDescriptor: {file!r}")
            if not file.relative_path:
                raise ValueError(f"files[{index}] has an empty relative path")

    def _select_strategy(self, batch_size: int, concurrency_limit: int) -> DispatchStrategy:
        """Sequential for a limit of 1 or a single file, bounded otherwise."""
        if concurrency_limit == 1 or batch_size <= 1:
            return self.strategies["sequential"]
        return self.strategies["bounded"]
