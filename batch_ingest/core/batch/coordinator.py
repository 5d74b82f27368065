"""Batch coordinator for the batch ingest service.

Validates a submission, persists its files, opens a progress record and starts
processing in the background. The caller gets the upload id back as soon as the
files are on disk; completion is observable only through the progress ledger.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional, Protocol, Sequence, Union

import structlog

from batch_ingest.config import Config
from batch_ingest.core.batch.models import Label, build_metadata, parse_labels
from batch_ingest.core.dispatch import Dispatcher, FileDescriptor
from batch_ingest.core.errors import (
    CollectionExistsError,
    MissingCollectionNameError,
    MissingUploadIdError,
    UploadInProgressError,
)
from batch_ingest.core.logging import logger
from batch_ingest.core.progress import ProgressLedger, ProgressRecord
from batch_ingest.infrastructure.storage import IncomingFile, LocalCollectionStorage


class FileProcessingClient(Protocol):
    async def process_file(self, file_path: str, metadata: List[Dict[str, str]]) -> Any:
        ...


class BatchCoordinator:
    """Orchestrates the lifecycle of one upload at a time per upload id.

    Owns the detached batch tasks and the retirement timers of completed
    records. A record is deleted retention_seconds after completion, or at once
    when the batch fails outside the per-file error boundary.
    """

    def __init__(
        self,
        ledger: ProgressLedger,
        storage: LocalCollectionStorage,
        client: FileProcessingClient,
        dispatcher: Optional[Dispatcher] = None,
        concurrency_limit: Optional[int] = None,
        retention_seconds: Optional[float] = None,
    ):
        """Initialize batch coordinator.

        Args:
            ledger: Application-wide progress ledger
            storage: Collection storage
            client: Downstream client exposing process_file()
            dispatcher: Dispatcher instance (optional)
            concurrency_limit: Max concurrent downstream calls. Invalid values
                fall back to the configured default.
            retention_seconds: How long completed records stay pollable
        """
        self.ledger = ledger
        self.storage = storage
        self.client = client
        self.dispatcher = dispatcher or Dispatcher()
        self.concurrency_limit = self._clamp_concurrency(concurrency_limit)
        self.retention_seconds = (
            Config.progress_retention_seconds() if retention_seconds is None else max(0.0, retention_seconds)
        )

        self._tasks: Dict[str, asyncio.Task] = {}
        self._retirements: Dict[str, asyncio.TimerHandle] = {}

    @staticmethod
    def _clamp_concurrency(value: Optional[int]) -> int:
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            return value
        if value is not None:
            logger.warning("invalid_concurrency_limit", value=value, fallback=Config.concurrency_limit())
        return Config.concurrency_limit()

    def active_uploads(self) -> List[str]:
        """Upload ids whose background processing is still running."""
        return list(self._tasks)

    async def submit(
        self,
        collection_name: Optional[str],
        upload_id: Optional[str],
        labels: Union[str, Sequence[Label], None],
        files: List[IncomingFile],
    ) -> str:
        """Accept a batch and start processing it in the background.

        Args:
            collection_name: Target collection (must not exist yet)
            upload_id: Client-generated identifier used for polling
            labels: Labels, or the raw JSON labels field
            files: Incoming files with their relative paths

        Returns:
            The upload id, once files are persisted and the record exists

        Raises:
            UploadRejectedError: Subclass describing why the batch was rejected
            OSError: If persistence fails (the collection directory is removed)
        """
        # The id is the client's polling key; store it verbatim
        if not upload_id or not upload_id.strip():
            raise MissingUploadIdError()

        collection_name = (collection_name or "").strip()
        if not collection_name:
            raise MissingCollectionNameError()

        if self.storage.collection_exists(collection_name):
            raise CollectionExistsError()

        if upload_id in self._tasks or self.ledger.contains(upload_id):
            raise UploadInProgressError()

        if labels is None or isinstance(labels, str):
            raw_labels = labels
            labels = parse_labels(raw_labels)
            # The metadata file keeps the labels as submitted, object form included
            stored_labels = json.loads(raw_labels) if raw_labels and raw_labels.strip() else []
        else:
            labels = list(labels)
            stored_labels = [label.model_dump() for label in labels]

        # Reject bad paths before anything touches the disk
        for incoming in files:
            self.storage.normalize_relative_path(incoming.relative_path)

        collection_path = self.storage.create_collection(collection_name)
        try:
            descriptors = self.storage.save_files(collection_path, files)
            self.storage.save_metadata(collection_path, stored_labels)
        except Exception as e:
            logger.error(
                "batch_persistence_failed",
                upload_id=upload_id,
                collection=collection_name,
                error=str(e),
            )
            self.storage.remove_collection(collection_path)
            raise

        self.ledger.set(upload_id, ProgressRecord.create(len(descriptors)))

        task = asyncio.create_task(
            self._run_batch(upload_id, collection_name, labels, descriptors),
            name=f"batch:{upload_id}",
        )
        self._tasks[upload_id] = task
        task.add_done_callback(lambda t: self._forget_task(upload_id, t))

        logger.info(
            "batch_accepted",
            upload_id=upload_id,
            collection=collection_name,
            total_files=len(descriptors),
            labels=len(labels),
            concurrency_limit=self.concurrency_limit,
        )
        return upload_id

    async def _run_batch(
        self,
        upload_id: str,
        collection_name: str,
        labels: List[Label],
        files: List[FileDescriptor],
    ) -> None:
        with structlog.contextvars.bound_contextvars(upload_id=upload_id, collection=collection_name):
            metadata = build_metadata(collection_name, labels)

            async def process(file: FileDescriptor) -> Any:
                return await self.client.process_file(file.posix_destination, metadata)

            async def on_start(file: FileDescriptor) -> None:
                await self.ledger.update(upload_id, lambda record: record.start(file.relative_path))

            async def on_finish(file: FileDescriptor, error: Optional[str]) -> None:
                await self.ledger.update(
                    upload_id,
                    lambda record: record.finish(file.relative_path, failed=error is not None),
                )

            try:
                result = await self.dispatcher.run(
                    files=files,
                    concurrency_limit=self.concurrency_limit,
                    process=process,
                    on_start=on_start,
                    on_finish=on_finish,
                    batch_id=upload_id,
                )
            except asyncio.CancelledError:
                self.ledger.delete(upload_id)
                logger.warning("batch_cancelled")
                raise
            except Exception:
                self.ledger.delete(upload_id)
                logger.exception("batch_failed")
                return

            await self.ledger.update(upload_id, lambda record: record.complete())
            self._schedule_retirement(upload_id)

            logger.info(
                "batch_completed",
                status=result.status,
                successful=result.successful,
                failed=result.failed,
                failures=result.failures,
                processing_time=result.processing_time_seconds,
                retention_seconds=self.retention_seconds,
            )

    def _forget_task(self, upload_id: str, task: asyncio.Task) -> None:
        if self._tasks.get(upload_id) is task:
            del self._tasks[upload_id]

    def _schedule_retirement(self, upload_id: str) -> None:
        loop = asyncio.get_running_loop()
        self._retirements[upload_id] = loop.call_later(
            self.retention_seconds, self._retire, upload_id
        )

    def _retire(self, upload_id: str) -> None:
        self._retirements.pop(upload_id, None)
        self.ledger.delete(upload_id)
        logger.info("progress_record_retired", upload_id=upload_id)

    async def shutdown(self) -> None:
        """Cancel running batches and pending retirements."""
        for handle in self._retirements.values():
            handle.cancel()
        self._retirements.clear()

        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info("batches_cancelled_on_shutdown", count=len(tasks))
