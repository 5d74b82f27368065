"""Progress routes for the batch ingest API - read-only views of the progress ledger."""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, StreamingResponse

from batch_ingest.api.dependencies import get_ledger
from batch_ingest.api.models import ErrorResponse, ProgressResponse
from batch_ingest.api.utils import create_sse_event
from batch_ingest.core.logging import logger
from batch_ingest.core.progress import ProgressLedger

router = APIRouter(prefix="/api", tags=["Progress"])

NOT_FOUND_MESSAGE = "Progress not found for the given uploadId."


def _missing_upload_id() -> JSONResponse:
    return JSONResponse(
        status_code=400, content=ErrorResponse(message="uploadId is required.").model_dump()
    )


@router.get("/upload-progress")
async def upload_progress(
    upload_id: Optional[str] = Query(None, alias="uploadId"),
    ledger: ProgressLedger = Depends(get_ledger),
):
    """Get the progress record of an upload.

    A 404 means the upload never existed, is not registered yet, or was retired
    after completion.

    - **uploadId**: Identifier used when submitting
    """
    if not upload_id:
        return _missing_upload_id()

    record = ledger.get(upload_id)
    if record is None:
        logger.debug("progress_not_found", upload_id=upload_id)
        return JSONResponse(status_code=404, content=ErrorResponse(message=NOT_FOUND_MESSAGE).model_dump())

    return JSONResponse(content=ProgressResponse.from_record(record).model_dump(by_alias=True))


@router.get("/upload-progress/stream")
async def upload_progress_stream(
    upload_id: Optional[str] = Query(None, alias="uploadId"),
    interval: float = Query(0.5, ge=0.05, le=10.0),
    ledger: ProgressLedger = Depends(get_ledger),
):
    """Stream progress as server-sent events until the upload completes or disappears.

    Events: progress (on every change), complete, not_found.

    - **uploadId**: Identifier used when submitting
    - **interval**: Seconds between ledger reads
    """
    if not upload_id:
        return _missing_upload_id()

    async def event_generator():
        last_record = None
        while True:
            record = ledger.get(upload_id)
            if record is None:
                yield create_sse_event("not_found", {"uploadId": upload_id, "message": NOT_FOUND_MESSAGE})
                return

            if record != last_record:
                yield create_sse_event("progress", {"uploadId": upload_id, **record.to_dict()})
                last_record = record

            if record.is_complete:
                yield create_sse_event("complete", {"uploadId": upload_id, **record.to_dict()})
                return

            await asyncio.sleep(interval)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
            "Connection": "keep-alive",
        },
    )
