"""Upload routes for the batch ingest API - collection submission."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from batch_ingest.api.dependencies import get_coordinator
from batch_ingest.api.models import ErrorResponse, UploadAcceptedResponse
from batch_ingest.core.batch import BatchCoordinator
from batch_ingest.core.errors import UploadRejectedError
from batch_ingest.core.logging import logger
from batch_ingest.infrastructure.storage import IncomingFile

router = APIRouter(prefix="/api", tags=["Uploads"])


@router.post("/upload-files")
async def upload_files(
    collection_name: Optional[str] = Form(None, alias="collectionName"),
    upload_id: Optional[str] = Form(None, alias="uploadId"),
    labels: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None),
    coordinator: BatchCoordinator = Depends(get_coordinator),
):
    """Submit a collection of files for processing.

    Returns as soon as the files are stored; poll /api/upload-progress with the
    same uploadId to follow processing.

    - **collectionName**: Target collection (must not exist yet)
    - **uploadId**: Client-generated identifier for polling
    - **labels**: JSON list of {key, value} pairs (or a JSON object)
    - **files**: Files; each part's filename is its relative path
    """
    incoming = [IncomingFile(relative_path=f.filename or "", content=f.file) for f in files or []]

    logger.info(
        "upload_received",
        upload_id=upload_id,
        collection=collection_name,
        files=len(incoming),
    )

    try:
        accepted_id = await coordinator.submit(
            collection_name=collection_name,
            upload_id=upload_id,
            labels=labels,
            files=incoming,
        )
    except UploadRejectedError as e:
        logger.info(
            "upload_rejected",
            upload_id=upload_id,
            collection=collection_name,
            reason=type(e).__name__,
        )
        return JSONResponse(
            status_code=e.status_code,
            content=ErrorResponse(message=e.message).model_dump(),
        )
    except Exception as e:
        logger.exception("upload_failed", upload_id=upload_id, collection=collection_name)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(message=str(e) or "An unknown error occurred.").model_dump(),
        )

    return JSONResponse(content=UploadAcceptedResponse(upload_id=accepted_id).model_dump(by_alias=True))
