"""Response models for the batch ingest API."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from batch_ingest.core.progress import ProgressRecord


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)


class UploadAcceptedResponse(CamelModel):
    """Response for an accepted /api/upload-files submission."""

    success: bool = True
    upload_id: str = Field(..., alias="uploadId")
    message: str = "Files uploaded successfully. Processing has started."


class ErrorResponse(BaseModel):
    """Envelope for every rejected request."""

    success: bool = False
    message: str


class ProgressResponse(CamelModel):
    """Progress record as returned to polling clients."""

    total_files: int = Field(..., alias="totalFiles")
    processed_files: int = Field(..., alias="processedFiles")
    processing_files: List[str] = Field(default_factory=list, alias="processingFiles")
    is_complete: bool = Field(..., alias="isComplete")
    failed_files: List[str] = Field(default_factory=list, alias="failedFiles")

    @classmethod
    def from_record(cls, record: ProgressRecord) -> "ProgressResponse":
        return cls.model_validate(record.to_dict())


class HealthResponse(BaseModel):
    """Response for /health."""

    status: str
    service: str
    version: str
    active_batches: int
    concurrency_limit: int
    dependencies: dict
    timestamp: Optional[str] = None
