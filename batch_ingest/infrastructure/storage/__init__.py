"""Storage infrastructure."""

from batch_ingest.infrastructure.storage.local import (
    METADATA_FILENAME,
    IncomingFile,
    LocalCollectionStorage,
)

__all__ = ["IncomingFile", "LocalCollectionStorage", "METADATA_FILENAME"]
