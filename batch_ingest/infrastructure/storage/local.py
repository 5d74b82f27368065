"""Local collection storage for the batch ingest service.

Persists uploaded files under <root>/<collection>/ and writes the collection's
label metadata. All operations are synchronous; every file of a batch is on
disk before any of them is dispatched.
"""

import json
import shutil
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any, BinaryIO, List, Union

from batch_ingest.core.dispatch.models import FileDescriptor
from batch_ingest.core.errors import (
    CollectionExistsError,
    InvalidCollectionNameError,
    InvalidUploadError,
)
from batch_ingest.core.logging import logger

METADATA_FILENAME = ".metadata.json"


def _has_drive_prefix(path: str) -> bool:
    """Windows drive root such as C: or C:/ (after separator normalization)."""
    return len(path) >= 2 and path[0].isalpha() and path[1] == ":" and (len(path) == 2 or path[2] == "/")


@dataclass
class IncomingFile:
    """A client-supplied file before persistence."""

    relative_path: str
    content: BinaryIO


class LocalCollectionStorage:
    """Filesystem storage rooted at a base directory."""

    def __init__(self, base_path: Union[str, Path]):
        self.base_path = Path(base_path)

    def collection_path(self, collection_name: str) -> Path:
        """Get the directory a collection lives in.

        Raises:
            InvalidCollectionNameError: If the name is not a single path segment
        """
        name = collection_name.strip()
        if (
            not name
            or name in (".", "..")
            or "/" in name
            or "\\" in name
            or "\x00" in name
        ):
            raise InvalidCollectionNameError()
        return self.base_path / name

    def collection_exists(self, collection_name: str) -> bool:
        return self.collection_path(collection_name).exists()

    def create_collection(self, collection_name: str) -> Path:
        """Create the collection directory, failing if it already exists.

        Raises:
            CollectionExistsError: If the collection directory already exists
        """
        path = self.collection_path(collection_name)
        self.base_path.mkdir(parents=True, exist_ok=True)
        try:
            path.mkdir(exist_ok=False)
        except FileExistsError:
            raise CollectionExistsError()

        logger.info("collection_created", collection=collection_name, path=str(path))
        return path

    def remove_collection(self, collection_path: Path) -> None:
        """Remove a collection directory and everything in it."""
        shutil.rmtree(collection_path, ignore_errors=True)
        logger.info("collection_removed", path=str(collection_path))

    @staticmethod
    def normalize_relative_path(relative_path: str) -> str:
        """Normalize a client path to the identifier used for the file.

        Directory uploads keep their directory-relative path, flat uploads keep
        only the base name.

        Raises:
            InvalidUploadError: If the path is empty, absolute or escapes the collection
        """
        raw = (relative_path or "").replace("\\", "/").strip()
        if not raw or raw.startswith("/") or _has_drive_prefix(raw):
            raise InvalidUploadError(f"Invalid file path: {relative_path!r}")

        parts = [part for part in PurePosixPath(raw).parts if part not in ("", ".")]
        if not parts or ".." in parts:
            raise InvalidUploadError(f"Invalid file path: {relative_path!r}")

        if "/" in raw:
            return "/".join(parts)
        return parts[-1]

    def destination_for(self, collection_path: Path, relative_path: str) -> Path:
        return collection_path.joinpath(*relative_path.split("/"))

    def save_files(self, collection_path: Path, files: List[IncomingFile]) -> List[FileDescriptor]:
        """Copy every incoming file into the collection.

        Returns:
            One FileDescriptor per incoming file, in submission order. Files
            sharing a path each get a descriptor; the later copy wins on disk.
        """
        descriptors = []
        for incoming in files:
            relative_path = self.normalize_relative_path(incoming.relative_path)
            destination = self.destination_for(collection_path, relative_path)
            destination.parent.mkdir(parents=True, exist_ok=True)

            if hasattr(incoming.content, "seek"):
                incoming.content.seek(0)
            with open(destination, "wb") as out:
                shutil.copyfileobj(incoming.content, out)

            size = destination.stat().st_size
            descriptors.append(
                FileDescriptor(relative_path=relative_path, destination=destination, size=size)
            )
            logger.debug("file_persisted", file=relative_path, destination=str(destination), size=size)

        return descriptors

    def save_metadata(self, collection_path: Path, labels: Any) -> Path:
        """Write labels as pretty-printed JSON next to the collection's files."""
        metadata_path = collection_path / METADATA_FILENAME
        with open(metadata_path, "w", encoding="utf-8") as f:
            json.dump(labels, f, indent=2)
        logger.debug("metadata_saved", path=str(metadata_path))
        return metadata_path

    def is_writable(self) -> bool:
        """Check that the storage root exists (creating it if needed) and accepts writes."""
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            probe = self.base_path / ".write_probe"
            probe.write_bytes(b"")
            probe.unlink()
            return True
        except OSError:
            return False
