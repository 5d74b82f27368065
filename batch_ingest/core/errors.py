"""Submission errors for the batch ingest service.

Each rejection carries the HTTP status and the message returned to the client.
"""


class UploadRejectedError(Exception):
    """Base class for submissions rejected before any processing starts."""

    status_code = 400
    default_message = "Upload rejected."

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingUploadIdError(UploadRejectedError):
    default_message = "Upload ID is required."


class MissingCollectionNameError(UploadRejectedError):
    default_message = "Collection name is required."


class InvalidCollectionNameError(UploadRejectedError):
    default_message = "Collection name must be a single path segment."


class InvalidUploadError(UploadRejectedError):
    """Malformed labels or file paths."""

    default_message = "Upload is malformed."


class CollectionExistsError(UploadRejectedError):
    status_code = 409
    default_message = "Collection already exists."


class UploadInProgressError(UploadRejectedError):
    status_code = 409
    default_message = "An upload with this ID is already in progress."
