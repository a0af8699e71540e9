"""Exceptions raised by the store and the AI gateway.

Each exception carries the HTTP status and the machine readable code used
when it is rendered as an ``{"error": ..., "code": ...}`` response.
"""


class AppError(Exception):
    """Base class for errors rendered as ``{error, code}`` responses."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StoreError(AppError):
    """Base class for persistence store failures."""


class InvalidImageDataError(StoreError):
    """Image payload is not a base64 ``data:image/...`` URI."""

    status_code = 400
    code = "VALIDATION_ERROR"


class EntryNotFoundError(StoreError):
    status_code = 404
    code = "NOT_FOUND"


class UnknownCollectionError(EntryNotFoundError):
    code = "UNKNOWN_COLLECTION"


class ImageNotFoundError(EntryNotFoundError):
    pass


class StorageError(StoreError):
    """The store document or an image could not be read or written."""

    status_code = 500
    code = "STORAGE_ERROR"


class InvalidImageReferenceError(AppError):
    """Image sent for analysis is neither a data URI nor a stored image."""

    status_code = 400
    code = "BAD_REQUEST"


class GeminiAPIError(AppError):
    """A remote model call failed; wraps the classified failure."""

    def __init__(self, classified, original: Exception):
        super().__init__(classified.message)
        self.status_code = classified.status_code
        self.code = classified.code
        self.kind = classified.kind
        self.original = original
