# backend/core/errors.py

"""
Error taxonomy shared by every plugin.

Each error carries the HTTP status its API routes answer with, so routers
only need ``to_http_exception`` instead of their own mapping tables.
"""

from fastapi import HTTPException


class AdToolError(Exception):
    """Base class for all expected, user-facing failures."""
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AdToolError):
    """Malformed or missing input (unsupported network, bad key path, ...)."""
    status_code = 400


class NotFoundError(AdToolError):
    """An expected directory, file, project or document is absent."""
    status_code = 404


class CategoryMismatchError(AdToolError):
    """A replacement file is not of the same category as the original asset."""
    status_code = 409

    def __init__(self, expected: str, actual: str):
        super().__init__(f"File type mismatch. Expected {expected} file, got {actual} file.")
        self.expected = expected
        self.actual = actual


class ParseError(AdToolError):
    """No config export statement found, or the literal is outside the grammar."""
    status_code = 422

    def __init__(self, message: str, position: int = -1):
        self.reason = message
        self.position = position
        if position >= 0:
            message = f"{message} (at offset {position})"
        super().__init__(message)


class StorageIOError(AdToolError):
    """Read, write or create failure at the storage boundary."""
    status_code = 500


class BuildTriggerError(AdToolError):
    """The external build endpoint failed, refused the request or timed out."""
    status_code = 502


class OperationAborted(Exception):
    """
    The user cancelled a selection. Not an AdToolError on purpose: callers
    treat it as a silent no-op and never log or report it.
    """


def to_http_exception(error: AdToolError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)
