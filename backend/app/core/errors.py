from __future__ import annotations


class JobBoardError(Exception):
    """Base class for outcomes the caller is expected to handle.

    `kind` is the stable, machine-readable name sent to API clients and
    `status_code` is the HTTP status the API layer maps it to.
    """

    kind = "error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(JobBoardError):
    kind = "not_found"
    status_code = 404


class Forbidden(JobBoardError):
    kind = "forbidden"
    status_code = 403


class Conflict(JobBoardError):
    kind = "conflict"
    status_code = 409


class Unauthenticated(JobBoardError):
    kind = "unauthenticated"
    status_code = 401


class ValidationError(JobBoardError):
    kind = "invalid"
    status_code = 422


class StorageError(JobBoardError):
    """Backing file could not be read, parsed or written.

    Raised per call; the store keeps its last good cache.
    """

    kind = "storage"
    status_code = 500
