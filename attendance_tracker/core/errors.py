"""Error taxonomy shared by the attendance and directory operations.

Every operation reports failure by raising one of these. The HTTP layer
translates them into ``{"error": message}`` responses with the status code
carried by the class.
"""


class AttendanceError(Exception):
    """Base class for all operation failures."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AttendanceError):
    """Required input is missing or malformed."""

    status_code = 400


class NotFoundError(AttendanceError):
    """A referenced member or service does not exist."""

    status_code = 404


class DuplicateError(AttendanceError):
    """Attendance is already recorded for the member and service."""

    status_code = 409


class StoreError(AttendanceError):
    """The underlying database operation failed."""

    status_code = 500
