# music_school/core/exceptions.py
"""Custom exceptions for the music school backend."""
from typing import Any, Optional


class MusicSchoolException(Exception):
    """Base exception for the music school backend."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(MusicSchoolException):
    """Referenced teacher, student, lesson, occurrence or payment is absent."""
    status_code = 404

    def __init__(self, resource: str, id: Any = None):
        message = f"{resource} not found"
        if id is not None:
            message += f" with id: {id}"
        super().__init__(message)


class InvalidInputError(MusicSchoolException):
    """Missing field, out-of-range value or otherwise unacceptable input."""
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class ConflictError(MusicSchoolException):
    """Duplicate data, exhausted capacity or a forbidden state transition."""
    status_code = 409


class PersistenceError(MusicSchoolException):
    """Store-level failure, message passed through."""
    status_code = 500
