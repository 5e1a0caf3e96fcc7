# errors.py
"""
Error taxonomy shared by the client side.

Callers branch on `AssistantError.kind`, never on the exception type.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION_FAILED = 'validation_failed'
    UNAUTHORIZED = 'unauthorized'
    NOT_FOUND = 'not_found'
    REQUEST_FAILED = 'request_failed'
    STORAGE_CORRUPT = 'storage_corrupt'


class AssistantError(Exception):
    def __init__(self, kind: ErrorKind, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status

    def __repr__(self) -> str:
        return f'AssistantError({self.kind.value}, {self.message!r}, status={self.status})'


def kind_for_status(status: int) -> ErrorKind:
    if status == 401:
        return ErrorKind.UNAUTHORIZED
    if status == 404:
        return ErrorKind.NOT_FOUND
    return ErrorKind.REQUEST_FAILED
