"""Typed errors raised by the standards engine.

Every error carries a ``kind`` so transports can map it without
inspecting the exception class (tool responses, HTTP status codes).
"""
from typing import Optional


class StandardsError(Exception):
    """Base class for all standards engine errors"""

    kind = "ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {'kind': self.kind, 'message': self.message}


class ValidationError(StandardsError):
    """Malformed or missing metadata, bad version or date format"""

    kind = "VALIDATION"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.field:
            data['field'] = self.field
        return data


class InvalidVersionError(ValidationError):
    """Version string is not semver or would move backwards"""

    def __init__(self, message: str = "Invalid version format (must be semver: X.Y.Z)"):
        super().__init__(message, field="version")


class NotFoundError(StandardsError):
    """No document at a path, or nothing matches a required combination"""

    kind = "NOT_FOUND"


class ConflictError(StandardsError):
    """Target canonical path is already occupied"""

    kind = "CONFLICT"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class StoreIOError(StandardsError):
    """Reading or writing a file failed"""

    kind = "STORE_IO"
