"""
Domain exceptions.
"""

from typing import Optional


class StorageError(Exception):
    """
    Any failure coming out of the persistence layer: connectivity, constraint
    violations, values the column types reject.

    ``message`` is the driver's own text, passed to clients unchanged.
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.operation = operation

    @classmethod
    def from_exception(cls, exc: BaseException, operation: Optional[str] = None) -> "StorageError":
        """Build from a SQLAlchemy/driver exception, preferring the DBAPI message."""
        orig = getattr(exc, "orig", None)
        message = str(orig) if orig is not None else str(exc)
        if not message:
            message = exc.__class__.__name__
        return cls(message, operation=operation)
