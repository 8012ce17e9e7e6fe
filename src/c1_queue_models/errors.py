"""Error taxonomy for the queue store."""

from pathlib import Path
from typing import Optional, Union


class QueueStoreError(Exception):
    """Base class for queue store errors."""


class QueueValidationError(QueueStoreError, ValueError):
    """Caller-supplied input was rejected (e.g. a blank payload)."""


class PersistenceError(QueueStoreError):
    """Reading or writing the queue snapshot failed.

    Attributes:
        path: Snapshot file involved
        operation: What was being attempted ("read", "write", "decode", ...)
    """

    def __init__(
        self,
        message: str,
        path: Optional[Union[Path, str]] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message)
        self.path = path
        self.operation = operation

    def __str__(self) -> str:
        base = super().__str__()
        if self.path is None:
            return base
        return f"{base} (operation={self.operation}, path={self.path})"


class StartupLoadError(PersistenceError):
    """The snapshot could not be loaded when the store was constructed."""
