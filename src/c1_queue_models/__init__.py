"""Queue models and error types."""

from src.c1_queue_models.queue_item import QueueItem, EnqueueResult, QueueStatus
from src.c1_queue_models.errors import (
    QueueStoreError,
    QueueValidationError,
    PersistenceError,
    StartupLoadError,
)

__all__ = [
    "QueueItem",
    "EnqueueResult",
    "QueueStatus",
    "QueueStoreError",
    "QueueValidationError",
    "PersistenceError",
    "StartupLoadError",
]
