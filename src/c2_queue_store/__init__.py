"""Persistent queue store."""

from src.c2_queue_store.queue_store import PersistentQueueStore
from src.c2_queue_store.snapshot import SnapshotFile

__all__ = ["PersistentQueueStore", "SnapshotFile"]
