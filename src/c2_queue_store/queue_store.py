"""Persistent FIFO queue store with a JSON snapshot on disk."""

import asyncio
import logging
import threading
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Deque, List, Optional, Union

from src.c1_queue_models.errors import PersistenceError, QueueValidationError, StartupLoadError
from src.c1_queue_models.queue_item import EnqueueResult, QueueItem, QueueStatus
from src.c2_queue_store.snapshot import SnapshotFile

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PersistentQueueStore:
    """In-memory FIFO queue mirrored to a snapshot file.

    Memory is authoritative. Every successful enqueue/dequeue is followed by a
    full snapshot write; a failed write is logged and never undoes the
    in-memory change, so memory may run ahead of disk until the next
    successful write.

    Two locks are used:
        - ``_items_lock`` guards the deque, the mutation version and the
          timestamp clock. It is only held for in-memory work.
        - ``_persist_lock`` serializes snapshot writes. The snapshot is taken
          while holding it, so a later write always carries a state at least
          as new as any earlier one.
    """

    def __init__(
        self,
        storage_path: Union[Path, str],
        persist_timeout: Optional[float] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the store and load any existing snapshot.

        Args:
            storage_path: Snapshot file location
            persist_timeout: Default seconds an operation waits for its own
                snapshot write (None waits until the write finishes)
            clock: Source of UTC timestamps for new items
        """
        self.snapshot_file = SnapshotFile(Path(storage_path))
        self.persist_timeout = persist_timeout
        self._clock = clock

        self._items: Deque[QueueItem] = deque()
        self._items_lock = threading.Lock()
        self._persist_lock = threading.Lock()

        # Incremented on every mutation; _persisted_version is the newest
        # version known to be on disk.
        self._version = 0
        self._persisted_version = 0
        self._last_enqueued_at: Optional[datetime] = None

        try:
            self._load()
        except StartupLoadError as e:
            logger.error(f"Failed to load queue state from disk. Starting with an empty queue: {e}")

        logger.info(f"PersistentQueueStore initialized with storage_path={self.storage_path}, items={len(self._items)}")

    @property
    def storage_path(self) -> Path:
        return self.snapshot_file.path

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def enqueue(self, payload: str, timeout: Optional[float] = None) -> EnqueueResult:
        """Append a payload to the tail of the queue.

        Args:
            payload: Non-blank text to enqueue (stored as given)
            timeout: Seconds to wait for this call's snapshot write

        Returns:
            EnqueueResult with the new item and the queue length after the append

        Raises:
            QueueValidationError: If the payload is missing or blank
        """
        if not isinstance(payload, str) or not payload.strip():
            logger.debug("Rejected enqueue with blank payload")
            raise QueueValidationError("Payload cannot be empty.")

        with self._items_lock:
            item = QueueItem.create(payload=payload, enqueued_at=self._next_timestamp())
            self._items.append(item)
            position = len(self._items)
            version = self._bump_version()

        logger.debug(f"Enqueued item {item.id} at position {position}")
        await self._persist(version, timeout)
        return EnqueueResult(item=item, position=position)

    async def dequeue(self, timeout: Optional[float] = None) -> Optional[QueueItem]:
        """Remove and return the head of the queue.

        Args:
            timeout: Seconds to wait for this call's snapshot write

        Returns:
            The earliest queued item, or None if the queue is empty
        """
        with self._items_lock:
            if not self._items:
                return None
            item = self._items.popleft()
            version = self._bump_version()

        logger.debug(f"Dequeued item {item.id}")
        await self._persist(version, timeout)
        return item

    async def status(self) -> QueueStatus:
        """Return the current item count."""
        with self._items_lock:
            count = len(self._items)
        return QueueStatus.from_count(count)

    async def flush(self) -> bool:
        """Write the current state if it is newer than what is on disk.

        Returns:
            True if disk holds the current state afterwards
        """
        with self._items_lock:
            version = self._version
        return await asyncio.to_thread(self._write_snapshot, version)

    def snapshot(self) -> List[QueueItem]:
        """Return a copy of the queued items, head first."""
        with self._items_lock:
            return list(self._items)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _next_timestamp(self) -> datetime:
        # Caller holds _items_lock. Never go backwards, even if the clock does.
        now = self._clock()
        if self._last_enqueued_at is not None and now < self._last_enqueued_at:
            now = self._last_enqueued_at
        self._last_enqueued_at = now
        return now

    def _bump_version(self) -> int:
        # Caller holds _items_lock
        self._version += 1
        return self._version

    def _load(self):
        """Populate the queue from the snapshot file, if any."""
        if not self.snapshot_file.exists():
            logger.info(f"Queue storage file not found at {self.storage_path}. Starting with empty queue.")
            return

        text = self.snapshot_file.read_text()
        if not text.strip():
            logger.warning(f"Queue storage file at {self.storage_path} is empty. Starting with empty queue.")
            return

        items = self.snapshot_file.decode(text)
        with self._items_lock:
            self._items.extend(items)
            if items:
                self._last_enqueued_at = items[-1].enqueued_at
        logger.info(f"Loaded {len(items)} queue items from {self.storage_path}.")

    async def _persist(self, version: int, timeout: Optional[float]):
        """Write a snapshot covering ``version`` off the event loop.

        The write runs in a worker thread and is shielded: if the caller
        times out or is cancelled, the write still completes.
        """
        if timeout is None:
            timeout = self.persist_timeout

        write = asyncio.ensure_future(asyncio.to_thread(self._write_snapshot, version))
        try:
            await asyncio.wait_for(asyncio.shield(write), timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Snapshot write for version {version} still pending after {timeout}s; "
                f"continuing in background (path={self.storage_path})"
            )

    def _write_snapshot(self, version: int) -> bool:
        """Persist the current queue unless ``version`` is already on disk.

        Runs in a worker thread. Persistence failures are logged and reported
        through the return value only.
        """
        with self._persist_lock:
            if self._persisted_version >= version:
                logger.debug(f"Snapshot version {version} already persisted (on disk: {self._persisted_version})")
                return True

            with self._items_lock:
                items = list(self._items)
                current = self._version

            try:
                self.snapshot_file.write(items)
            except PersistenceError as e:
                logger.error(f"Failed to persist queue state: {e}", exc_info=True)
                return False

            self._persisted_version = current
            return True
