"""On-disk snapshot of the queue contents."""

import json
import logging
from pathlib import Path
from typing import Iterable, List

from pydantic import TypeAdapter, ValidationError

from src.core.safe_file_io import SafeFileIO
from src.c1_queue_models.errors import PersistenceError, StartupLoadError
from src.c1_queue_models.queue_item import QueueItem

logger = logging.getLogger(__name__)

_ITEMS_ADAPTER = TypeAdapter(List[QueueItem])


def order_by_enqueued_at(items: Iterable[QueueItem]) -> List[QueueItem]:
    """Sort items by enqueue time. Stable, so ties keep their given order."""
    return sorted(items, key=lambda item: item.enqueued_at)


def encode_snapshot(items: Iterable[QueueItem]) -> List[dict]:
    """Build the JSON-ready snapshot list, oldest item first."""
    return [item.to_record() for item in order_by_enqueued_at(items)]


def decode_snapshot(text: str, path: Path = None) -> List[QueueItem]:
    """Parse snapshot text into items.

    Items repeating an earlier id are dropped; the first occurrence wins.

    Raises:
        StartupLoadError: If the text is not a JSON list of valid items
    """
    try:
        data = json.loads(text)
    except (ValueError, RecursionError) as e:
        raise StartupLoadError(f"Snapshot is not valid JSON: {e}", path=path, operation="decode") from e

    if data is None:
        return []
    if not isinstance(data, list):
        raise StartupLoadError(
            f"Snapshot must be a JSON list, got {type(data).__name__}",
            path=path,
            operation="decode",
        )

    try:
        items = _ITEMS_ADAPTER.validate_python(data)
    except ValidationError as e:
        raise StartupLoadError(
            f"Snapshot contains invalid items: {e.error_count()} error(s)",
            path=path,
            operation="decode",
        ) from e
    except (ValueError, OverflowError, RecursionError) as e:
        raise StartupLoadError(f"Snapshot contains invalid items: {e}", path=path, operation="decode") from e

    seen = set()
    unique = []
    for item in items:
        if item.id in seen:
            logger.warning(f"Dropping duplicate queue item {item.id} from snapshot {path}")
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


class SnapshotFile:
    """A queue snapshot stored as a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return SafeFileIO.exists(self.path)

    def read_text(self) -> str:
        """Read raw snapshot text.

        Raises:
            StartupLoadError: If the file cannot be read or decoded as UTF-8
        """
        try:
            return SafeFileIO.read_text(self.path)
        except (OSError, UnicodeDecodeError) as e:
            raise StartupLoadError(f"Cannot read snapshot: {e}", path=self.path, operation="read") from e

    def decode(self, text: str) -> List[QueueItem]:
        """Decode snapshot text read from this file, oldest item first."""
        return order_by_enqueued_at(decode_snapshot(text, path=self.path))

    def write(self, items: Iterable[QueueItem]):
        """Atomically replace the snapshot with ``items``.

        Raises:
            PersistenceError: If the snapshot cannot be written
        """
        records = encode_snapshot(items)
        try:
            SafeFileIO.write_json_atomic(self.path, records)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot write snapshot: {e}", path=self.path, operation="write") from e
        logger.debug(f"Wrote {len(records)} item(s) to {self.path}")
