"""Safe file I/O helpers for durable state files.

This module provides the file operations the queue store relies on for its
snapshot. Writes never leave a partially written file at the destination:
content goes to a temporary sibling file which is flushed, fsynced and then
renamed over the target with ``os.replace``.
"""

from pathlib import Path
from typing import Union, Any
import json
import os
import tempfile


class SafeFileIO:
    """
    File I/O wrapper for whole-file state snapshots.

    Example:
        # Reading files
        content = SafeFileIO.read_text("data/queue_state.json")

        # Atomic JSON write (creates parent directories automatically)
        SafeFileIO.write_json_atomic("data/queue_state.json", [{"id": "..."}])
    """

    @staticmethod
    def read_text(path: Union[Path, str], encoding: str = "utf-8") -> str:
        """
        Read text file.

        Args:
            path: Path to read
            encoding: Text encoding

        Returns:
            File contents as string

        Raises:
            FileNotFoundError: If file does not exist
            OSError: If the file cannot be read
        """
        return Path(path).read_text(encoding=encoding)

    @staticmethod
    def exists(path: Union[Path, str]) -> bool:
        """Check if file exists."""
        return Path(path).is_file()

    @staticmethod
    def write_text_atomic(
        path: Union[Path, str], content: str, allow_create: bool = True, encoding: str = "utf-8"
    ):
        """
        Atomically replace a text file.

        The content is written to a temporary file in the destination
        directory, fsynced, and renamed over ``path``. Readers observe either
        the previous file or the complete new one.

        Args:
            path: Destination path
            content: Text content to write
            allow_create: Create parent directories if they don't exist
            encoding: Text encoding

        Raises:
            OSError: If the temporary file cannot be written or renamed
        """
        path = Path(path)
        if allow_create:
            path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding=encoding) as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    @staticmethod
    def write_json_atomic(path: Union[Path, str], data: Any, allow_create: bool = True):
        """
        Serialize ``data`` as compact JSON and atomically replace ``path`` with it.

        Args:
            path: Destination path
            data: Data to serialize as JSON
            allow_create: Create parent directories if they don't exist

        Raises:
            TypeError: If data is not JSON serializable
            OSError: If the file cannot be written
        """
        content = json.dumps(data, separators=(",", ":"))
        SafeFileIO.write_text_atomic(path, content, allow_create=allow_create)
