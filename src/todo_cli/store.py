"""File-backed todo list storage for todo-cli.

A ``TodoList`` reads the whole todo file when it is opened and rewrites the
whole file when it is closed. Between those two points the file on disk may
be stale. Use it as a context manager so the final save runs on every exit
path::

    with TodoList.open(path) as todos:
        todos.add(TodoItem(content="Buy milk"))
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import IO, Iterator, Optional

from pydantic import TypeAdapter, ValidationError

from .errors import FormatError, IoError
from .models import TodoItem

logger = logging.getLogger(__name__)

_items_adapter = TypeAdapter(list[TodoItem])


class TodoList:
    """The records of one todo file plus the open handle backing them."""

    def __init__(self, path: Path, file: IO[str], items: list[TodoItem]) -> None:
        self.path = path
        self._file: Optional[IO[str]] = file
        self._items = items
        self._lock = threading.RLock()

    @classmethod
    def open(cls, path: Path | str) -> "TodoList":
        """Open or create the todo file at ``path`` and load its items.

        Raises:
            IoError: The file cannot be opened or read.
            FormatError: The file is not empty and not a valid list of items.
        """
        path = Path(path)
        try:
            fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
            file = os.fdopen(fd, "r+", encoding="utf-8")
        except OSError as e:
            raise IoError(f"Cannot open {path}: {e}") from e

        try:
            file.seek(0)
            content = file.read()
        except UnicodeDecodeError as e:
            file.close()
            raise FormatError(f"Invalid todo file {path}: not UTF-8 text ({e})") from e
        except OSError as e:
            file.close()
            raise IoError(f"Cannot read {path}: {e}") from e

        if not content.strip():
            items: list[TodoItem] = []
        else:
            try:
                items = _items_adapter.validate_json(content)
            except ValidationError as e:
                file.close()
                raise FormatError(f"Invalid todo file {path}: {e} (content: {content})") from e

        logger.debug("Loaded %d items from %s", len(items), path)
        return cls(path, file, items)

    def __enter__(self) -> "TodoList":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(self.items)

    @property
    def items(self) -> list[TodoItem]:
        """Snapshot of the items in insertion order."""
        with self._lock:
            return list(self._items)

    @property
    def closed(self) -> bool:
        return self._file is None

    def sorted_by_priority(self) -> list[TodoItem]:
        """Snapshot of the items, most urgent first.

        Items with equal priority keep their insertion order.
        """
        return sorted(self.items, key=lambda item: item.priority, reverse=True)

    def add(self, item: TodoItem) -> bool:
        """Append ``item`` unless an identical item is already stored.

        Returns:
            True if the item was appended, False if it was rejected as a duplicate.
        """
        with self._lock:
            if item in self._items:
                logger.debug("Rejected duplicate item %r", item.name)
                return False
            self._items.append(item)
            return True

    def find_by_name(self, keyword: str) -> list[TodoItem]:
        """Return every item whose name contains ``keyword``, ignoring case."""
        keyword = keyword.lower()
        with self._lock:
            return [item for item in self._items if keyword in item.name.lower()]

    def find_first_by_name(self, keyword: str) -> Optional[TodoItem]:
        """Return the first item whose name contains ``keyword``, or None."""
        found = self.find_by_name(keyword)
        return found[0] if found else None

    def delete_by_name(self, name: str) -> bool:
        """Remove the first item whose name is exactly ``name``.

        Returns:
            True if an item was removed, False if nothing matched.
        """
        with self._lock:
            for index, item in enumerate(self._items):
                if item.name == name:
                    del self._items[index]
                    logger.debug("Deleted item %r at position %d", name, index)
                    return True
            return False

    def clear(self) -> None:
        """Empty the todo file on disk and the items in memory.

        Raises:
            IoError: Flushing, truncating or rewinding the file failed.
        """
        with self._lock:
            file = self._require_file()
            try:
                file.flush()
                file.truncate(0)
                file.seek(0)
            except OSError as e:
                raise IoError(f"Cannot clear {self.path}: {e}") from e
            # The final save would otherwise write the old items back
            self._items.clear()
            logger.debug("Cleared %s", self.path)

    def save(self) -> None:
        """Overwrite the todo file with the current items.

        Raises:
            IoError: Truncating or writing the file failed.
        """
        with self._lock:
            file = self._require_file()
            payload = json.dumps(
                [item.to_dict() for item in self._items],
                indent=2,
                ensure_ascii=False,
            )
            try:
                file.truncate(0)
                file.seek(0)
                file.write(payload)
                file.flush()
            except OSError as e:
                raise IoError(f"Cannot save {self.path}: {e}") from e
            logger.debug("Saved %d items to %s", len(self._items), self.path)

    def close(self) -> None:
        """Save the items and release the file handle.

        A failing save is logged rather than raised; the handle is released
        either way. Closing twice does nothing.
        """
        with self._lock:
            if self._file is None:
                return
            try:
                self.save()
            except IoError as e:
                logger.error("Failed to save todo file: %s", e)
            finally:
                try:
                    self._file.close()
                except OSError as e:
                    logger.error("Failed to close %s: %s", self.path, e)
                self._file = None

    def _require_file(self) -> IO[str]:
        if self._file is None:
            raise IoError(f"Todo file {self.path} is already closed")
        return self._file
