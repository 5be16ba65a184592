"""Durable key-value storage for client state (cart snapshot, auth session).

Writes are best-effort: a failing write is logged and dropped, a failing
read is logged and reported as a missing key. Client state is a convenience
cache, the server holds the authoritative records.
"""

import re
from abc import ABC, abstractmethod
from pathlib import Path

import structlog

logger = structlog.get_logger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


def is_safe_key(key) -> bool:
    """Keys map to file names, so only plain names are accepted."""
    return isinstance(key, str) and bool(_SAFE_KEY.match(key)) and key not in (".", "..")


class KeyValueStorage(ABC):
    @abstractmethod
    def read(self, key: str) -> str | None:
        """Return the text stored under ``key``, or None when absent."""

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``. Missing keys are ignored."""


class MemoryStorage(KeyValueStorage):
    """Process-local storage, lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key):
        return self._data.get(key)

    def write(self, key, value):
        self._data[key] = value

    def remove(self, key):
        self._data.pop(key, None)

    def __contains__(self, key):
        return key in self._data


class FileStorage(KeyValueStorage):
    """One UTF-8 text file per key inside ``directory``.

    Keys that could escape ``directory`` are refused like any other storage
    fault: logged, read as absent, and never written.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def _path_for(self, key: str) -> Path | None:
        if not is_safe_key(key):
            logger.warning("Refusing unsafe storage key", key=key, directory=str(self.directory))
            return None
        return self.directory / f"{key}.json"

    def read(self, key):
        path = self._path_for(key)
        if path is None or not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed to read storage key", key=key, path=str(path), error=str(exc))
            return None

    def write(self, key, value):
        path = self._path_for(key)
        if path is None:
            return
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".tmp")
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as exc:
            logger.warning("Failed to write storage key", key=key, path=str(path), error=str(exc))

    def remove(self, key):
        path = self._path_for(key)
        if path is None:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Failed to remove storage key", key=key, path=str(path), error=str(exc))
