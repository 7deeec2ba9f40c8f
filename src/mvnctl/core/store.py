"""
Key-value cache capability for per-project metadata.

Discovery results (launch capabilities, profile lists, starter classes,
module preferences) are cached through one small interface so callers never
touch global files directly. ``JsonKeyValueStore`` persists one JSON document
per project under the user config directory; ``MemoryKeyValueStore`` keeps
everything in process and is used by tests.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from mvnctl.core.config.loader import get_app_config_dir
from mvnctl.utils.project import project_hash

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Error from key-value store operations."""

    pass


@runtime_checkable
class KeyValueStore(Protocol):
    """Minimal get/set/delete capability over JSON-serializable values."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """In-process store. Values are round-tripped through JSON on write."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        with self._lock:
            value = self._data.get(key)
        return None if value is None else json.loads(value)

    def set(self, key: str, value: Any) -> None:
        encoded = json.dumps(value)
        with self._lock:
            self._data[key] = encoded

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)


class JsonKeyValueStore:
    """
    Store backed by a single JSON object file.

    Writes are atomic (temp file + replace), so concurrent sessions see either
    the old or the new document, never a torn one.

    Example:
        >>> store = JsonKeyValueStore.for_project(Path("/work/shop"))
        >>> store.set("profiles", ["dev", "prod"])
        >>> store.get("profiles")
        ['dev', 'prod']
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()

    @classmethod
    def for_project(cls, project_root: Path, cache_dir: Path | None = None) -> JsonKeyValueStore:
        """
        Create the store for a project, keyed by its path hash.

        Args:
            project_root: Maven project root
            cache_dir: Directory for cache files (defaults to ~/.config/mvnctl/cache)
        """
        if cache_dir is None:
            cache_dir = get_app_config_dir() / "cache"
        return cls(cache_dir / f"{project_hash(project_root)}.json")

    @property
    def file_path(self) -> Path:
        return self._file_path

    def _read(self) -> dict[str, Any]:
        if not self._file_path.exists():
            return {}
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            # A corrupt cache is discarded, not fatal
            logger.warning("Ignoring unreadable cache %s: %s", self._file_path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring cache %s: top-level value is not an object", self._file_path)
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            dir=self._file_path.parent,
            prefix=".cache_",
            suffix=".json.tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
                f.write("\n")
            os.replace(temp_path, self._file_path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            try:
                self._write(data)
            except OSError as e:
                raise StoreError(f"Failed to write cache {self._file_path}: {e}") from e

    def delete(self, key: str) -> None:
        with self._lock:
            data = self._read()
            if key not in data:
                return
            del data[key]
            try:
                self._write(data)
            except OSError as e:
                raise StoreError(f"Failed to write cache {self._file_path}: {e}") from e
