from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Iterator, Optional, TypeVar

from ..core.errors import StorageError


logger = logging.getLogger(__name__)

R = TypeVar("R")


class JsonRecordStore(Generic[R]):
    """Cached mapping of id -> record, persisted as one JSON object on disk.

    Every `read` and `write` is serialized by a per-store lock. Callers that
    need read-validate-mutate-write atomicity use `transaction()`, which holds
    the same lock across the whole sequence.
    """

    def __init__(
        self,
        path: Path,
        decode: Callable[[Dict[str, Any]], R],
        encode: Callable[[R], Dict[str, Any]],
    ):
        self.path = path
        self._decode = decode
        self._encode = encode
        self._lock = threading.RLock()
        self._cache: Dict[str, R] = {}
        self._init()

    def _init(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.touch(exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create store file '{self.path}': {e}") from e

    def _load(self) -> Dict[str, R]:
        try:
            content = self.path.read_text(encoding="utf-8").strip() if self.path.exists() else ""
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Error opening file '{self.path}': {e}") from e
        if not content:
            return {}
        try:
            raw = json.loads(content)
        except (json.JSONDecodeError, RecursionError) as e:
            raise StorageError(f"Malformed JSON in '{self.path}': {e}") from e
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            raise StorageError(f"Expected a JSON object in '{self.path}'")
        records: Dict[str, R] = {}
        for key, value in raw.items():
            if not isinstance(value, dict):
                raise StorageError(f"Record '{key}' in '{self.path}' is not an object")
            try:
                records[str(key)] = self._decode(value)
            except (ValueError, TypeError) as e:
                raise StorageError(f"Invalid record '{key}' in '{self.path}': {e}") from e
        return records

    def read(self) -> Dict[str, R]:
        """Return a snapshot of the current records.

        An empty cache is (re)loaded from disk first. A missing or empty
        file reads as an empty mapping.
        """
        with self._lock:
            if not self._cache:
                self._cache = self._load()
                logger.debug("loaded %d records from %s", len(self._cache), self.path)
            return dict(self._cache)

    def write(self, records: Dict[str, R]) -> None:
        """Replace the file and the cache with exactly `records`."""
        with self._lock:
            try:
                payload = json.dumps(
                    {key: self._encode(rec) for key, rec in records.items()},
                    indent=2,
                    ensure_ascii=False,
                )
            except (TypeError, ValueError) as e:
                raise StorageError(f"Error serializing records for '{self.path}': {e}") from e

            tmp_name: Optional[str] = None
            try:
                with tempfile.NamedTemporaryFile(
                    "w",
                    encoding="utf-8",
                    dir=str(self.path.parent),
                    prefix=f".{self.path.name}.",
                    suffix=".tmp",
                    delete=False,
                ) as f:
                    tmp_name = f.name
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
            except OSError as e:
                if tmp_name and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise StorageError(f"Error writing to file '{self.path}': {e}") from e

            self._cache = dict(records)

    def clear_cache(self) -> None:
        """Drop the in-memory copy; the next read reloads from disk."""
        with self._lock:
            self._cache = {}

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, R]]:
        """Hold the store lock for a whole read-modify-write.

        The yielded dict is a private snapshot. It is written back when the
        block exits cleanly and something changed; on exception nothing is
        written.
        """
        with self._lock:
            before = self.read()
            snapshot = dict(before)
            yield snapshot
            if snapshot != before:
                self.write(snapshot)
