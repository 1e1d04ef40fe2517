"""A small persistent key-value store with expiring entries and gzip values."""

from __future__ import annotations

import gzip
import hashlib
import sqlite3
import threading
import time
from collections.abc import Callable
from os import PathLike

from . import logger

DEFAULT_PATH = "bird.db"
MAX_VALUE_SIZE = 10 * 1024 * 1024


def cache_key(key: str) -> bytes:
    """Hash a key with SHA3-224, returned as hex bytes."""
    return hashlib.sha3_224(key.encode()).hexdigest().encode()


def compress(data: bytes) -> bytes:
    return gzip.compress(data, compresslevel=9, mtime=0)


def decompress(data: bytes) -> bytes:
    return gzip.decompress(data)


class BirdBase:
    """Key-value store backed by SQLite; keys are hashed, values gzip-compressed."""

    def __init__(
        self,
        path: str | PathLike[str] = DEFAULT_PATH,
        *,
        max_value_size: int = MAX_VALUE_SIZE,
        merge_interval: float | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._max_value_size = max_value_size
        self._clock = clock
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = sqlite3.connect(str(path), check_same_thread=False)
        with self._conn:
            self._conn.execute(
                "CREATE TABLE IF NOT EXISTS kv (key BLOB PRIMARY KEY, value BLOB NOT NULL, expires REAL)"
            )
        self._stop = threading.Event()
        self._merger: threading.Thread | None = None
        if merge_interval:
            self._merger = threading.Thread(target=self._merge_loop, args=(merge_interval,), daemon=True)
            self._merger.start()

    def _merge_loop(self, interval: float) -> None:
        while not self._stop.wait(interval):
            self.merge()

    @property
    def _db(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("database is closed")
        return self._conn

    def _put(self, key: str, value: bytes, ttl: float | None) -> None:
        compressed = compress(value)
        if len(compressed) > self._max_value_size:
            raise ValueError(f"value too large: {len(compressed)} > {self._max_value_size} bytes")
        expires = None if ttl is None else self._clock() + ttl
        with self._lock, self._db:
            self._db.execute(
                "INSERT OR REPLACE INTO kv (key, value, expires) VALUES (?, ?, ?)",
                (cache_key(key), compressed, expires),
            )

    def _fetch(self, key: str) -> bytes | None:
        hashed = cache_key(key)
        with self._lock:
            row = self._db.execute("SELECT value, expires FROM kv WHERE key = ?", (hashed,)).fetchone()
            if row is None:
                return None
            value, expires = row
            if expires is not None and self._clock() > expires:
                with self._db:
                    self._db.execute("DELETE FROM kv WHERE key = ?", (hashed,))
                return None
            return value

    def put_string(self, key: str, value: str) -> None:
        self._put(key, value.encode(), None)

    def put_int(self, key: str, value: int) -> None:
        self._put(key, str(value).encode(), None)

    def put_bytes(self, key: str, value: bytes) -> None:
        self._put(key, value, None)

    def put_bytes_expire_hours(self, key: str, value: bytes, hours: int) -> None:
        self._put(key, value, hours * 3600)

    def put_string_expire_seconds(self, key: str, value: str, seconds: int) -> None:
        self._put(key, value.encode(), seconds)

    def get(self, key: str) -> bytes:
        """Return the stored value; raise KeyError if missing or expired."""
        value = self._fetch(key)
        if value is None:
            raise KeyError(key)
        return decompress(value)

    def has(self, key: str) -> bool:
        return self._fetch(key) is not None

    def delete(self, key: str) -> None:
        with self._lock, self._db:
            self._db.execute("DELETE FROM kv WHERE key = ?", (cache_key(key),))

    def merge(self) -> None:
        """Drop expired entries and reclaim space."""
        logger.info("Merging database to reclaim space...")
        try:
            with self._lock:
                with self._db:
                    self._db.execute(
                        "DELETE FROM kv WHERE expires IS NOT NULL AND expires < ?", (self._clock(),)
                    )
                self._db.execute("VACUUM")
        except sqlite3.Error as exc:
            logger.error("Error merging database", error=str(exc))
            raise
        logger.info("Database merge complete.")

    def close(self) -> None:
        self._stop.set()
        if self._merger is not None:
            self._merger.join(timeout=1)
            self._merger = None
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    def __enter__(self) -> "BirdBase":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()