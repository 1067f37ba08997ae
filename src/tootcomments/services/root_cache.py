"""Durable query to root-id cache.

This module keeps the mapping from normalized queries to the ordered list
of root status ids that matched them (RootSet). The mapping lives in memory
behind a reader/writer lock and is mirrored to a single JSON file.

Persistence is fire-and-forget: every put() spawns a background thread
that serializes a full snapshot with orjson, writes it to a sibling
temporary file and atomically renames it over the target. A crash or an
error before the rename leaves the previous file intact. Failed writes are
logged and dropped; the in-memory map is never affected by disk errors.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import orjson

from tootcomments.core.rwlock import ReadWriteLock
from tootcomments.shared.constants import Cache
from tootcomments.shared.errors import (
    ErrorCode,
    ErrorContext,
    LoadError,
    PersistenceError,
)
from tootcomments.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)

RootSet = list[str]


class RootCache:
    """Thread-safe query to RootSet cache with atomic JSON persistence.

    An empty RootSet is a valid entry: it records that a query was searched
    and nothing matched. Entries are never evicted.

    Args:
        path: JSON file backing the cache. None keeps the cache in memory.
        persistence_enabled: Set to False to skip loading and writing the file.
    """

    def __init__(
        self,
        path: Path | str | None,
        *,
        persistence_enabled: bool = True,
    ) -> None:
        self.path = Path(path) if path is not None else None
        self.persistence_enabled = persistence_enabled and self.path is not None

        self._lock = ReadWriteLock()
        self._roots: dict[str, RootSet] = {}
        # Bumped on every put; lets a slow writer see that a newer
        # snapshot already reached the disk.
        self._generation = 0

        self._commit_lock = threading.Lock()
        self._committed_generation = -1

        self._pending_lock = threading.Lock()
        self._pending: set[threading.Thread] = set()

        self._stats_lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._writes = 0
        self._failed_writes = 0

        if self.persistence_enabled:
            self._roots = self._load()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _load(self) -> dict[str, RootSet]:
        """Read the backing file, falling back to an empty mapping."""
        if self.path is None:
            return {}
        context = ErrorContext(operation="load_root_cache", file_path=str(self.path))

        try:
            raw = orjson.loads(self.path.read_bytes())
        except FileNotFoundError:
            logger.info("No root cache at %s, starting empty", self.path)
            return {}
        except (OSError, orjson.JSONDecodeError) as e:
            code = (
                ErrorCode.CACHE_CORRUPTED
                if isinstance(e, orjson.JSONDecodeError)
                else ErrorCode.CACHE_LOAD_FAILED
            )
            error = LoadError(code, f"Could not load root cache: {e}", context, e)
            log_operation_error(logger, error, level=logging.WARNING)
            return {}

        roots = raw.get(Cache.ROOTS_KEY) if isinstance(raw, dict) else None
        if not isinstance(roots, dict):
            error = LoadError(
                ErrorCode.CACHE_CORRUPTED,
                f"Root cache has no '{Cache.ROOTS_KEY}' mapping",
                context,
            )
            log_operation_error(logger, error, level=logging.WARNING)
            return {}

        loaded: dict[str, RootSet] = {}
        for query, ids in roots.items():
            if isinstance(ids, list) and all(isinstance(i, str) for i in ids):
                loaded[query] = list(ids)
            else:
                logger.warning("Dropping malformed root cache entry for %r", query)

        logger.info("Loaded %d root cache entries from %s", len(loaded), self.path)
        return loaded

    # ------------------------------------------------------------------
    # Lookup and mutation
    # ------------------------------------------------------------------

    def get(self, query: str) -> tuple[RootSet, bool]:
        """Look up a query without any I/O.

        Returns:
            (roots, found). roots is a copy; found distinguishes a cached
            empty RootSet from a miss.
        """
        with self._lock.read_locked():
            roots = self._roots.get(query)
            found = roots is not None
            result = list(roots) if found else []

        with self._stats_lock:
            if found:
                self._hits += 1
            else:
                self._misses += 1

        return result, found

    def put(self, query: str, roots: Iterable[str]) -> None:
        """Store the RootSet for a query and schedule a background write.

        Returns without waiting for the write.
        """
        with self._lock.write_locked():
            self._roots[query] = list(roots)
            self._generation += 1

        if self.persistence_enabled:
            self._schedule_persist()

    def __contains__(self, query: object) -> bool:
        with self._lock.read_locked():
            return query in self._roots

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._roots)

    def snapshot(self) -> dict[str, RootSet]:
        """Return a deep copy of the current mapping."""
        with self._lock.read_locked():
            return {query: list(ids) for query, ids in self._roots.items()}

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _schedule_persist(self) -> None:
        thread = threading.Thread(
            target=self._persist_in_background,
            name="RootCachePersist",
            daemon=True,
        )
        with self._pending_lock:
            self._pending.add(thread)
        thread.start()

    def _persist_in_background(self) -> None:
        try:
            self.persist()
        except PersistenceError as e:
            log_operation_error(logger, e)
        finally:
            with self._pending_lock:
                self._pending.discard(threading.current_thread())

    def persist(self) -> bool:
        """Write the current mapping to disk atomically.

        Returns:
            True if the file was replaced, False if a newer snapshot was
            already committed by a concurrent write.

        Raises:
            PersistenceError: If encoding, writing or renaming fails. The
                previous file is left untouched.
        """
        if self.path is None:
            return False

        start = time.perf_counter()
        context = ErrorContext(operation="persist_root_cache", file_path=str(self.path))

        with self._lock.read_locked():
            generation = self._generation
            try:
                payload = orjson.dumps({Cache.ROOTS_KEY: self._roots})
            except orjson.JSONEncodeError as e:
                self._record_write(success=False)
                raise PersistenceError(
                    ErrorCode.CACHE_SERIALIZATION_ERROR,
                    f"Could not encode root cache: {e}",
                    context,
                    e,
                ) from e

        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f"{Cache.TMP_PREFIX}{self.path.name}.",
                suffix=Cache.TMP_SUFFIX,
                dir=self.path.parent,
            )
            tmp_path = Path(tmp_name)
            with open(fd, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())

            with self._commit_lock:
                if generation < self._committed_generation:
                    logger.debug(
                        "Skipping stale root cache snapshot (generation %d < %d)",
                        generation,
                        self._committed_generation,
                    )
                    return False
                os.replace(tmp_path, self.path)
                tmp_path = None
                self._committed_generation = generation
        except OSError as e:
            self._record_write(success=False)
            raise PersistenceError(
                ErrorCode.CACHE_WRITE_FAILED,
                f"Could not write root cache: {e}",
                context,
                e,
            ) from e
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

        self._record_write(success=True)
        log_operation_success(
            logger,
            operation="persist_root_cache",
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
            result_info={"generation": generation, "bytes": len(payload)},
            context=context,
        )
        return True

    def _record_write(self, *, success: bool) -> None:
        with self._stats_lock:
            if success:
                self._writes += 1
            else:
                self._failed_writes += 1

    def flush(self, timeout: float | None = Cache.FLUSH_TIMEOUT) -> bool:
        """Wait for outstanding background writes.

        Returns:
            True if every pending write finished within the timeout.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            with self._pending_lock:
                pending = list(self._pending)
            if not pending:
                return True
            for thread in pending:
                remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
                thread.join(remaining)
            if deadline is not None and time.monotonic() >= deadline:
                with self._pending_lock:
                    return not self._pending

    def close(self) -> None:
        """Drain background writes and persist the final state, best effort."""
        if not self.persistence_enabled:
            return
        if not self.flush():
            logger.warning("Root cache writes still pending at close")
        try:
            self.persist()
        except PersistenceError as e:
            log_operation_error(logger, e)

    def stats(self) -> dict[str, Any]:
        """Return counters describing cache usage."""
        with self._stats_lock:
            counters = {
                "hits": self._hits,
                "misses": self._misses,
                "writes": self._writes,
                "failed_writes": self._failed_writes,
            }
        return {
            "entries": len(self),
            "path": str(self.path) if self.path else None,
            "persistence_enabled": self.persistence_enabled,
            **counters,
        }


__all__ = ["RootCache", "RootSet"]
