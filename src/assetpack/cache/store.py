"""Persistent fingerprint store shared by bundles and stamped assets."""

from __future__ import annotations

import json
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

from assetpack.cache.digest import digest
from assetpack.errors import CacheReadError, CacheWriteError
from assetpack.observability import StructuredLogger


@dataclass(frozen=True, slots=True)
class Fingerprint:
    key: str
    digest: str
    previous: str | None = None

    @property
    def changed(self) -> bool:
        return self.previous != self.digest


class FingerprintCache:
    """Key to digest mapping with a ``load -> mutate -> flush`` lifecycle.

    Keys are either bundle keys (``stylesheets/all``) or root-relative asset
    paths (``images/one.png``). Entries loaded from disk that this run never
    assigns are written back untouched, whatever their value type.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        persisted: dict[str, object] | None = None,
        logger: StructuredLogger | None = None,
    ) -> None:
        self.path = Path(path)
        self.logger = logger
        self._persisted: dict[str, object] = dict(persisted or {})
        self._assigned: dict[str, str] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}

    @classmethod
    def load(cls, path: str | Path, *, logger: StructuredLogger | None = None) -> FingerprintCache:
        cache_path = Path(path)
        try:
            persisted = _read_entries(cache_path)
        except CacheReadError as exc:
            if logger is not None:
                logger.log(
                    operation="cache_load",
                    asset_type=None,
                    bundle=None,
                    message="Ignoring unreadable cache file.",
                    level="warning",
                    extra={"error": exc.to_dict()},
                )
            persisted = {}
        if logger is not None:
            logger.log(
                operation="cache_load",
                asset_type=None,
                bundle=None,
                message="Loaded fingerprint cache.",
                extra={"path": str(cache_path), "entries": len(persisted)},
            )
        return cls(cache_path, persisted=persisted, logger=logger)

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._current(key)

    def lookup_or_assign(self, key: str, data: bytes) -> Fingerprint:
        content_digest = digest(data)
        with self._lock:
            previous = self._current(key)
            self._assigned[key] = content_digest
        return Fingerprint(key=key, digest=content_digest, previous=previous)

    def revert(self, key: str) -> None:
        with self._lock:
            self._assigned.pop(key, None)

    @contextmanager
    def key_lock(self, key: str) -> Iterator[None]:
        with self._lock:
            lock = self._key_locks.setdefault(key, threading.Lock())
        with lock:
            yield

    def assigned_keys(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(sorted(self._assigned))

    def entries(self) -> dict[str, object]:
        with self._lock:
            merged = dict(self._persisted)
            merged.update(self._assigned)
        return merged

    def flush(self) -> Path:
        payload = json.dumps(self.entries(), indent=2, sort_keys=True) + "\n"
        temp_path = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(payload, encoding="utf-8")
            os.replace(temp_path, self.path)
        except OSError as exc:
            if temp_path.exists():
                temp_path.unlink()
            raise CacheWriteError(
                "Could not write fingerprint cache.",
                hint="Check free disk space and permissions for the project root.",
                context={"operation": "cache_flush", "path": str(self.path), "reason": str(exc)},
            ) from exc
        if self.logger is not None:
            self.logger.log(
                operation="cache_flush",
                asset_type=None,
                bundle=None,
                message="Wrote fingerprint cache.",
                extra={"path": str(self.path), "assigned": list(self.assigned_keys())},
            )
        return self.path

    def _current(self, key: str) -> str | None:
        if key in self._assigned:
            return self._assigned[key]
        value = self._persisted.get(key)
        return value if isinstance(value, str) else None


def _read_entries(path: Path) -> dict[str, object]:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError) as exc:
        raise CacheReadError(
            "Cache file could not be read.",
            hint="The cache will be rebuilt from scratch.",
            context={"operation": "cache_load", "path": str(path), "reason": str(exc)},
        ) from exc
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CacheReadError(
            "Cache file is not valid JSON.",
            hint="The cache will be rebuilt from scratch.",
            context={"operation": "cache_load", "path": str(path), "reason": str(exc)},
        ) from exc
    if not isinstance(parsed, dict):
        raise CacheReadError(
            "Cache file has invalid structure.",
            hint="The cache will be rebuilt from scratch.",
            context={"operation": "cache_load", "path": str(path)},
        )
    return parsed
