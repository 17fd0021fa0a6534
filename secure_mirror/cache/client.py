"""
Caching Client — Serve repeated provider calls from a disk cache.

One push runs the hook up to three times (update, pre-receive,
post-receive), each as a separate process. The provider APIs are rate
limited, so results are written to ``cache_dir`` and reused by the next
phase until they expire.

## Usage

    from secure_mirror.cache import CachingClient

    api = CachingClient(GitHubAPI(settings), cache_dir=Path("/tmp/sm"),
                        namespace="github:https://api.github.com")
    api.get_commit("LLNL/Umpire", sha, expires=3600)

Any method of the wrapped object can be called through the caching client.
A trailing ``expires`` keyword (seconds, or an aware datetime) sets the
entry's lifetime and is never passed on to the wrapped method.
"""

from __future__ import annotations

import functools
import hashlib
import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel

from ..errors import CacheError, CacheRestorationError
from .serialization import TypeRegistry, default_registry, dump_payload, restore_objects

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300

_SCALARS = (str, int, float, bool, type(None))


def _canonical(value: Any) -> Any:
    """
    JSON-ready form of a cache key argument that is stable across processes.

    Mappings become ``{"map": [[key, value], ...]}`` sorted by key type name
    and repr, so mixed key types are allowed and key order does not matter.

    Raises:
        CacheError: For values without a stable representation
    """
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    if isinstance(value, dict):
        items = sorted(value.items(), key=lambda kv: (type(kv[0]).__name__, repr(kv[0])))
        return {"map": [[_canonical(k), _canonical(v)] for k, v in items]}
    if isinstance(value, datetime):
        return {"datetime": value.isoformat()}
    if isinstance(value, BaseModel):
        return {"model": type(value).__name__, "data": value.model_dump(mode="json")}
    raise CacheError(f"Cannot build a cache key from {type(value).__name__} argument")


@dataclass(frozen=True)
class CacheEntry:
    """A cached payload and when it stops being valid."""

    key: str
    payload: Any
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) >= self.expires_at


class CachingClient:
    """
    Wraps any client so its method results are cached in memory and on disk.

    Keys are derived only from the method name and arguments, qualified by
    ``namespace``. Callers must therefore pass enough context (repository,
    organization) in the arguments to keep keys distinct.
    """

    def __init__(
        self,
        client: Any,
        cache_dir: Path,
        namespace: str = "",
        registry: Optional[TypeRegistry] = None,
        default_ttl: int = DEFAULT_TTL_SECONDS,
    ):
        self.client = client
        self.cache_dir = Path(cache_dir)
        self.namespace = namespace
        self.registry = registry or default_registry()
        self.default_ttl = default_ttl
        self.cache: Dict[str, CacheEntry] = {}

    # --- Keys and arguments ---

    def cache_key(self, method_name: str, args: List[Any]) -> str:
        """Deterministic key for a method name and argument list."""
        canonical = json.dumps(
            [method_name, _canonical(list(args))],
            separators=(",", ":"),
        )
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def strip_expires(self, args: List[Any]) -> Tuple[List[Any], datetime]:
        """
        Pull ``expires`` out of a trailing options mapping.

        Returns the remaining arguments (the caller's list and mapping are
        left untouched) and the absolute expiration time.
        """
        now = datetime.now(timezone.utc)
        remaining = list(args)
        if not remaining or not isinstance(remaining[-1], dict) or "expires" not in remaining[-1]:
            return remaining, now + timedelta(seconds=self.default_ttl)

        options = dict(remaining[-1])
        expires = options.pop("expires")
        remaining[-1] = options
        return remaining, self._resolve_expires(expires, now)

    def _resolve_expires(self, expires: Any, now: datetime) -> datetime:
        if isinstance(expires, datetime):
            if expires.tzinfo is None:
                raise ValueError("expires datetime must be timezone-aware")
            return expires
        if expires is None:
            return now + timedelta(seconds=self.default_ttl)
        return now + timedelta(seconds=float(expires))

    # --- Storage ---

    def cache_file(self, key: str) -> Path:
        return self.cache_dir / f"{key}.json"

    def read_cache(self, key: str) -> Any:
        """
        Return the cached payload for ``key``, or None on a miss.

        Expired entries are misses. A persisted entry that cannot be
        restored raises CacheRestorationError.
        """
        entry = self.cache.get(key)
        if entry is not None:
            if not entry.is_expired():
                return entry.payload
            del self.cache[key]

        path = self.cache_file(key)
        if not path.is_file():
            return None

        entry = self._load_entry(key, path)
        if entry.is_expired():
            logger.debug(f"Cache entry expired: {key[:12]}")
            path.unlink(missing_ok=True)
            return None

        self.cache[key] = entry
        return entry.payload

    def _load_entry(self, key: str, path: Path) -> CacheEntry:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            expires_at = datetime.fromisoformat(data["expires_at"])
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise CacheRestorationError(f"Corrupt cache file {path}: {e}") from e

        payload = self.restore_objects(data.get("payload"))
        return CacheEntry(key=key, payload=payload, expires_at=expires_at)

    def write_cache(self, key: str, payload: Any, expires_at: Optional[datetime] = None) -> None:
        """Store a payload in memory and persist it to disk."""
        if expires_at is None:
            expires_at = datetime.now(timezone.utc) + timedelta(seconds=self.default_ttl)

        serialized = dump_payload(payload, self.registry)
        self.cache[key] = CacheEntry(key=key, payload=payload, expires_at=expires_at)

        path = self.cache_file(key)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Concurrent pushes may write the same key; rename keeps it whole
        temp_path = path.with_suffix(f".{os.getpid()}.tmp")
        with temp_path.open("w", encoding="utf-8") as f:
            json.dump(
                {
                    "key": key,
                    "expires_at": expires_at.isoformat(),
                    "payload": serialized,
                },
                f,
            )
        os.replace(temp_path, path)
        logger.debug(f"Cached {key[:12]} until {expires_at.isoformat()}")

    def restore_objects(self, serialized: Any) -> Any:
        return restore_objects(serialized, self.registry)

    # --- Call wrapping ---

    def call(self, method_name: str, *args: Any, **kwargs: Any) -> Any:
        """Call ``method_name`` on the wrapped client, cache permitting."""
        arg_list: List[Any] = list(args)
        if kwargs:
            arg_list.append(dict(kwargs))

        key = self.cache_key(self._qualified(method_name), arg_list)
        remaining, expires_at = self.strip_expires(arg_list)

        cached = self.read_cache(key)
        if cached is not None:
            logger.debug(f"Cache hit: {method_name} {key[:12]}")
            return cached

        if kwargs:
            call_args, call_kwargs = remaining[:-1], remaining[-1]
        else:
            call_args, call_kwargs = remaining, {}

        logger.debug(f"Cache miss: {method_name} {key[:12]}")
        result = getattr(self.client, method_name)(*call_args, **call_kwargs)
        if result is not None:
            self.write_cache(key, result, expires_at)
        return result

    def _qualified(self, method_name: str) -> str:
        if self.namespace:
            return f"{self.namespace}.{method_name}"
        return method_name

    def __getattr__(self, name: str) -> Any:
        client = self.__dict__.get("client")
        if name.startswith("_") or client is None:
            raise AttributeError(name)
        attr = getattr(client, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def cached_call(*args: Any, **kwargs: Any) -> Any:
            return self.call(name, *args, **kwargs)

        return cached_call
