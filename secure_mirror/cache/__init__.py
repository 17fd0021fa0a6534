"""
Cache — Disk-backed response cache shared by the phases of one push.
"""

from .client import DEFAULT_TTL_SECONDS, CacheEntry, CachingClient
from .serialization import TypeRegistry, default_registry, dump_payload, restore_objects

__all__ = [
    "CacheEntry",
    "CachingClient",
    "DEFAULT_TTL_SECONDS",
    "TypeRegistry",
    "default_registry",
    "dump_payload",
    "restore_objects",
]
