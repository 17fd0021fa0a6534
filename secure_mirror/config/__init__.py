"""
Config — JSON configuration for secure-mirror.
"""

from .loader import DEFAULT_CACHE_DIR, load_config, load_json, resolve_cache_dir
from .models import ProviderSettings, SecureMirrorConfig

__all__ = [
    "DEFAULT_CACHE_DIR",
    "ProviderSettings",
    "SecureMirrorConfig",
    "load_config",
    "load_json",
    "resolve_cache_dir",
]
