"""
Mirror — Detect whether this repository mirrors an upstream, and which one.
"""

from .config import MirrorConfig, MirrorRemotes, repo_name_from_url
from .state import (
    cache_mirrored_status,
    mirrored_status_file,
    read_mirrored_status,
    remove_mirrored_status,
)

__all__ = [
    "MirrorConfig",
    "MirrorRemotes",
    "cache_mirrored_status",
    "mirrored_status_file",
    "read_mirrored_status",
    "remove_mirrored_status",
    "repo_name_from_url",
]
