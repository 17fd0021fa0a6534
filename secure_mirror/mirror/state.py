"""
Mirror Status — Remember across hook phases that a push targets a mirror.

update and pre-receive record the status once the repository is known to
be a mirror; post-receive clears it when the push is done. The file lives
in the git directory so it is scoped to one repository.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

STATUS_FILENAME = "secure_mirror_status.json"


def mirrored_status_file(git_dir: Path) -> Path:
    """Path of the status file for a git directory."""
    return Path(git_dir) / STATUS_FILENAME


def cache_mirrored_status(
    mirrored: bool,
    git_dir: Path,
    repo_name: Optional[str] = None,
) -> bool:
    """
    Record mirror status. Only a positive status is written.

    Returns the status that was passed in.
    """
    if not mirrored:
        return False

    path = mirrored_status_file(git_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "mirror": True,
        "repo": repo_name,
        "recorded_at_iso": datetime.now(timezone.utc).isoformat(),
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=4)
    logger.debug(f"Mirror status recorded → {path}")
    return True


def read_mirrored_status(git_dir: Path) -> Optional[Dict[str, Any]]:
    """Recorded status, or None when no push to a mirror is in flight."""
    path = mirrored_status_file(git_dir)
    if not path.is_file():
        return None
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Unreadable mirror status {path}: {e}")
        return None
    return data if isinstance(data, dict) else None


def remove_mirrored_status(git_dir: Path) -> bool:
    """Remove the status file. Returns True if one was removed."""
    path = mirrored_status_file(git_dir)
    if not path.exists():
        return False
    path.unlink()
    logger.debug(f"Mirror status cleared: {path}")
    return True
