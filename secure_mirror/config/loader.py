"""
Config Loader — Read and validate config.json.

## Usage

    from secure_mirror.config import load_config

    config = load_config(Path("config.json"))
    github = config.provider("github")

Any problem reading or validating the file raises ConfigError, which the
hook turns into a rejection.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..errors import ConfigError
from .models import SecureMirrorConfig

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DIR = Path(tempfile.gettempdir()) / "secure-mirror-cache"


def load_json(path: Path) -> Dict[str, Any]:
    """Load a JSON object from a file."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError.unreadable(path, e) from e
    except json.JSONDecodeError as e:
        raise ConfigError.invalid(path, e) from e

    if not isinstance(data, dict):
        raise ConfigError.invalid(path, "top level must be a JSON object")
    return data


def load_config(path: Union[str, Path]) -> SecureMirrorConfig:
    """
    Load and validate the secure-mirror config file.

    Args:
        path: Path to config.json

    Returns:
        Validated SecureMirrorConfig

    Raises:
        ConfigError: If the file is missing, not JSON, or fails validation
    """
    config_path = Path(path)
    logger.debug(f"Loading config from {config_path}")
    data = load_json(config_path)
    try:
        config = SecureMirrorConfig(**data)
    except ValidationError as e:
        raise ConfigError.invalid(config_path, e) from e

    logger.debug(f"Config loaded: providers={sorted(config.repo_types)}")
    return config


def resolve_cache_dir(
    config: SecureMirrorConfig,
    override: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Pick the response cache directory.

    Order: explicit override, SM_CACHE_DIR, config ``cache_dir``, then a
    directory under the system temp dir.
    """
    for candidate in (override, os.environ.get("SM_CACHE_DIR"), config.cache_dir):
        if candidate:
            return Path(candidate)
    return DEFAULT_CACHE_DIR
