"""
Mirror Configuration — Read mirror remotes from the repository's git config.

A bare repository set up for mirroring carries a remote like:

    [remote "github"]
        url = git@github.com:LLNL/Umpire.git
        mirror = true
        fetch = +refs/*:refs/*

Exactly one remote may be tagged ``mirror``. A remote whose name mentions
"upstream" is never a mirror target, even when tagged.
"""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..errors import ConfigError, MisconfiguredMirror

logger = logging.getLogger(__name__)


def repo_name_from_url(url: str) -> str:
    """
    Derive ``owner/repo`` from a git remote URL.

    urllib won't parse scp-style ssh URLs, so this works on the raw string:

        git@github.com:LLNL/SSHSpawner.git       -> LLNL/SSHSpawner
        https://github.com/tgmachina/mirror.git  -> tgmachina/mirror
    """
    path = url.split(":")[-1]
    if path.endswith(".git"):
        path = path[: -len(".git")]
    segments = path.split("/")[-2:]
    return "/".join(segments)


@dataclass
class MirrorConfig:
    """One remote section from the git config."""

    remote_name: str  # e.g. 'remote "github"'
    url: str = ""
    is_mirror: bool = False

    @property
    def is_remote(self) -> bool:
        return "remote" in self.remote_name

    @property
    def is_upstream(self) -> bool:
        return "upstream" in self.remote_name

    @property
    def is_candidate(self) -> bool:
        """Tagged mirror, a remote, and not the upstream."""
        return self.is_remote and self.is_mirror and not self.is_upstream

    @property
    def repo_name(self) -> str:
        return repo_name_from_url(self.url)


@dataclass
class MirrorRemotes:
    """
    All remotes of a repository plus the mirror decision derived from them.

    ``remotes`` is None when the git config could not be found, which is
    the case for a repository that is still being created.
    """

    remotes: Optional[List[MirrorConfig]] = None
    candidates: List[MirrorConfig] = field(default_factory=list)

    @classmethod
    def from_sections(cls, sections: Dict[str, Dict[str, str]]) -> "MirrorRemotes":
        """Build from already-parsed ``{section: {key: value}}`` data."""
        remotes = [
            MirrorConfig(
                remote_name=name,
                url=values.get("url", ""),
                is_mirror="mirror" in values,
            )
            for name, values in sections.items()
        ]
        candidates = [r for r in remotes if r.is_candidate]
        return cls(remotes=remotes, candidates=candidates)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "MirrorRemotes":
        """
        Parse a git config file.

        Returns an empty (new repo) instance when the file does not exist.

        Raises:
            ConfigError: If the file exists but cannot be parsed
        """
        config_path = Path(path)
        if not config_path.is_file():
            logger.debug(f"No git config at {config_path}")
            return cls()

        # git allows repeated keys (several fetch lines) and literal '%'
        parser = configparser.ConfigParser(strict=False, interpolation=None)
        try:
            with config_path.open("r", encoding="utf-8") as f:
                parser.read_file(f)
        except (OSError, configparser.Error) as e:
            raise ConfigError.invalid(config_path, e) from e

        sections = {name: dict(parser.items(name)) for name in parser.sections()}
        remotes = cls.from_sections(sections)
        logger.debug(
            f"Git config {config_path}: {len(sections)} sections, "
            f"{len(remotes.candidates)} mirror candidate(s)"
        )
        return remotes

    @property
    def is_new_repo(self) -> bool:
        return self.remotes is None

    @property
    def is_mirror(self) -> bool:
        return bool(self.candidates)

    @property
    def is_misconfigured(self) -> bool:
        return len(self.candidates) > 1

    @property
    def mirror(self) -> Optional[MirrorConfig]:
        """
        The mirror remote, or None when this is not a mirror.

        Raises:
            MisconfiguredMirror: If more than one remote qualifies
        """
        if self.is_misconfigured:
            raise MisconfiguredMirror([c.remote_name for c in self.candidates])
        if not self.candidates:
            return None
        return self.candidates[0]

    @property
    def mirror_name(self) -> str:
        mirror = self.mirror
        return mirror.remote_name if mirror else ""

    @property
    def url(self) -> str:
        mirror = self.mirror
        return mirror.url if mirror else ""

    @property
    def name(self) -> str:
        """``owner/repo`` identity of the mirror, empty when not a mirror."""
        mirror = self.mirror
        return mirror.repo_name if mirror else ""
