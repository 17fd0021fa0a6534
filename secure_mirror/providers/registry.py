"""
Provider Registry — Pick the provider for a mirror URL.

Kinds are matched in registration order against the lowercased URL, so a
GitHub Enterprise host such as ``github.example.com`` resolves to "github".
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from ..config.models import ProviderSettings, SecureMirrorConfig
from ..errors import UnknownProviderKind
from ..models.hook import HookArgs
from .base import ProviderRepo

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[HookArgs, ProviderSettings, Path], ProviderRepo]


@dataclass(frozen=True)
class ProviderKind:
    """A provider name, the URL pattern it serves, and how to build it."""

    name: str
    pattern: str
    factory: ProviderFactory

    def matches(self, url: str) -> bool:
        return re.search(self.pattern, url.lower()) is not None


class ProviderRegistry:
    """Registry for provider lookup by mirror URL."""

    def __init__(self, kinds: Optional[List[ProviderKind]] = None):
        self.kinds: List[ProviderKind] = list(kinds or [])

    def register(self, name: str, pattern: str, factory: ProviderFactory) -> None:
        self.kinds.append(ProviderKind(name, pattern, factory))
        logger.debug(f"Registered provider: {name} ({pattern})")

    def match(self, url: str) -> Optional[ProviderKind]:
        for kind in self.kinds:
            if kind.matches(url):
                return kind
        return None

    def build(
        self,
        url: str,
        hook_args: HookArgs,
        config: SecureMirrorConfig,
        cache_dir: Path,
    ) -> ProviderRepo:
        """
        Construct the ProviderRepo for a mirror URL.

        Raises:
            UnknownProviderKind: If no kind matches the URL, or the matching
                kind has no section under ``repo_types``
        """
        kind = self.match(url)
        if kind is None:
            raise UnknownProviderKind.for_url(url)

        settings = config.provider(kind.name)
        if settings is None:
            raise UnknownProviderKind.unconfigured(kind.name)

        logger.debug(f"Using {kind.name} provider for {hook_args.repo_name}")
        return kind.factory(hook_args, settings, cache_dir)


def default_providers() -> ProviderRegistry:
    """Registry with every built-in provider."""
    from .github import build_github_repo
    from .gitlab import build_gitlab_repo

    registry = ProviderRegistry()
    registry.register("github", r"github", build_github_repo)
    registry.register("gitlab", r"gitlab", build_gitlab_repo)
    return registry
