"""
Provider Repo — Interface to an upstream repository's trust data.

Implementations fetch from a hosting provider (GitHub, GitLab). Every
method may go to the network and may raise ProviderAPIError, which must
reach the hook orchestrator.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Dict, List

from ..config.models import ProviderSettings
from ..models.hook import HookArgs
from ..models.provider import Comment, Commit, OrgMember


class ProviderRepo(ABC):
    """Trust data for the upstream of one proposed change."""

    def __init__(self, hook_args: HookArgs, settings: ProviderSettings):
        self.hook_args = hook_args
        self.settings = settings

    @property
    def name(self) -> str:
        """``owner/repo`` identity on the provider."""
        return self.hook_args.repo_name

    def for_update(self, hook_args: HookArgs) -> "ProviderRepo":
        """Same provider connection, pointed at another ref update."""
        repo = copy.copy(self)
        repo.hook_args = hook_args
        return repo

    def close(self) -> None:
        """Release network resources held by the repo."""
        pass

    @abstractmethod
    def commits(self) -> Dict[str, Commit]:
        """Known commits keyed by sha."""
        pass

    @abstractmethod
    def comments(self) -> List[Comment]:
        """Comments on the proposed change, in provider order."""
        pass

    @abstractmethod
    def org_members(self) -> Dict[str, OrgMember]:
        """Members of the trusted organization keyed by login."""
        pass

    @abstractmethod
    def protected_branch(self, ref_name: str) -> bool:
        """Whether the provider enforces protection on this ref."""
        pass

    @abstractmethod
    def collaborators_all_trusted(self) -> bool:
        """Whether every collaborator is a trusted org member."""
        pass
