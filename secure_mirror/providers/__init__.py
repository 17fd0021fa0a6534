"""
Providers — Upstream hosting providers the trust data comes from.
"""

from .base import ProviderRepo
from .github import GitHubAPI, GitHubRepo, build_github_repo
from .gitlab import GitLabAPI, GitLabRepo, build_gitlab_repo
from .registry import ProviderKind, ProviderRegistry, default_providers

__all__ = [
    "GitHubAPI",
    "GitHubRepo",
    "GitLabAPI",
    "GitLabRepo",
    "ProviderKind",
    "ProviderRegistry",
    "ProviderRepo",
    "build_github_repo",
    "build_gitlab_repo",
    "default_providers",
]
