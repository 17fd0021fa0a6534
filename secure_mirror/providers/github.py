"""
GitHub Provider — Trust data from the GitHub REST API.

## Configuration

    "github": {
      "access_tokens": {"repo": "ghp_xxx", "org": "ghp_yyy"},
      "trusted_org": "LLNL",
      "signoff_body": "approved for mirroring"
    }

The ``org`` token needs org owner visibility for the 2FA member filter.

## Trust

A member of ``trusted_org`` is trusted unless GitHub lists them under
``filter=2fa_disabled``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from ..cache.client import CachingClient
from ..config.models import ProviderSettings
from ..models.hook import HookArgs, branch_name
from ..models.provider import Comment, Commit, OrgMember
from .base import ProviderRepo
from .http import ProviderHTTPClient

logger = logging.getLogger(__name__)

# Commit lookups outlive the provider cache_ttl used for membership data
COMMIT_EXPIRES_SECONDS = 24 * 60 * 60


def _commit_from_json(data: Dict[str, Any]) -> Commit:
    parents = data.get("parents") or []
    return Commit(
        sha=data["sha"],
        author_date=data["commit"]["author"]["date"],
        parent_sha=parents[0]["sha"] if parents else None,
    )


def _comment_from_json(data: Dict[str, Any]) -> Comment:
    user = data.get("user") or {}
    return Comment(
        commenter=user.get("login", ""),
        body=data.get("body") or "",
        created_at=data["created_at"],
    )


class GitHubAPI(ProviderHTTPClient):
    """Read-only GitHub REST client returning provider models."""

    provider = "github"
    default_api_url = "https://api.github.com"

    def headers(self, purpose: str) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "secure-mirror",
        }
        token = self.settings.token_for(purpose)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def get_commit(self, repo: str, sha: str) -> Optional[Commit]:
        """Fetch a commit, or None if GitHub doesn't know the sha."""
        data = self.get_json(f"/repos/{repo}/commits/{sha}", "repo", absent=(404, 422))
        if data is None:
            return None
        return _commit_from_json(data)

    def list_commit_comments(self, repo: str, sha: str) -> List[Comment]:
        data = self.get_paginated(f"/repos/{repo}/commits/{sha}/comments", "repo")
        return [_comment_from_json(c) for c in data]

    def list_org_members(self, org: str) -> Dict[str, OrgMember]:
        """Members of ``org``; those without 2FA are untrusted."""
        members = self.get_paginated(f"/orgs/{org}/members", "org")
        no_2fa = {
            m["login"]
            for m in self.get_paginated(
                f"/orgs/{org}/members", "org", {"filter": "2fa_disabled"}
            )
        }
        return {
            m["login"]: OrgMember(login=m["login"], trusted=m["login"] not in no_2fa)
            for m in members
        }

    def list_collaborators(self, repo: str) -> List[str]:
        return [c["login"] for c in self.get_paginated(f"/repos/{repo}/collaborators", "repo")]

    def branch_protected(self, repo: str, branch: str) -> bool:
        data = self.get_json(f"/repos/{repo}/branches/{quote(branch, safe='')}", "repo")
        return bool(data and data.get("protected"))


class GitHubRepo(ProviderRepo):
    """
    ProviderRepo backed by GitHub.

    ``api`` is a CachingClient around GitHubAPI; the per-call ``expires``
    arguments below are consumed by it.
    """

    def __init__(self, hook_args: HookArgs, api: CachingClient, settings: ProviderSettings):
        super().__init__(hook_args, settings)
        self.api = api

    def close(self) -> None:
        self.api.client.close()

    def commits(self) -> Dict[str, Commit]:
        sha = self.hook_args.future_sha
        if self.hook_args.is_deletion:
            return {}
        commit = self.api.get_commit(self.name, sha, expires=COMMIT_EXPIRES_SECONDS)
        return {sha: commit} if commit else {}

    def comments(self) -> List[Comment]:
        if self.hook_args.is_deletion:
            return []
        return self.api.list_commit_comments(self.name, self.hook_args.future_sha)

    def org_members(self) -> Dict[str, OrgMember]:
        return self.api.list_org_members(self.settings.trusted_org)

    def protected_branch(self, ref_name: str) -> bool:
        branch = branch_name(ref_name)
        if not branch:
            return False
        return self.api.branch_protected(self.name, branch)

    def collaborators_all_trusted(self) -> bool:
        members = self.org_members()
        collaborators = self.api.list_collaborators(self.name)
        untrusted = [
            login for login in collaborators
            if not (login in members and members[login].trusted)
        ]
        if untrusted:
            logger.debug(f"Untrusted collaborators on {self.name}: {', '.join(untrusted)}")
        return not untrusted


def build_github_repo(hook_args: HookArgs, settings: ProviderSettings, cache_dir: Path) -> GitHubRepo:
    """Wire a GitHubRepo with a cached API client."""
    api = GitHubAPI(settings)
    client = CachingClient(
        api,
        cache_dir=cache_dir,
        namespace=f"github:{api.api_url}",
        default_ttl=settings.cache_ttl,
    )
    return GitHubRepo(hook_args, client, settings)
