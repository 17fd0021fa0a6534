"""
GitLab Provider — Trust data from the GitLab REST API (v4).

## Configuration

    "gitlab": {
      "access_tokens": {"default": "glpat-xxx"},
      "trusted_org": "my-group",
      "signoff_body": "approved for mirroring",
      "api_url": "https://gitlab.example.com/api/v4",
      "min_access_level": 30
    }

GitLab does not expose members' 2FA state to group owners, so trust is
group membership at ``min_access_level`` or above (30 = developer).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote

from ..cache.client import CachingClient
from ..config.models import ProviderSettings
from ..models.hook import HookArgs, branch_name
from ..models.provider import Comment, Commit, OrgMember
from .base import ProviderRepo
from .github import COMMIT_EXPIRES_SECONDS
from .http import ProviderHTTPClient

logger = logging.getLogger(__name__)


def _project_id(repo: str) -> str:
    return quote(repo, safe="")


class GitLabAPI(ProviderHTTPClient):
    """Read-only GitLab REST client returning provider models."""

    provider = "gitlab"
    default_api_url = "https://gitlab.com/api/v4"

    def headers(self, purpose: str) -> Dict[str, str]:
        headers = {"Accept": "application/json", "User-Agent": "secure-mirror"}
        token = self.settings.token_for(purpose)
        if token:
            headers["PRIVATE-TOKEN"] = token
        return headers

    def get_commit(self, repo: str, sha: str) -> Optional[Commit]:
        data = self.get_json(f"/projects/{_project_id(repo)}/repository/commits/{sha}", "repo")
        if data is None:
            return None
        parents = data.get("parent_ids") or []
        return Commit(
            sha=data["id"],
            author_date=data["authored_date"],
            parent_sha=parents[0] if parents else None,
        )

    def list_commit_comments(self, repo: str, sha: str) -> List[Comment]:
        data = self.get_paginated(
            f"/projects/{_project_id(repo)}/repository/commits/{sha}/comments", "repo"
        )
        return [
            Comment(
                commenter=(c.get("author") or {}).get("username", ""),
                body=c.get("note") or "",
                created_at=c["created_at"],
            )
            for c in data
        ]

    def list_group_members(self, group: str) -> Dict[str, OrgMember]:
        """Direct members of ``group``, trusted at the configured access level."""
        data = self.get_paginated(f"/groups/{quote(group, safe='')}/members", "org")
        return {
            m["username"]: OrgMember(
                login=m["username"],
                trusted=int(m.get("access_level", 0)) >= self.settings.min_access_level,
            )
            for m in data
        }

    def list_project_members(self, repo: str) -> List[str]:
        data = self.get_paginated(f"/projects/{_project_id(repo)}/members/all", "repo")
        return [m["username"] for m in data]

    def branch_protected(self, repo: str, branch: str) -> bool:
        data = self.get_json(
            f"/projects/{_project_id(repo)}/protected_branches/{quote(branch, safe='')}",
            "repo",
        )
        return data is not None


class GitLabRepo(ProviderRepo):
    """ProviderRepo backed by GitLab, through a CachingClient."""

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
        return self.api.list_group_members(self.settings.trusted_org)

    def protected_branch(self, ref_name: str) -> bool:
        branch = branch_name(ref_name)
        if not branch:
            return False
        return self.api.branch_protected(self.name, branch)

    def collaborators_all_trusted(self) -> bool:
        members = self.org_members()
        return all(
            login in members and members[login].trusted
            for login in self.api.list_project_members(self.name)
        )


def build_gitlab_repo(hook_args: HookArgs, settings: ProviderSettings, cache_dir: Path) -> GitLabRepo:
    """Wire a GitLabRepo with a cached API client."""
    api = GitLabAPI(settings)
    client = CachingClient(
        api,
        cache_dir=cache_dir,
        namespace=f"gitlab:{api.api_url}",
        default_ttl=settings.cache_ttl,
    )
    return GitLabRepo(hook_args, client, settings)
