"""
Test helpers — sample data and an in-memory ProviderRepo.

Lets the trust logic and hook orchestration run without a network.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Dict, List, Optional

from secure_mirror.config.models import ProviderSettings
from secure_mirror.models.hook import HookArgs
from secure_mirror.models.provider import Comment, Commit, OrgMember
from secure_mirror.providers.base import ProviderRepo

FUTURE_SHA = "f" * 40
CURRENT_SHA = "c" * 40
SIGNOFF = "approved for mirroring"
T0 = datetime(2026, 2, 4, 12, 0, tzinfo=timezone.utc)

GITHUB_GIT_CONFIG = """\
[core]
\trepositoryformatversion = 0
\tbare = true
[remote "github"]
\turl = git@github.com:LLNL/Umpire.git
\tmirror = true
\tfetch = +refs/heads/*:refs/heads/*
\tfetch = +refs/tags/*:refs/tags/*
"""

PLAIN_GIT_CONFIG = """\
[core]
\tbare = true
[remote "origin"]
\turl = https://github.com/LLNL/Umpire.git
"""

MISCONFIGURED_GIT_CONFIG = """\
[remote "github"]
\turl = git@github.com:LLNL/Umpire.git
\tmirror = true
[remote "backup"]
\turl = https://github.com/LLNL/Umpire-backup.git
\tmirror = true
"""


class StaticRepo(ProviderRepo):
    """ProviderRepo serving fixed data and counting calls."""

    def __init__(
        self,
        hook_args: HookArgs,
        settings: Optional[ProviderSettings] = None,
        commits: Optional[Dict[str, Commit]] = None,
        comments: Optional[List[Comment]] = None,
        members: Optional[Dict[str, OrgMember]] = None,
        protected: bool = False,
        collaborators_trusted: bool = False,
    ):
        super().__init__(hook_args, settings or make_settings())
        self._commits = commits or {}
        self._comments = comments or []
        self._members = members or {}
        self._protected = protected
        self._collaborators_trusted = collaborators_trusted
        self.calls: List[str] = []

    def commits(self) -> Dict[str, Commit]:
        self.calls.append("commits")
        return self._commits

    def comments(self) -> List[Comment]:
        self.calls.append("comments")
        return self._comments

    def org_members(self) -> Dict[str, OrgMember]:
        self.calls.append("org_members")
        return self._members

    def protected_branch(self, ref_name: str) -> bool:
        self.calls.append("protected_branch")
        return self._protected

    def collaborators_all_trusted(self) -> bool:
        self.calls.append("collaborators_all_trusted")
        return self._collaborators_trusted

    def close(self) -> None:
        self.calls.append("close")


def make_settings(**overrides) -> ProviderSettings:
    data = {
        "access_tokens": {"repo": "repo-token", "org": "org-token"},
        "trusted_org": "Foo",
        "signoff_body": SIGNOFF,
    }
    data.update(overrides)
    return ProviderSettings(**data)


def make_comment(commenter: str, body: str = SIGNOFF, delta_minutes: int = 5) -> Comment:
    return Comment(
        commenter=commenter,
        body=body,
        created_at=T0 + timedelta(minutes=delta_minutes),
    )


def make_hook_args(ref_name: str = "refs/heads/main", future_sha: str = FUTURE_SHA) -> HookArgs:
    return HookArgs(
        ref_name=ref_name,
        current_sha=CURRENT_SHA,
        future_sha=future_sha,
        repo_name="LLNL/Umpire",
    )


def write_git_config(git_dir: Path, content: str) -> Path:
    path = git_dir / "config"
    path.write_text(content)
    return path
