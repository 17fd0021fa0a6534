"""
Provider Models — Read-only records fetched from the upstream host.

These are what the provider clients return and what the response cache
persists between hook phases, so each one must round-trip through
``model_dump(mode="json")``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class Commit(BaseModel):
    """A commit on the upstream repository, dated by its author."""

    model_config = ConfigDict(frozen=True)

    sha: str
    author_date: datetime
    parent_sha: Optional[str] = None


class Comment(BaseModel):
    """A comment left on a commit."""

    model_config = ConfigDict(frozen=True)

    commenter: str
    body: str
    created_at: datetime


class OrgMember(BaseModel):
    """
    A member of the trusted organization or group.

    ``trusted`` is provider specific: on GitHub it means the member has
    two-factor authentication enabled, on GitLab that the member's access
    level meets the configured minimum.
    """

    model_config = ConfigDict(frozen=True)

    login: str
    trusted: bool = False
