"""
Shared fixtures for secure-mirror tests.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict

import pytest

from secure_mirror.models.hook import HookArgs
from secure_mirror.models.provider import Commit, OrgMember
from tests.helpers import CURRENT_SHA, FUTURE_SHA, SIGNOFF, T0, make_hook_args


@pytest.fixture
def hook_args() -> HookArgs:
    return make_hook_args()


@pytest.fixture
def commit() -> Commit:
    return Commit(sha=FUTURE_SHA, author_date=T0, parent_sha=CURRENT_SHA)


@pytest.fixture
def members() -> Dict[str, OrgMember]:
    return {
        "orange": OrgMember(login="orange", trusted=True),
        "apple": OrgMember(login="apple", trusted=False),
    }


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """config.json with a GitHub section."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "cache_dir": str(tmp_path / "cache"),
        "repo_types": {
            "github": {
                "access_tokens": {"repo": "repo-token", "org": "org-token"},
                "trusted_org": "Foo",
                "signoff_body": SIGNOFF,
            }
        },
    }))
    return path


@pytest.fixture
def git_dir(tmp_path: Path) -> Path:
    """An empty bare-repository directory."""
    path = tmp_path / "repo.git"
    path.mkdir()
    return path


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"
