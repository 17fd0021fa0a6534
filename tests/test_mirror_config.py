"""
Tests for mirror remote resolution.

These tests verify:
- owner/repo parsing for ssh and https URLs
- Mirror candidate selection (upstream excluded)
- New repo, not-a-mirror and misconfigured states
"""

from pathlib import Path

import pytest

from secure_mirror.errors import ConfigError, MisconfiguredMirror
from secure_mirror.mirror.config import MirrorConfig, MirrorRemotes, repo_name_from_url
from tests.helpers import (
    GITHUB_GIT_CONFIG,
    MISCONFIGURED_GIT_CONFIG,
    PLAIN_GIT_CONFIG,
    write_git_config,
)


class TestRepoNameFromUrl:
    """Tests for repo_name_from_url."""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("git@github.com:LLNL/SSHSpawner.git", "LLNL/SSHSpawner"),
            ("https://github.com/tgmachina/test-mirror.git", "tgmachina/test-mirror"),
            ("https://github.com/tgmachina/test-mirror", "tgmachina/test-mirror"),
            ("ssh://git@gitlab.example.com:2222/group/project.git", "group/project"),
        ],
    )
    def test_parses_common_url_forms(self, url, expected):
        assert repo_name_from_url(url) == expected

    def test_only_trailing_git_suffix_is_stripped(self):
        """A '.git' inside the name survives."""
        assert repo_name_from_url("git@github.com:org/my.github.io.git") == "org/my.github.io"


class TestMirrorConfig:
    """Tests for a single remote entry."""

    def test_tagged_remote_is_candidate(self):
        remote = MirrorConfig('remote "github"', "git@github.com:a/b.git", is_mirror=True)
        assert remote.is_candidate is True
        assert remote.repo_name == "a/b"

    def test_upstream_is_never_candidate(self):
        remote = MirrorConfig('remote "upstream"', "git@github.com:a/b.git", is_mirror=True)
        assert remote.is_candidate is False

    def test_non_remote_section_is_never_candidate(self):
        section = MirrorConfig("core", "", is_mirror=True)
        assert section.is_candidate is False

    def test_untagged_remote_is_not_candidate(self):
        remote = MirrorConfig('remote "origin"', "git@github.com:a/b.git")
        assert remote.is_candidate is False


class TestMirrorRemotes:
    """Tests for MirrorRemotes.load and its derived state."""

    def test_missing_config_is_new_repo(self, git_dir: Path):
        remotes = MirrorRemotes.load(git_dir / "config")

        assert remotes.is_new_repo is True
        assert remotes.is_mirror is False
        assert remotes.name == ""

    def test_single_mirror_remote(self, git_dir: Path):
        remotes = MirrorRemotes.load(write_git_config(git_dir, GITHUB_GIT_CONFIG))

        assert remotes.is_new_repo is False
        assert remotes.is_mirror is True
        assert remotes.is_misconfigured is False
        assert remotes.mirror_name == 'remote "github"'
        assert remotes.url == "git@github.com:LLNL/Umpire.git"
        assert remotes.name == "LLNL/Umpire"

    def test_untagged_remote_is_not_mirror(self, git_dir: Path):
        remotes = MirrorRemotes.load(write_git_config(git_dir, PLAIN_GIT_CONFIG))

        assert remotes.is_new_repo is False
        assert remotes.is_mirror is False
        assert remotes.mirror is None
        assert remotes.url == ""

    def test_two_mirror_remotes_are_misconfigured(self, git_dir: Path):
        remotes = MirrorRemotes.load(write_git_config(git_dir, MISCONFIGURED_GIT_CONFIG))

        assert remotes.is_mirror is True
        assert remotes.is_misconfigured is True
        with pytest.raises(MisconfiguredMirror) as exc:
            remotes.mirror
        assert len(exc.value.remotes) == 2

    def test_tagged_upstream_does_not_count(self, git_dir: Path):
        content = GITHUB_GIT_CONFIG + (
            '[remote "upstream"]\n'
            "\turl = https://github.com/other/Umpire.git\n"
            "\tmirror = true\n"
        )
        remotes = MirrorRemotes.load(write_git_config(git_dir, content))

        assert remotes.is_misconfigured is False
        assert remotes.name == "LLNL/Umpire"

    def test_unparseable_config_raises(self, git_dir: Path):
        path = write_git_config(git_dir, "this is not [ a git config\n")

        with pytest.raises(ConfigError):
            MirrorRemotes.load(path)

    def test_from_sections(self):
        remotes = MirrorRemotes.from_sections({
            'remote "a"': {"url": "git@github.com:x/a.git", "mirror": "true"},
            'remote "b"': {"url": "git@github.com:x/b.git"},
        })

        assert [r.remote_name for r in remotes.remotes] == ['remote "a"', 'remote "b"']
        assert remotes.name == "x/a"
