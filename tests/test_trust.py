"""
Tests for trust evaluation.

These tests verify:
- Sign-off comments: trusted author, exact (case-insensitive) body, posted after the commit
- Protected branch with trusted collaborators needs no sign-off
- Unknown commits are never trusted
"""

import pytest

from secure_mirror.engine.trust import TrustEvaluator
from secure_mirror.models.hook import Verdict
from tests.helpers import FUTURE_SHA, SIGNOFF, StaticRepo, make_comment, make_hook_args


@pytest.fixture
def evaluator():
    return TrustEvaluator(SIGNOFF)


def _repo(hook_args, commit, members, comments, **kwargs):
    return StaticRepo(
        hook_args,
        commits={FUTURE_SHA: commit},
        comments=comments,
        members=members,
        **kwargs,
    )


class TestVettedChange:
    """Tests for the sign-off comment scan."""

    def test_trusted_signoff_after_commit(self, evaluator, hook_args, commit, members):
        repo = _repo(hook_args, commit, members, [make_comment("orange", delta_minutes=5)])

        outcome = evaluator.vetted_change(FUTURE_SHA, repo)

        assert outcome.verdict == Verdict.TRUSTED
        assert "orange" in outcome.reason

    def test_signoff_before_commit(self, evaluator, hook_args, commit, members):
        repo = _repo(hook_args, commit, members, [make_comment("orange", delta_minutes=-5)])

        assert evaluator.vetted_change(FUTURE_SHA, repo).verdict == Verdict.UNTRUSTED

    def test_signoff_at_commit_time_is_not_after(self, evaluator, hook_args, commit, members):
        repo = _repo(hook_args, commit, members, [make_comment("orange", delta_minutes=0)])

        assert evaluator.vetted_change(FUTURE_SHA, repo).verdict == Verdict.UNTRUSTED

    def test_untrusted_member(self, evaluator, hook_args, commit, members):
        repo = _repo(hook_args, commit, members, [make_comment("apple")])

        assert evaluator.vetted_change(FUTURE_SHA, repo).verdict == Verdict.UNTRUSTED

    def test_non_member(self, evaluator, hook_args, commit, members):
        repo = _repo(hook_args, commit, members, [make_comment("mallory")])

        assert evaluator.vetted_change(FUTURE_SHA, repo).verdict == Verdict.UNTRUSTED

    def test_member_lookup_is_case_sensitive(self, evaluator, hook_args, commit, members):
        repo = _repo(hook_args, commit, members, [make_comment("Orange")])

        assert evaluator.vetted_change(FUTURE_SHA, repo).verdict == Verdict.UNTRUSTED

    @pytest.mark.parametrize("body", ["looks good", f"{SIGNOFF}!", f"I think {SIGNOFF}", ""])
    def test_body_must_match_exactly(self, evaluator, hook_args, commit, members, body):
        repo = _repo(hook_args, commit, members, [make_comment("orange", body=body)])

        assert evaluator.vetted_change(FUTURE_SHA, repo).verdict == Verdict.UNTRUSTED

    def test_body_match_ignores_case(self, evaluator, hook_args, commit, members):
        repo = _repo(hook_args, commit, members, [make_comment("orange", body=SIGNOFF.upper())])

        assert evaluator.vetted_change(FUTURE_SHA, repo).verdict == Verdict.TRUSTED

    def test_later_comment_can_qualify(self, evaluator, hook_args, commit, members):
        comments = [
            make_comment("apple"),
            make_comment("orange", body="nope"),
            make_comment("orange", delta_minutes=-1),
            make_comment("orange", delta_minutes=30),
        ]
        repo = _repo(hook_args, commit, members, comments)

        assert evaluator.vetted_change(FUTURE_SHA, repo).verdict == Verdict.TRUSTED

    def test_unknown_commit(self, evaluator, hook_args, members):
        repo = StaticRepo(hook_args, members=members, comments=[make_comment("orange")])

        outcome = evaluator.vetted_change(FUTURE_SHA, repo)

        assert outcome.verdict == Verdict.UNTRUSTED
        assert "comments" not in repo.calls

    def test_no_comments(self, evaluator, hook_args, commit, members):
        repo = _repo(hook_args, commit, members, [])

        assert evaluator.vetted_change(FUTURE_SHA, repo).verdict == Verdict.UNTRUSTED


class TestEvaluate:
    """Tests for the combined decision."""

    def test_protected_branch_with_trusted_collaborators(self, evaluator, hook_args, commit, members):
        repo = _repo(hook_args, commit, members, [], protected=True, collaborators_trusted=True)

        outcome = evaluator.evaluate(hook_args, repo)

        assert outcome.verdict == Verdict.TRUSTED
        assert "comments" not in repo.calls

    def test_protected_branch_with_untrusted_collaborators_needs_signoff(
        self, evaluator, hook_args, commit, members
    ):
        repo = _repo(hook_args, commit, members, [], protected=True, collaborators_trusted=False)

        assert evaluator.evaluate(hook_args, repo).verdict == Verdict.UNTRUSTED

    def test_unprotected_branch_skips_collaborator_check(self, evaluator, hook_args, commit, members):
        repo = _repo(hook_args, commit, members, [make_comment("orange")], collaborators_trusted=True)

        outcome = evaluator.evaluate(hook_args, repo)

        assert outcome.verdict == Verdict.TRUSTED
        assert "collaborators_all_trusted" not in repo.calls

    def test_signoff_on_unprotected_branch(self, evaluator, commit, members):
        hook_args = make_hook_args(ref_name="refs/tags/v1.0")
        repo = _repo(hook_args, commit, members, [make_comment("orange")])

        assert evaluator.evaluate(hook_args, repo).verdict == Verdict.TRUSTED

    def test_nothing_qualifies(self, evaluator, hook_args, commit, members):
        repo = _repo(hook_args, commit, members, [make_comment("apple")])

        outcome = evaluator.evaluate(hook_args, repo)

        assert outcome.verdict == Verdict.UNTRUSTED
        assert outcome.exit_code == 1
