"""
Trust Evaluation — Decide whether a mirrored change may be imported.

A change is trusted when either:

1. its branch is protected upstream and every collaborator is a trusted
   member of the organization, or
2. a trusted member signed it off with a comment that exactly matches the
   sign-off phrase (ignoring case) and was posted after the commit.

The evaluator never talks to the network itself; it only reads from the
ProviderRepo it is given.
"""

from __future__ import annotations

import logging

from ..models.hook import HookArgs, Outcome
from ..providers.base import ProviderRepo

logger = logging.getLogger(__name__)


class TrustEvaluator:
    """Provider-agnostic trust rules."""

    def __init__(self, signoff_body: str):
        self.signoff_body = signoff_body

    def _matches_signoff(self, body: str) -> bool:
        return body.casefold() == self.signoff_body.casefold()

    def vetted_change(self, future_sha: str, repo: ProviderRepo) -> Outcome:
        """Look for a sign-off comment that post-dates ``future_sha``."""
        commit = repo.commits().get(future_sha)
        if commit is None:
            return Outcome.untrusted(f"Commit {future_sha} is unknown upstream")

        members = repo.org_members()
        for comment in repo.comments():
            commenter = comment.commenter
            logger.debug(f"Evaluating comment from {commenter}")

            member = members.get(commenter)
            if member is None or not member.trusted:
                continue
            logger.debug("User is trusted")

            if not self._matches_signoff(comment.body):
                continue
            logger.debug("Signoff matches")

            if not comment.created_at > commit.author_date:
                continue

            return Outcome.trusted(f"Changes in commit {future_sha} vetted by {commenter}")

        return Outcome.untrusted(f"No trusted sign-off for commit {future_sha}")

    def evaluate(self, hook_args: HookArgs, repo: ProviderRepo) -> Outcome:
        """Verdict for one proposed ref update."""
        if repo.protected_branch(hook_args.ref_name) and repo.collaborators_all_trusted():
            return Outcome.trusted(
                f"{hook_args.ref_name} is protected and all collaborators are trusted"
            )
        return self.vetted_change(hook_args.future_sha, repo)
