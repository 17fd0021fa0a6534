"""
Hook Models — Values owned by a single hook invocation.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

ZERO_SHA = "0" * 40


def branch_name(ref_name: str) -> str:
    """Branch name for ``refs/heads/*`` refs, empty for anything else."""
    prefix = "refs/heads/"
    if ref_name.startswith(prefix):
        return ref_name[len(prefix):]
    return ""


class Phase(str, Enum):
    """Git server hook phases a push goes through, in order."""

    UPDATE = "update"
    PRE_RECEIVE = "pre-receive"
    POST_RECEIVE = "post-receive"


class Verdict(str, Enum):
    """Decision for a proposed change."""

    TRUSTED = "trusted"
    UNTRUSTED = "untrusted"
    MISCONFIGURED = "misconfigured"
    NOT_APPLICABLE = "not_applicable"


@dataclass(frozen=True)
class HookArgs:
    """One proposed ref update within a push."""

    ref_name: str
    current_sha: str
    future_sha: str
    repo_name: str = ""

    @property
    def is_deletion(self) -> bool:
        return self.future_sha == ZERO_SHA


@dataclass(frozen=True)
class Outcome:
    """A verdict plus the reason logged for it."""

    verdict: Verdict
    reason: str = ""

    @property
    def allowed(self) -> bool:
        return self.verdict in (Verdict.TRUSTED, Verdict.NOT_APPLICABLE)

    @property
    def exit_code(self) -> int:
        return 0 if self.allowed else 1

    @classmethod
    def trusted(cls, reason: str) -> "Outcome":
        return cls(Verdict.TRUSTED, reason)

    @classmethod
    def untrusted(cls, reason: str) -> "Outcome":
        return cls(Verdict.UNTRUSTED, reason)

    @classmethod
    def not_applicable(cls, reason: str) -> "Outcome":
        return cls(Verdict.NOT_APPLICABLE, reason)

    @classmethod
    def misconfigured(cls, reason: str) -> "Outcome":
        return cls(Verdict.MISCONFIGURED, reason)
