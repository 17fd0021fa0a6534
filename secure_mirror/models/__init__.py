"""
Models — Provider data and per-invocation values.
"""

from .hook import HookArgs, Outcome, Phase, Verdict, ZERO_SHA
from .provider import Comment, Commit, OrgMember

__all__ = [
    "Comment",
    "Commit",
    "HookArgs",
    "OrgMember",
    "Outcome",
    "Phase",
    "Verdict",
    "ZERO_SHA",
]
