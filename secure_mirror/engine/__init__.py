"""
Engine — Trust decision and per-invocation orchestration.
"""

from .hook import Codes, evaluate_changes, read_ref_updates
from .trust import TrustEvaluator

__all__ = ["Codes", "TrustEvaluator", "evaluate_changes", "read_ref_updates"]
