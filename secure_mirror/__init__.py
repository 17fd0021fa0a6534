"""
Secure Mirror — Trust gate for imports into mirrored git repositories.

Runs from the git server's hooks and decides whether a ref update coming
from an upstream provider (GitHub, GitLab) may be accepted.
"""

__version__ = "0.1.0"
