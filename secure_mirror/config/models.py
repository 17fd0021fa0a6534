"""
Config Models — Pydantic schema for config.json.

Example:

    {
      "cache_dir": "/var/cache/secure-mirror",
      "repo_types": {
        "github": {
          "access_tokens": {"repo": "ghp_xxx", "org": "ghp_yyy"},
          "trusted_org": "LLNL",
          "signoff_body": "approved for mirroring"
        }
      }
    }
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

TOKEN_FALLBACKS = ("default",)


class ProviderSettings(BaseModel):
    """Settings for one upstream provider kind."""

    access_tokens: Dict[str, str] = Field(default_factory=dict)
    trusted_org: str
    signoff_body: str
    api_url: Optional[str] = None
    timeout_s: float = 15.0
    cache_ttl: int = 300
    min_access_level: int = 30  # GitLab "developer"

    @field_validator("signoff_body")
    @classmethod
    def _signoff_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("signoff_body must not be blank")
        return value

    def token_for(self, purpose: str) -> Optional[str]:
        """
        Pick the access token for a kind of request.

        Looks up ``purpose`` ("repo", "org"), then "default", then any
        configured token. Returns None for anonymous access.
        """
        for name in (purpose, *TOKEN_FALLBACKS):
            token = self.access_tokens.get(name)
            if token:
                return token
        for token in self.access_tokens.values():
            if token:
                return token
        return None


class SecureMirrorConfig(BaseModel):
    """The whole config.json."""

    cache_dir: Optional[str] = None
    repo_types: Dict[str, ProviderSettings] = Field(default_factory=dict)

    def provider(self, kind: str) -> Optional[ProviderSettings]:
        return self.repo_types.get(kind)
