"""
Errors — Failure taxonomy for a hook invocation.

Every error raised here ends the invocation with a rejection.
"""

from __future__ import annotations

from typing import Optional


class SecureMirrorError(Exception):
    """Base class for all secure-mirror failures."""


class ConfigError(SecureMirrorError):
    """The config file or the git remote configuration is unusable."""

    @classmethod
    def unreadable(cls, path: object, reason: object) -> "ConfigError":
        return cls(f"Cannot read config {path}: {reason}")

    @classmethod
    def invalid(cls, path: object, reason: object) -> "ConfigError":
        return cls(f"Invalid config {path}: {reason}")


class MisconfiguredMirror(SecureMirrorError):
    """More than one remote is tagged as the mirror target."""

    def __init__(self, remotes: list):
        self.remotes = list(remotes)
        super().__init__(
            f"Multiple mirror remotes configured: {', '.join(self.remotes)}"
        )


class UnknownProviderKind(SecureMirrorError):
    """No provider handles the mirror URL."""

    @classmethod
    def for_url(cls, url: str) -> "UnknownProviderKind":
        return cls(f"No provider matches mirror URL {url!r}")

    @classmethod
    def unconfigured(cls, kind: str) -> "UnknownProviderKind":
        return cls(f"Provider '{kind}' has no entry under repo_types")


class ProviderAPIError(SecureMirrorError):
    """The upstream hosting provider could not answer a request."""

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, provider: str, url: str, status_code: int) -> "ProviderAPIError":
        return cls(f"{provider} API HTTP {status_code} for {url}", status_code=status_code)

    @classmethod
    def transport(cls, provider: str, url: str, reason: object) -> "ProviderAPIError":
        return cls(f"{provider} API request to {url} failed: {reason}")


class CacheError(SecureMirrorError):
    """A payload cannot be written to the response cache."""


class CacheRestorationError(CacheError):
    """A persisted cache entry cannot be turned back into objects."""
