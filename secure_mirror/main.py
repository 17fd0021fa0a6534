"""
Secure Mirror — CLI Entry Point

Installed as the server-side hook of a mirrored repository. The hook's
working directory is the bare git directory, so ``./config`` is the
repository's git config.

Usage:
    secure-mirror REF_NAME CURRENT_SHA FUTURE_SHA
    secure-mirror --phase pre-receive < ref-updates
    secure-mirror --phase post-receive

Exit status 0 lets the change in, 1 rejects it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import click

from .engine.hook import Codes, evaluate_changes, read_ref_updates
from .errors import ConfigError, SecureMirrorError
from .logging_config import setup_logging
from .models.hook import HookArgs, Phase

logger = logging.getLogger(__name__)


def _collect_updates(
    phase: Phase,
    ref_name: Optional[str],
    current_sha: Optional[str],
    future_sha: Optional[str],
) -> List[HookArgs]:
    """Ref updates from positional args, or from stdin for pre-receive."""
    given = [a for a in (ref_name, current_sha, future_sha) if a]
    if len(given) == 3:
        return [HookArgs(ref_name=ref_name, current_sha=current_sha, future_sha=future_sha)]
    if given:
        raise ConfigError("Expected REF_NAME CURRENT_SHA FUTURE_SHA")
    if phase is Phase.PRE_RECEIVE:
        return read_ref_updates(click.get_text_stream("stdin"))
    if phase is Phase.UPDATE:
        raise ConfigError("update phase requires REF_NAME CURRENT_SHA FUTURE_SHA")
    return []


@click.command()
@click.argument("ref_name", required=False)
@click.argument("current_sha", required=False)
@click.argument("future_sha", required=False)
@click.option(
    "--phase",
    type=click.Choice([p.value for p in Phase]),
    default=Phase.UPDATE.value,
    show_default=True,
    help="Hook phase being run",
)
@click.option(
    "--config",
    "config_file",
    default="config.json",
    envvar="SM_CONFIG",
    show_default=True,
    help="Path to secure-mirror config",
)
@click.option("--git-config", "git_config_file", default=None, help="Path to git config (default: ./config)")
@click.option("--cache-dir", default=None, help="Response cache directory (env: SM_CACHE_DIR)")
@click.option("--log-file", default=None, help="Append logs here (env: SM_LOG_FILE)")
@click.option("--log-level", default=None, help="Log level (env: SM_LOG_LEVEL)")
def cli(
    ref_name: Optional[str],
    current_sha: Optional[str],
    future_sha: Optional[str],
    phase: str,
    config_file: str,
    git_config_file: Optional[str],
    cache_dir: Optional[str],
    log_file: Optional[str],
    log_level: Optional[str],
) -> None:
    """Secure Mirror — Gate imports into a mirrored repository."""
    setup_logging(level=log_level, log_file=log_file)
    hook_phase = Phase(phase)
    git_config = Path(git_config_file) if git_config_file else Path.cwd() / "config"

    try:
        updates = _collect_updates(hook_phase, ref_name, current_sha, future_sha)
        outcome = evaluate_changes(
            hook_phase,
            updates,
            config_file=config_file,
            git_config_file=git_config,
            cache_dir=cache_dir,
        )
    except SecureMirrorError as e:
        logger.error(f"Rejecting changes: {e}", extra={"phase": hook_phase.value})
        raise SystemExit(Codes.REJECT)
    except Exception:
        # Fail closed on anything unforeseen
        logger.exception("Unexpected failure, rejecting changes", extra={"phase": hook_phase.value})
        raise SystemExit(Codes.REJECT)

    logger.debug(f"Verdict: {outcome.verdict.value} ({outcome.reason})")
    if not outcome.allowed:
        raise SystemExit(Codes.REJECT)


if __name__ == "__main__":
    cli()
