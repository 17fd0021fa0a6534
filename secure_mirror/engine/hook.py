"""
Hook Orchestration — One run of the secure-mirror hook.

Sequence for the update and pre-receive phases:

    load config
      → new repo?          allow
      → not a mirror?      allow
      → misconfigured?     reject
      → build provider repo (cached)
      → every update trusted?  allow : reject

post-receive only clears the recorded mirror status; the change is already
in place by then.

Any SecureMirrorError ends the run with a rejection. Nothing here retries.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import IntEnum
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from ..config.loader import load_config, resolve_cache_dir
from ..errors import ConfigError, MisconfiguredMirror, SecureMirrorError
from ..mirror.config import MirrorRemotes
from ..mirror.state import cache_mirrored_status, read_mirrored_status, remove_mirrored_status
from ..models.hook import HookArgs, Outcome, Phase
from ..providers.registry import ProviderRegistry, default_providers
from .trust import TrustEvaluator

logger = logging.getLogger(__name__)


class Codes(IntEnum):
    """Process exit codes understood by the git server."""

    OK = 0
    REJECT = 1


def read_ref_updates(lines: Iterable[str]) -> List[HookArgs]:
    """
    Parse pre-receive stdin: one ``<old-sha> <new-sha> <ref-name>`` per line.

    Raises:
        ConfigError: If a line does not have three fields
    """
    updates = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        fields = line.split()
        if len(fields) != 3:
            raise ConfigError(f"Malformed ref update line: {line!r}")
        current_sha, future_sha, ref_name = fields
        updates.append(HookArgs(ref_name=ref_name, current_sha=current_sha, future_sha=future_sha))
    return updates


def evaluate_changes(
    phase: Phase,
    updates: Sequence[HookArgs],
    *,
    config_file: Union[str, Path],
    git_config_file: Union[str, Path],
    cache_dir: Optional[Union[str, Path]] = None,
    providers: Optional[ProviderRegistry] = None,
) -> Outcome:
    """
    Decide whether the proposed updates may be imported.

    Args:
        phase: Hook phase being run
        updates: Ref updates of the push (one for the update phase)
        config_file: Path to config.json
        git_config_file: Path to the repository's git config; its parent
            is the git directory
        cache_dir: Response cache directory override
        providers: Provider registry (default: GitHub and GitLab)

    Returns:
        The Outcome; ``outcome.exit_code`` is the hook's exit status
    """
    git_dir = Path(git_config_file).parent
    context = {"phase": phase.value}

    if phase is Phase.POST_RECEIVE:
        status = read_mirrored_status(git_dir)
        if remove_mirrored_status(git_dir):
            repo_name = (status or {}).get("repo") or "unknown repo"
            logger.info(f"Mirror import complete for {repo_name}", extra={**context, "repo_name": repo_name})
        return Outcome.not_applicable("post-receive does not gate changes")

    try:
        return _evaluate(
            phase,
            updates,
            config_file=Path(config_file),
            git_config_file=Path(git_config_file),
            cache_dir=cache_dir,
            providers=providers or default_providers(),
        )
    except MisconfiguredMirror as err:
        logger.error(f"Repo is misconfigured: {err}", extra=context)
        return Outcome.misconfigured(str(err))
    except SecureMirrorError as err:
        logger.error(f"Rejecting changes: {err}", extra=context)
        return Outcome.untrusted(str(err))


def _evaluate(
    phase: Phase,
    updates: Sequence[HookArgs],
    *,
    config_file: Path,
    git_config_file: Path,
    cache_dir: Optional[Union[str, Path]],
    providers: ProviderRegistry,
) -> Outcome:
    config = load_config(config_file)
    remotes = MirrorRemotes.load(git_config_file)

    if remotes.is_new_repo:
        logger.info("Brand new repo, cannot read git config info")
        return Outcome.not_applicable("new repository")

    if not remotes.is_mirror:
        logger.info(f"Repo {git_config_file.parent} is not a mirror")
        return Outcome.not_applicable("not a mirror")

    if remotes.is_misconfigured:
        names = [c.remote_name for c in remotes.candidates]
        logger.error(f"Repo {git_config_file.parent} is misconfigured: mirror remotes {names}")
        return Outcome.misconfigured(f"multiple mirror remotes: {', '.join(names)}")

    repo_name = remotes.name
    context = {"phase": phase.value, "repo_name": repo_name}
    cache_mirrored_status(True, git_config_file.parent, repo_name)

    if not updates:
        logger.info(f"No ref updates for {repo_name}", extra=context)
        return Outcome.not_applicable("no ref updates")

    cache_path = resolve_cache_dir(config, cache_dir)
    hook_args_list = [replace(update, repo_name=repo_name) for update in updates]
    repo = providers.build(remotes.url, hook_args_list[0], config, cache_path)
    evaluator = TrustEvaluator(repo.settings.signoff_body)
    try:
        for hook_args in hook_args_list:
            outcome = evaluator.evaluate(hook_args, repo.for_update(hook_args))
            ref_context = {**context, "ref_name": hook_args.ref_name}
            if not outcome.allowed:
                logger.warning(f"Untrusted change to {hook_args.ref_name}: {outcome.reason}", extra=ref_context)
                return outcome
            logger.info(outcome.reason, extra=ref_context)
    finally:
        repo.close()

    logger.info(f"Importing trusted changes from {repo_name}", extra=context)
    return Outcome.trusted(f"{len(updates)} update(s) from {repo_name} trusted")
