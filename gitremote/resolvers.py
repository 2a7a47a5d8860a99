"""
Remote ref queries.

Each resolver issues exactly one `git ls-remote` through a base and parses
what comes back. Results are never cached: a repository's default branch or
newest tag can change at any moment (a freshly created repository often has
its default branch renamed right after the first push), and callers must
see that immediately.
"""

import logging
import threading
from typing import Optional

from .infra.base import GitBase
from .refs import parse_default_branch, parse_latest_semver_tag

logger = logging.getLogger(__name__)


def default_branch_command(repo_url: str):
    return ["git", "ls-remote", "--symref", repo_url, "HEAD"]


def latest_tag_command(repo_url: str, prefix: str = ""):
    return ["git", "ls-remote", "--tags", repo_url, f"{prefix}v*"]


def resolve_default_branch(
    base: GitBase,
    repo_url: str,
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None
) -> str:
    """
    Return the branch the remote's HEAD points to.

    Args:
        base: Environment to run git in
        repo_url: Repository URL or path reachable from the base
        timeout: Seconds before the command is killed
        cancel: Event that aborts the command when set

    Raises:
        ExecutionError: git could not be run or failed
        ParseError: The output has no symref line for HEAD
    """
    output = base.run(default_branch_command(repo_url), skip_entrypoint=True).stdout(
        timeout=timeout, cancel=cancel
    )
    branch = parse_default_branch(output)
    logger.info(f"{repo_url}: default branch is {branch}")
    return branch


def resolve_latest_semver_tag(
    base: GitBase,
    repo_url: str,
    prefix: str = "",
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None
) -> str:
    """
    Return the highest semver tag on the remote.

    The prefix scopes the search for monorepos tagging releases as
    `sub/path/v1.2.3`; it is stripped from the returned tag.

    Raises:
        ExecutionError: git could not be run or failed
        NoVersionsError: No valid version tag under the prefix
    """
    output = base.run(latest_tag_command(repo_url, prefix), skip_entrypoint=True).stdout(
        timeout=timeout, cancel=cancel
    )
    tag = parse_latest_semver_tag(output, prefix)
    scope = f" under {prefix}" if prefix else ""
    logger.info(f"{repo_url}: latest tag{scope} is {tag}")
    return tag
