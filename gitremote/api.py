"""
High-level Python API for gitremote.

Example:
    import gitremote

    # One-off queries against the default base
    gitremote.default_branch("https://github.com/psf/requests")
    gitremote.latest_semver_tag("https://go.googlesource.com/tools", prefix="gopls/")

    # Reusable handle with a custom environment
    util = gitremote.GitUtil().with_base(gitremote.LocalBase())
    repo = util.repo("https://github.com/pallets/click")
    print(repo.default_branch())
"""

import logging
import threading
from typing import Any, Dict, Optional, Tuple

from .config import config_number, load_config
from .infra.base import GitBase, default_base
from .resolvers import resolve_default_branch, resolve_latest_semver_tag

logger = logging.getLogger(__name__)


class GitRepo:
    """
    A remote repository queried through `git ls-remote`.

    Nothing is cached; each method call runs a fresh command.
    """

    def __init__(
        self,
        url: str,
        custom_base: Optional[GitBase] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        """
        Args:
            url: Repository URL or path
            custom_base: Environment to run git in (default: from config)
            config: Configuration dict (loaded when the default base is needed)
        """
        self.url = url
        self.custom_base = custom_base
        self._config = config

    def __repr__(self) -> str:
        return f"GitRepo(url={self.url!r})"

    def _settings(self, timeout: Optional[float]) -> Tuple[GitBase, Optional[float]]:
        # Read the config file at most once per query
        config = self._config
        if config is None and (self.custom_base is None or timeout is None):
            config = load_config()
        base = self.custom_base if self.custom_base is not None else default_base(config)
        if timeout is None:
            timeout = config_number(config, "git", "timeout_seconds")
        return base, timeout

    def base(self) -> GitBase:
        """Return the custom base, or the configured default."""
        if self.custom_base is not None:
            return self.custom_base
        return default_base(self._config)

    def default_branch(
        self,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None
    ) -> str:
        """Return the default branch of the repository."""
        base, timeout = self._settings(timeout)
        return resolve_default_branch(base, self.url, timeout=timeout, cancel=cancel)

    def latest_semver_tag(
        self,
        prefix: str = "",
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None
    ) -> str:
        """
        Return the latest semver tag of the repository.

        Args:
            prefix: Tag prefix to filter by, e.g. "sub/path/" for
                monorepo tags like sub/path/v1.2.3
        """
        base, timeout = self._settings(timeout)
        return resolve_latest_semver_tag(base, self.url, prefix, timeout=timeout, cancel=cancel)


class GitUtil:
    """
    Entry point holding the base shared by every repository it hands out.

    Example:
        util = GitUtil().with_base(ContainerBase("alpine/git:2.45.2"))
        branch = util.repo("https://example.com/app.git").default_branch()
    """

    def __init__(
        self,
        base: Optional[GitBase] = None,
        config: Optional[Dict[str, Any]] = None
    ):
        self.custom_base = base
        self._config = config

    def with_base(self, base: GitBase) -> 'GitUtil':
        """Use base for future repositories. Returns self for chaining."""
        self.custom_base = base
        return self

    def repo(self, url: str) -> GitRepo:
        """Return a handle for the repository at url."""
        return GitRepo(url, custom_base=self.custom_base, config=self._config)


def default_branch(
    repo_url: str,
    base: Optional[GitBase] = None,
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
    config: Optional[Dict[str, Any]] = None
) -> str:
    """Return the default branch of repo_url."""
    return GitRepo(repo_url, custom_base=base, config=config).default_branch(
        timeout=timeout, cancel=cancel
    )


def latest_semver_tag(
    repo_url: str,
    prefix: str = "",
    base: Optional[GitBase] = None,
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
    config: Optional[Dict[str, Any]] = None
) -> str:
    """Return the latest semver tag of repo_url, optionally under prefix."""
    return GitRepo(repo_url, custom_base=base, config=config).latest_semver_tag(
        prefix, timeout=timeout, cancel=cancel
    )
