"""
gitremote - Ask a remote git repository about itself without cloning it.

Two questions are answered, each with a single `git ls-remote`:

- which branch does HEAD point to?
- which tag is the highest semantic version (optionally under a prefix)?

Quick Start:
    import gitremote

    gitremote.default_branch("https://github.com/pallets/click")
    gitremote.latest_semver_tag("https://example.com/app.git")

    # Monorepo tags such as api/v1.4.0
    gitremote.latest_semver_tag("https://example.com/mono.git", prefix="api/")

    # Pick where git runs
    util = gitremote.GitUtil().with_base(gitremote.LocalBase())
    util.repo("https://github.com/psf/requests").default_branch()

Results are never cached; every call asks the remote again.
"""

__version__ = "0.3.0"

# High-level API
from .api import GitUtil, GitRepo, default_branch, latest_semver_tag

# Execution environments
from .infra import ContainerBase, LocalBase, ExecHandle, default_base

# Parsing
from .refs import (
    RemoteRef,
    parse_default_branch,
    parse_latest_semver_tag,
    is_semver_tag,
    sort_semver_tags,
)

# Errors
from .exit_codes import (
    GitRemoteError,
    ExecutionError,
    ParseError,
    NoVersionsError,
    ConfigError,
)

# Configuration
from .config import load_config, save_config

__all__ = [
    # Version
    "__version__",
    # High-level API
    "GitUtil",
    "GitRepo",
    "default_branch",
    "latest_semver_tag",
    # Execution environments
    "ContainerBase",
    "LocalBase",
    "ExecHandle",
    "default_base",
    # Parsing
    "RemoteRef",
    "parse_default_branch",
    "parse_latest_semver_tag",
    "is_semver_tag",
    "sort_semver_tags",
    # Errors
    "GitRemoteError",
    "ExecutionError",
    "ParseError",
    "NoVersionsError",
    "ConfigError",
    # Configuration
    "load_config",
    "save_config",
]
