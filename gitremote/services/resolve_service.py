"""
Batch resolution service for gitremote.

Resolves default branches and latest tags for many repositories at once.
Used by the `gitremote resolve` command.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Dict, Generator, Iterable, Optional

from ..config import config_number, load_config
from ..domain import RepoResolution, ResolutionSummary
from ..exit_codes import ExecutionError, NoVersionsError, ParseError
from ..infra.base import GitBase, default_base
from ..resolvers import resolve_default_branch, resolve_latest_semver_tag

logger = logging.getLogger(__name__)

# Per-repository failures; anything else aborts the batch
QUERY_ERRORS = (ExecutionError, ParseError, NoVersionsError)


@dataclass
class ResolveOptions:
    """Options for batch resolution."""
    prefix: str = ""
    parallel: int = 1  # Number of concurrent queries (1 = sequential)
    branch: bool = True
    tag: bool = True
    timeout: Optional[float] = None


class ResolveService:
    """
    Service for querying many remote repositories.

    Every repository is handled independently: its queries run on their
    own worker and a failure is recorded on its result instead of
    stopping the batch.

    Example:
        service = ResolveService()
        options = ResolveOptions(parallel=8)

        for resolution in service.resolve_repos(urls, options):
            print(resolution.to_dict())

        print(f"{service.last_summary.failed} failed")
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        base: Optional[GitBase] = None
    ):
        """
        Initialize ResolveService.

        Args:
            config: Configuration dict (loads default if None)
            base: Environment to run git in (default: from config)
        """
        self.config = config if config is not None else load_config()
        self.base = base
        self.last_summary: Optional[ResolutionSummary] = None
        self._cancel = threading.Event()

    def cancel(self) -> None:
        """Abort in-flight commands and skip the ones not yet started."""
        self._cancel.set()

    def _options_timeout(self, options: ResolveOptions) -> Optional[float]:
        if options.timeout is not None:
            return options.timeout
        return config_number(self.config, "git", "timeout_seconds")

    def resolve_one(
        self,
        base: GitBase,
        repo_url: str,
        options: ResolveOptions
    ) -> RepoResolution:
        """Run the requested queries for one repository."""
        resolution = RepoResolution(repo=repo_url, prefix=options.prefix)
        timeout = self._options_timeout(options)

        if options.branch:
            resolution.requested.append('default_branch')
            try:
                resolution.default_branch = resolve_default_branch(
                    base, repo_url, timeout=timeout, cancel=self._cancel
                )
            except QUERY_ERRORS as e:
                logger.debug(f"{repo_url}: default branch failed: {e}")
                resolution.record_error('default_branch', e)

        if options.tag:
            resolution.requested.append('latest_tag')
            try:
                resolution.latest_tag = resolve_latest_semver_tag(
                    base, repo_url, options.prefix, timeout=timeout, cancel=self._cancel
                )
            except QUERY_ERRORS as e:
                logger.debug(f"{repo_url}: latest tag failed: {e}")
                resolution.record_error('latest_tag', e)

        return resolution

    def resolve_repos(
        self,
        repo_urls: Iterable[str],
        options: ResolveOptions
    ) -> Generator[RepoResolution, None, ResolutionSummary]:
        """
        Resolve every repository, yielding results as they complete.

        Args:
            repo_urls: Repository URLs or paths
            options: Resolution options

        Yields:
            RepoResolution per repository, in completion order

        Returns:
            ResolutionSummary with counts
        """
        summary = ResolutionSummary()
        self.last_summary = summary
        self._cancel.clear()

        urls = list(dict.fromkeys(repo_urls))
        if not urls:
            return summary

        base = self.base if self.base is not None else default_base(self.config)
        workers = max(1, min(options.parallel, len(urls)))
        logger.debug(f"Resolving {len(urls)} repositories with {workers} workers via {base!r}")

        executor = ThreadPoolExecutor(max_workers=workers)
        try:
            futures = {
                executor.submit(self.resolve_one, base, url, options): url
                for url in urls
            }
            for future in as_completed(futures):
                resolution = future.result()
                summary.add(resolution)
                yield resolution
        except BaseException:
            self.cancel()
            executor.shutdown(wait=True, cancel_futures=True)
            raise
        else:
            executor.shutdown(wait=True)

        return summary
