"""
Git execution environments for gitremote.

A "base" is anything that can run a git command line and hand back its
stdout. Two are provided:

- ContainerBase: runs git inside a throwaway container (docker or podman)
- LocalBase: runs the git found on the host

Callers may pass any object with a compatible `run()` method instead.
Commands are started lazily, when `stdout()` is called on the handle.
"""

import logging
import os
import shlex
import subprocess
import threading
import time
import uuid
from typing import Any, Dict, List, Optional, Protocol, Sequence

from ..exit_codes import ConfigError, ExecutionError

logger = logging.getLogger(__name__)

DEFAULT_IMAGE = "alpine/git:latest"
DEFAULT_RUNTIME = "docker"

# How often a running command checks for cancellation (seconds)
POLL_INTERVAL = 0.1

# Seconds a terminated command gets to exit before it is killed
KILL_GRACE = 2.0

# Seconds allowed for the cleanup command run after an abort
CLEANUP_TIMEOUT = 30

# Never let git block waiting for credentials on a terminal
GIT_ENV = {"GIT_TERMINAL_PROMPT": "0"}


class ExecHandle:
    """
    A command that has been prepared but not yet run.

    Example:
        handle = LocalBase().run(["git", "ls-remote", url, "HEAD"])
        output = handle.stdout(timeout=30)
    """

    def __init__(
        self,
        argv: Sequence[str],
        env: Optional[Dict[str, str]] = None,
        cleanup: Optional[Sequence[str]] = None
    ):
        """
        Args:
            argv: Command line to run
            env: Environment for the command (inherited if None)
            cleanup: Command run after a timeout or cancel, e.g. to remove
                a container the killed client left behind
        """
        self.argv = list(argv)
        self.env = env
        self.cleanup = list(cleanup) if cleanup else None

    def __repr__(self) -> str:
        return f"ExecHandle({shlex.join(self.argv)!r})"

    def stdout(
        self,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None
    ) -> str:
        """
        Run the command and return its captured stdout.

        Args:
            timeout: Seconds to wait before killing the command
            cancel: Event that aborts the command as soon as it is set

        Returns:
            Standard output as text

        Raises:
            ExecutionError: The command could not start, exited non-zero,
                timed out, or was cancelled
        """
        command = shlex.join(self.argv)
        logger.debug(f"Running: {command}")

        try:
            proc = subprocess.Popen(
                self.argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
                env=self.env,
            )
        except OSError as e:
            raise ExecutionError(
                f"Could not start {self.argv[0]}: {e}", argv=self.argv
            ) from e

        deadline = time.monotonic() + timeout if timeout is not None else None

        try:
            while True:
                if cancel is not None and cancel.is_set():
                    raise ExecutionError(f"Command cancelled: {command}", argv=self.argv)

                wait = POLL_INTERVAL if cancel is not None else None
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        raise ExecutionError(
                            f"Command timed out after {timeout}s: {command}",
                            argv=self.argv,
                        )
                    wait = remaining if wait is None else min(wait, remaining)

                try:
                    out, err = proc.communicate(timeout=wait)
                    break
                except subprocess.TimeoutExpired:
                    continue
        except BaseException:
            self._abort(proc)
            raise

        if proc.returncode != 0:
            detail = err.strip() or f"exit status {proc.returncode}"
            raise ExecutionError(
                f"Command failed: {command}: {detail}",
                argv=self.argv,
                returncode=proc.returncode,
                stderr=err,
            )

        return out

    def _abort(self, proc: subprocess.Popen) -> None:
        proc.terminate()
        try:
            proc.communicate(timeout=KILL_GRACE)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.communicate()

        if not self.cleanup:
            return
        logger.debug(f"Cleaning up: {shlex.join(self.cleanup)}")
        try:
            subprocess.run(
                self.cleanup,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=CLEANUP_TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Cleanup failed: {shlex.join(self.cleanup)}: {e}")


class GitBase(Protocol):
    """Anything that can prepare a git command for execution."""

    def run(self, argv: Sequence[str], skip_entrypoint: bool = False) -> ExecHandle:
        ...


class LocalBase:
    """Runs git directly on the host."""

    def __init__(self, git_executable: str = "git"):
        self.git_executable = git_executable

    def __repr__(self) -> str:
        return f"LocalBase(git_executable={self.git_executable!r})"

    def run(self, argv: Sequence[str], skip_entrypoint: bool = False) -> ExecHandle:
        # There is no entrypoint outside a container, so skip_entrypoint is moot
        argv = list(argv)
        if argv and argv[0] == "git":
            argv[0] = self.git_executable
        env = dict(os.environ)
        env.update(GIT_ENV)
        return ExecHandle(argv, env=env)


class ContainerBase:
    """
    Runs git inside a fresh container for every command.

    Example:
        base = ContainerBase("alpine/git:latest", runtime="podman")
        out = base.run(["git", "ls-remote", url], skip_entrypoint=True).stdout()
    """

    def __init__(
        self,
        image: str = DEFAULT_IMAGE,
        runtime: str = DEFAULT_RUNTIME,
        pull: Optional[str] = None,
        env: Optional[Dict[str, str]] = None
    ):
        """
        Args:
            image: Image with a git client installed
            runtime: Container CLI to invoke (docker, podman, ...)
            pull: Pull policy passed as --pull (always, missing, never)
            env: Extra environment variables for the container
        """
        self.image = image
        self.runtime = runtime
        self.pull = pull
        self.env = dict(GIT_ENV)
        if env:
            self.env.update(env)

    def __repr__(self) -> str:
        return f"ContainerBase(image={self.image!r}, runtime={self.runtime!r})"

    def command(
        self,
        argv: Sequence[str],
        skip_entrypoint: bool = False,
        name: Optional[str] = None
    ) -> List[str]:
        """Build the full container command line for argv."""
        cmd = [self.runtime, "run", "--rm"]
        if name:
            cmd.extend(["--name", name])
        if self.pull:
            cmd.append(f"--pull={self.pull}")
        if skip_entrypoint:
            cmd.append("--entrypoint=")
        for key, value in sorted(self.env.items()):
            cmd.extend(["-e", f"{key}={value}"])
        cmd.append(self.image)
        cmd.extend(argv)
        return cmd

    def run(self, argv: Sequence[str], skip_entrypoint: bool = False) -> ExecHandle:
        name = f"gitremote-{uuid.uuid4().hex[:12]}"
        return ExecHandle(
            self.command(argv, skip_entrypoint, name=name),
            cleanup=[self.runtime, "rm", "-f", name],
        )


def default_base(config: Optional[Dict[str, Any]] = None) -> GitBase:
    """
    Build the default base from configuration.

    Resolved on every call so configuration changes are picked up.

    Args:
        config: Configuration dict (loads default if None)

    Raises:
        ConfigError: base.kind is not "container" or "local"
    """
    if config is None:
        from ..config import load_config
        config = load_config()

    base_config = config.get("base", {})
    kind = base_config.get("kind", "container")

    if kind == "local":
        return LocalBase(base_config.get("git_executable") or "git")
    if kind == "container":
        return ContainerBase(
            image=base_config.get("image") or DEFAULT_IMAGE,
            runtime=base_config.get("runtime") or DEFAULT_RUNTIME,
            pull=base_config.get("pull") or None,
        )

    raise ConfigError(f"Unknown base kind: {kind!r} (expected 'container' or 'local')")
