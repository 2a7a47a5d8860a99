"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import logging
import sys
from functools import wraps
from typing import Any, Dict, Optional

import click
from rich.console import Console
from rich.markup import escape

from .config import load_config, configure_logging, config_number
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, GitRemoteError, PartialSuccessError
)
from .infra.base import (
    ContainerBase, LocalBase, GitBase, default_base, DEFAULT_IMAGE, DEFAULT_RUNTIME
)

logger = logging.getLogger(__name__)

err_console = Console(stderr=True)


def report_error(message: str) -> None:
    """Always output errors to stderr."""
    err_console.print(f"[red]ERROR:[/red] {escape(message)}", highlight=False)


def error_object(exc: Exception) -> Dict[str, Any]:
    """Describe an exception as a JSON-serializable dict."""
    error_obj: Dict[str, Any] = {
        "error": str(exc),
        "type": type(exc).__name__,
        "exit_code": get_exit_code_for_exception(exc),
    }
    if isinstance(exc, PartialSuccessError):
        error_obj['succeeded'] = exc.succeeded
        error_obj['failed'] = exc.failed
    return error_obj


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Loads configuration and applies its logging settings
    - Automatic --verbose/-v handling (DEBUG logging)
    - Plain string results printed as-is on stdout
    - Dict results printed as one JSON line
    - Consistent error handling and exit codes

    The wrapped command receives the loaded config as `config`.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.pop('verbose', False)
        json_output = kwargs.get('json_output', False)

        config = load_config()
        configure_logging(config, verbose=verbose)
        kwargs['config'] = config

        try:
            result = func(*args, **kwargs)

            if isinstance(result, dict):
                print(json.dumps(result, ensure_ascii=False), flush=True)
            elif result is not None:
                print(result, flush=True)

            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            report_error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except GitRemoteError as e:
            report_error(str(e))
            if json_output:
                print(json.dumps(error_object(e), ensure_ascii=False), flush=True)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.debug("Unhandled error", exc_info=True)
            report_error(f"Command failed: {e}")
            if json_output:
                print(json.dumps(error_object(e), ensure_ascii=False), flush=True)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


def build_base(config: Dict[str, Any], image: Optional[str] = None,
               runtime: Optional[str] = None, local: bool = False) -> GitBase:
    """
    Pick the base for a command from its options, falling back to config.

    Raises:
        click.UsageError: --local combined with container options
    """
    if local and (image or runtime):
        raise click.UsageError("--local cannot be combined with --image or --runtime")
    defaults = config.get("base", {})
    if local:
        base = LocalBase(defaults.get("git_executable") or "git")
    elif image or runtime:
        base = ContainerBase(
            image=image or defaults.get("image") or DEFAULT_IMAGE,
            runtime=runtime or defaults.get("runtime") or DEFAULT_RUNTIME,
            pull=defaults.get("pull") or None,
        )
    else:
        base = default_base(config)

    logger.debug(f"Using {base!r}")
    return base


def base_options(func):
    """Add --image/--runtime/--local/--timeout/--verbose to a command."""
    options = [
        click.option('--image', help='Git-enabled container image (default: from config)'),
        click.option('--runtime', help='Container runtime, e.g. docker or podman'),
        click.option('--local', is_flag=True, help='Run the host git instead of a container'),
        click.option('--timeout', type=float,
                     help='Seconds before the git command is killed'),
        click.option('-v', '--verbose', is_flag=True, help='Enable debug logging'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def resolve_timeout(config: Dict[str, Any], timeout: Optional[float]) -> Optional[float]:
    """Command-line timeout, else git.timeout_seconds from config."""
    if timeout is not None:
        return timeout
    return config_number(config, "git", "timeout_seconds")
