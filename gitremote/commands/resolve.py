"""
`gitremote resolve`: default branch and latest tag for many repositories.
"""

import click
from rich.console import Console
from rich.table import Table

from ..cli_utils import standard_command, base_options, build_base, resolve_timeout
from ..config import config_number
from ..exit_codes import PartialSuccessError
from ..format_utils import FORMATS, format_output, get_format_from_env
from ..services import ResolveService, ResolveOptions

console = Console()


def read_repo_file(handle):
    """Read repository URLs from a file, one per line; # starts a comment."""
    repos = []
    for line in handle:
        line = line.split('#', 1)[0].strip()
        if line:
            repos.append(line)
    return repos


def show_resolution_table(resolutions):
    """Render results as a rich table."""
    table = Table(title="Remote repositories")
    table.add_column("Repository", style="cyan")
    table.add_column("Default branch", style="green")
    table.add_column("Latest tag", style="magenta")
    table.add_column("Errors", style="red")

    for resolution in sorted(resolutions, key=lambda r: r.repo):
        errors = "; ".join(f"{query}: {message}" for query, message in resolution.errors.items())
        table.add_row(
            resolution.repo,
            resolution.default_branch or "-",
            resolution.latest_tag or "-",
            errors,
        )

    console.print(table)


@click.command('resolve')
@click.argument('repos', nargs=-1)
@click.option('-i', '--input', 'input_file', type=click.File('r'),
              help='Read repository URLs from a file (- for stdin)')
@click.option('--prefix', default='', help='Tag prefix to filter by')
@click.option('--parallel', '-j', type=int, default=None,
              help='Concurrent queries (default: resolve.max_concurrent_operations)')
@click.option('--no-branch', is_flag=True, help='Skip default branch lookup')
@click.option('--no-tag', is_flag=True, help='Skip latest tag lookup')
@click.option('-f', '--format', 'output_format',
              type=click.Choice(FORMATS + ('table',)),
              help='Output format (default: jsonl, or from GITREMOTE_FORMAT env)')
@click.option('--fields', help='Comma-separated list of fields to include (for CSV/TSV)')
@base_options
@standard_command
def resolve_cmd(repos, input_file, prefix, parallel, no_branch, no_tag, output_format,
                fields, image, runtime, local, timeout, config):
    """Resolve default branch and latest semver tag for several repositories.

    Repositories are queried concurrently; one failing repository does not
    stop the others. Exits with status 71 if any repository failed.

    Examples:

    \b
        gitremote resolve https://github.com/pallets/click https://github.com/psf/requests
        gitremote resolve -i repos.txt -j 8 -f table
        gitremote resolve --no-branch --prefix api/ https://example.com/mono.git
    """
    repo_list = list(repos)
    if input_file is not None:
        repo_list.extend(read_repo_file(input_file))
    if not repo_list:
        raise click.UsageError("No repositories given")
    if no_branch and no_tag:
        raise click.UsageError("--no-branch and --no-tag leave nothing to resolve")

    if output_format is None:
        output_format = get_format_from_env(config.get("output", {}).get("format", "jsonl"))
    if parallel is None:
        parallel = config_number(
            config, "resolve", "max_concurrent_operations", integer=True, minimum=1
        ) or 1
    if parallel < 1:
        raise click.UsageError("--parallel must be at least 1")

    service = ResolveService(config=config, base=build_base(config, image, runtime, local))
    options = ResolveOptions(
        prefix=prefix,
        parallel=parallel,
        branch=not no_branch,
        tag=not no_tag,
        timeout=resolve_timeout(config, timeout),
    )

    results = service.resolve_repos(repo_list, options)

    if output_format == 'table':
        show_resolution_table(list(results))
    elif output_format == 'jsonl':
        # Stream as repositories complete
        for resolution in results:
            for line in format_output([resolution.to_dict()], 'jsonl'):
                click.echo(line)
    else:
        field_list = fields.split(',') if fields else None
        rows = (resolution.to_dict() for resolution in results)
        for line in format_output(rows, output_format, field_list):
            click.echo(line)

    summary = service.last_summary
    if summary is not None and not summary.success:
        raise PartialSuccessError(
            f"{summary.partial + summary.failed} of {summary.total} repositories "
            f"did not resolve completely",
            succeeded=summary.successful,
            failed=summary.partial + summary.failed,
        )
