"""
`gitremote latest-tag`: show the highest semantic-version tag on a remote.
"""

import click

from ..cli_utils import standard_command, base_options, build_base, resolve_timeout
from ..resolvers import resolve_latest_semver_tag


@click.command('latest-tag')
@click.argument('repo')
@click.option('--prefix', default='', show_default=False,
              help='Tag prefix to filter by, e.g. "sub/path/" for sub/path/v1.2.3')
@base_options
@click.option('--json', 'json_output', is_flag=True, help='Output as a JSON object')
@standard_command
def latest_tag_cmd(repo, prefix, image, runtime, local, timeout, json_output, config):
    """Show the latest semver tag of a remote repository.

    Only tags of the form vMAJOR.MINOR.PATCH[-PRE][+BUILD] are considered.
    The prefix, when given, is removed from the printed tag.

    REPO: Repository URL (or a path reachable from the git environment)

    Examples:

    \b
        gitremote latest-tag https://github.com/cli/cli
        gitremote latest-tag --prefix gopls/ https://go.googlesource.com/tools
    """
    base = build_base(config, image=image, runtime=runtime, local=local)
    tag = resolve_latest_semver_tag(base, repo, prefix, timeout=resolve_timeout(config, timeout))

    if json_output:
        result = {'repo': repo, 'latest_tag': tag}
        if prefix:
            result['prefix'] = prefix
        return result
    return tag
