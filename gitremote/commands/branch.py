"""
`gitremote default-branch`: show the branch a remote's HEAD points to.
"""

import click

from ..cli_utils import standard_command, base_options, build_base, resolve_timeout
from ..resolvers import resolve_default_branch


@click.command('default-branch')
@click.argument('repo')
@base_options
@click.option('--json', 'json_output', is_flag=True, help='Output as a JSON object')
@standard_command
def default_branch_cmd(repo, image, runtime, local, timeout, json_output, config):
    """Show the default branch of a remote repository.

    REPO: Repository URL (or a path reachable from the git environment)

    Examples:

    \b
        gitremote default-branch https://github.com/pallets/click
        gitremote default-branch --local ../some/checkout
        gitremote default-branch --image alpine/git:2.45.2 git@example.com:team/app.git
    """
    base = build_base(config, image=image, runtime=runtime, local=local)
    branch = resolve_default_branch(base, repo, timeout=resolve_timeout(config, timeout))

    if json_output:
        return {'repo': repo, 'default_branch': branch}
    return branch
