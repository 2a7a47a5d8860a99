#!/usr/bin/env python3

import click

from gitremote import __version__
from gitremote.commands.branch import default_branch_cmd
from gitremote.commands.tag import latest_tag_cmd
from gitremote.commands.resolve import resolve_cmd
from gitremote.commands.config import config_cmd


@click.group()
@click.version_option(version=__version__, prog_name="gitremote")
def cli():
    """gitremote - Query remote git repositories without cloning them.

    Answers two questions with `git ls-remote`, run inside a container
    (or with the host git): what is the default branch, and what is the
    latest semantic-version tag?
    """
    pass


cli.add_command(default_branch_cmd)
cli.add_command(latest_tag_cmd)
cli.add_command(resolve_cmd)
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
