#!/usr/bin/env python3

import click

from pkgindex.commands.config import config_cmd
from pkgindex.commands.repos import repos_handler, available_handler
from pkgindex.commands.resolve import find_handler, latest_handler


@click.group()
@click.version_option(package_name="pkgindex")
def cli():
    """pkgindex - Resolve packages against CRAN-style repositories.

    Answers which exact (version, repository, source or binary) record
    should be used for a package, given the configured repositories.
    """
    pass


cli.add_command(repos_handler, name='repos')
cli.add_command(available_handler, name='available')
cli.add_command(find_handler, name='find')
cli.add_command(latest_handler, name='latest')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
