"""
Handles the 'repos' and 'available' commands.
"""

import click

from ..cli_utils import build_index, common_options, standard_command
from ..output import emit


@click.command(name='repos')
@common_options
@standard_command
def repos_handler(pretty, debug, quiet):
    """List configured repositories in lookup order.

    The @CRAN@ placeholder is shown resolved to the configured mirror.
    """
    index = build_index()
    emit(index.repositories, pretty=pretty, columns=['name', 'url'])


@click.command(name='available')
@click.option('-t', '--type', 'pkg_type', type=click.Choice(['source', 'binary']),
              default='source', show_default=True, help='Distribution type to query')
@common_options
@standard_command
def available_handler(pkg_type, pretty, debug, quiet):
    """Query every repository for its package catalog.

    \b
    Prints one line per repository with the number of packages found
    and whether the catalog could be retrieved. An unreachable
    repository is reported as failed; the others are still queried.

    Examples:

    \b
        pkgindex available
        pkgindex available --type binary --pretty
    """
    index = build_index()
    catalogs = index.query_all(pkg_type, quiet=quiet)
    emit(catalogs.values(), pretty=pretty,
         columns=['repository', 'type', 'packages', 'status', 'url'],
         title=f"Available {pkg_type} packages")
