"""
Handles the 'find' and 'latest' commands.

Both print a single resolution record:
- find: first configured repository offering the package
- latest: newest version, choosing between source and binary
"""

import click

from ..cli_utils import build_index, common_options, standard_command
from ..domain import build_record
from ..output import emit

RECORD_COLUMNS = ['package', 'version', 'type', 'repository', 'url']


@click.command(name='find')
@click.argument('package')
@click.option('-t', '--type', 'pkg_type', type=click.Choice(['source', 'binary']),
              default='source', show_default=True, help='Distribution type to search')
@click.option('-r', '--repo', 'repos', multiple=True,
              help='Repository name to search (repeatable, searched in the given order)')
@click.option('--version', 'version', default=None, help='Require this exact version')
@common_options
@standard_command
def find_handler(package, pkg_type, repos, version, pretty, debug, quiet):
    """Find PACKAGE in the first repository that offers it.

    \b
    Repositories are searched in configured order (or the order given
    with --repo); a later repository is never consulted once an earlier
    one matches, even if it has a newer version.

    Examples:

    \b
        pkgindex find jsonlite
        pkgindex find jsonlite --type binary
        pkgindex find jsonlite --version 1.8.8 --repo CRAN
    """
    index = build_index()
    row, name = index.find_entry(package, pkg_type, repos=list(repos) or None,
                                 predicate=version, quiet=quiet)
    emit([build_record(row, pkg_type, name)], pretty=pretty, columns=RECORD_COLUMNS)


@click.command(name='latest')
@click.argument('package')
@common_options
@standard_command
def latest_handler(package, pretty, debug, quiet):
    """Resolve the record to install for the newest PACKAGE.

    \b
    Compares the newest source and binary versions across all
    repositories and applies the install preferences from the
    configuration (check_source, compile_from_source).

    Examples:

    \b
        pkgindex latest jsonlite
        pkgindex latest jsonlite --pretty
    """
    index = build_index()
    record = index.resolve_latest(package, quiet=quiet)
    emit([record], pretty=pretty, columns=RECORD_COLUMNS)
