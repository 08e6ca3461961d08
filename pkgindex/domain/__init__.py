"""
Domain layer for pkgindex.

Contains pure domain objects with no I/O or side effects:
- Repository: A named, URL-addressed package repository
- RepositoryIndex: One repository's catalog for one distribution type
- Record: The resolved (package, version, repository, type) answer

These objects are immutable and provide to_dict() for JSONL output.
"""

from .repository import Repository, CRAN_PLACEHOLDER, resolve_repositories
from .index import (
    DistributionType,
    NeedsCompilation,
    PackageRow,
    FetchFailure,
    RepositoryIndex,
)
from .record import Record, build_record
from .version import compare_versions, parse_version

__all__ = [
    'Repository',
    'CRAN_PLACEHOLDER',
    'resolve_repositories',
    'DistributionType',
    'NeedsCompilation',
    'PackageRow',
    'FetchFailure',
    'RepositoryIndex',
    'Record',
    'build_record',
    'compare_versions',
    'parse_version',
]
