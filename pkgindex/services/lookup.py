"""
Package lookup across repository indices.

Two ways of picking a row for a package:
- find_entry(): first repository (in configured order) whose row satisfies
  a predicate. Repository precedence beats version quality.
- best_entry(): highest version across all repositories, earliest
  repository winning ties.
"""

from typing import Callable, Optional, Sequence, Tuple, Union

from ..domain.index import DistributionType, PackageRow, RepositoryIndex
from ..domain.version import compare_versions
from ..exit_codes import NotFoundError

Predicate = Callable[[PackageRow], bool]
Filter = Union[Predicate, str, None]


def make_predicate(filter: Filter) -> Predicate:
    """
    Normalize a filter into a row predicate.

    None accepts every row; a string pins the exact Version.
    """
    if filter is None:
        return lambda row: True
    if isinstance(filter, str):
        version = filter
        return lambda row: row.version == version
    return filter


def find_entry(
    indices: Sequence[RepositoryIndex],
    package: str,
    filter: Filter = None,
    type: Union[DistributionType, str] = DistributionType.SOURCE,
) -> Tuple[PackageRow, str]:
    """
    Find the first row for package, scanning indices in order.

    Args:
        indices: Repository indices in precedence order
        package: Package name
        filter: Predicate on the row, or an exact version string
        type: Distribution type, used when reporting a miss

    Returns:
        (row, repository_name) from the first satisfying repository

    Raises:
        NotFoundError: If no index has a satisfying row
    """
    predicate = make_predicate(filter)

    for index in indices:
        row = index.get(package)
        if row is not None and predicate(row):
            return row, index.repository

    raise NotFoundError(package, DistributionType(type).value,
                        [index.repository for index in indices])


def best_entry(
    indices: Sequence[RepositoryIndex],
    package: str,
) -> Optional[Tuple[PackageRow, str]]:
    """Return the highest-versioned row for package, or None if absent."""
    best: Optional[Tuple[PackageRow, str]] = None
    for index in indices:
        row = index.get(package)
        if row is None:
            continue
        if best is None or compare_versions(row.version, best[0].version) > 0:
            best = (row, index.repository)
    return best
