"""
Resolution record for pkgindex.

A Record is the final (package, version, repository, type) answer handed
to downstream install logic. Records are only built by build_record().
"""

from dataclasses import dataclass
from typing import Any, Dict

from .index import DistributionType, PackageRow

REPOSITORY_ORIGIN = "Repository"


@dataclass(frozen=True)
class Record:
    """Immutable resolution result with provenance."""
    package: str
    version: str
    origin: str
    repository: str  # repository name
    type: DistributionType
    url: str  # catalog URL the package is served from

    def to_dict(self) -> Dict[str, Any]:
        return {
            'package': self.package,
            'version': self.version,
            'origin': self.origin,
            'repository': self.repository,
            'type': self.type.value,
            'url': self.url,
        }


def build_record(row: PackageRow, type: DistributionType, repository_name: str) -> Record:
    return Record(
        package=row.package,
        version=row.version,
        origin=REPOSITORY_ORIGIN,
        repository=repository_name or "",
        type=DistributionType(type),
        url=row.repository,
    )
