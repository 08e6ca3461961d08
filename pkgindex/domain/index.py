"""
Repository index domain objects for pkgindex.

A RepositoryIndex is one repository's catalog for one distribution type:
a mapping from package name to a PackageRow. Indices are produced fresh
by each fetch and never mutated afterwards. An empty index is a valid
state, either because the repository publishes no such catalog or
because the fetch failed (in which case ``error`` is set).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional

from .version import compare_versions, is_valid_version

logger = logging.getLogger(__name__)


class DistributionType(str, Enum):
    """Kind of catalog a repository publishes."""
    SOURCE = "source"
    BINARY = "binary"

    def __str__(self) -> str:
        return self.value


class NeedsCompilation(str, Enum):
    """Whether a source package needs a build toolchain to install."""
    YES = "yes"
    NO = "no"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'NeedsCompilation':
        if value is None:
            return cls.UNKNOWN
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class PackageRow:
    """One package entry in a repository catalog."""
    package: str
    version: str
    needs_compilation: NeedsCompilation = NeedsCompilation.UNKNOWN
    repository: str = ""  # URL of the catalog the row came from

    @classmethod
    def from_fields(cls, fields: Mapping[str, str], repository: str) -> Optional['PackageRow']:
        """
        Build a row from parsed catalog fields.

        Returns None when the stanza has no package name or no usable
        version.
        """
        package = (fields.get('Package') or '').strip()
        version = (fields.get('Version') or '').strip()
        if not package or not is_valid_version(version):
            logger.debug(f"Skipping catalog entry without usable Package/Version: {dict(fields)}")
            return None

        return cls(
            package=package,
            version=version,
            needs_compilation=NeedsCompilation.parse(fields.get('NeedsCompilation')),
            repository=repository,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'package': self.package,
            'version': self.version,
            'needs_compilation': self.needs_compilation.value,
            'repository': self.repository,
        }


@dataclass(frozen=True)
class FetchFailure:
    """Why a repository catalog could not be retrieved."""
    repository: str
    url: str
    type: DistributionType
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'repository': self.repository,
            'url': self.url,
            'type': self.type.value,
            'reason': self.reason,
        }


@dataclass(frozen=True)
class RepositoryIndex:
    """Immutable package table for one repository and distribution type."""
    repository: str
    url: str
    type: DistributionType
    rows: Mapping[str, PackageRow] = field(default_factory=dict)
    error: Optional[FetchFailure] = None

    def __post_init__(self):
        object.__setattr__(self, 'rows', MappingProxyType(dict(self.rows)))

    @classmethod
    def from_rows(cls, repository: str, url: str, type: DistributionType,
                  rows: Iterable[PackageRow]) -> 'RepositoryIndex':
        """Build an index, keeping the highest version of duplicated packages."""
        table: Dict[str, PackageRow] = {}
        for row in rows:
            current = table.get(row.package)
            if current is None or compare_versions(row.version, current.version) > 0:
                table[row.package] = row
        return cls(repository=repository, url=url, type=type, rows=table)

    @classmethod
    def failed(cls, failure: FetchFailure) -> 'RepositoryIndex':
        return cls(repository=failure.repository, url=failure.url,
                   type=failure.type, error=failure)

    @property
    def ok(self) -> bool:
        return self.error is None

    def get(self, package: str) -> Optional[PackageRow]:
        return self.rows.get(package)

    def __contains__(self, package: object) -> bool:
        return package in self.rows

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[PackageRow]:
        return iter(self.rows.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'repository': self.repository,
            'url': self.url,
            'type': self.type.value,
            'packages': len(self.rows),
            'status': 'ok' if self.ok else 'failed',
            'error': self.error.reason if self.error else None,
        }
