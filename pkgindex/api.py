"""
High-level Python API for pkgindex.

Example:
    import pkgindex

    # Create instance (uses config defaults)
    index = pkgindex.PackageIndex()

    # Per-repository catalogs, in configured order
    for name, catalog in index.query_all("source").items():
        print(name, len(catalog))

    # First repository that has the package
    row, repo = index.find_entry("jsonlite", "source")

    # Pin an exact version
    row, repo = index.find_entry("jsonlite", "source", predicate="1.8.8")

    # Which record should be installed right now?
    record = index.resolve_latest("jsonlite")
    print(record.version, record.type, record.repository)
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
import logging

from .config import ResolverSettings, load_settings
from .domain import DistributionType, PackageRow, Record, Repository, RepositoryIndex, build_record
from .infra import CranClient, StagingArea, TimeCache
from .services import (
    MetadataCache,
    MetadataFetcher,
    SelectionPolicy,
    best_entry,
    find_entry,
    select,
)
from .services.lookup import Filter

logger = logging.getLogger(__name__)

TypeLike = Union[DistributionType, str]


class PackageIndex:
    """
    Resolves packages against the configured repositories.

    Catalog fetches are memoized for the configured time-to-live, so
    repeated lookups within a process reuse the same snapshot.
    """

    def __init__(
        self,
        settings: Optional[ResolverSettings] = None,
        config: Optional[Dict[str, Any]] = None,
        client: Optional[CranClient] = None,
        staging: Optional[StagingArea] = None,
        cache: Optional[TimeCache] = None,
        metadata: Optional[MetadataCache] = None,
    ):
        """
        Initialize PackageIndex.

        Args:
            settings: Resolved settings (built from config when None)
            config: Full config dict (loaded from file when None)
            client: Catalog transport (CranClient by default)
            staging: Staged catalog store (temp directory by default)
            cache: Memoization backend shared between instances
            metadata: Fully built MetadataCache, overriding the above
        """
        self.settings = settings or load_settings(config)

        if metadata is None:
            fetcher = MetadataFetcher(
                client=client or CranClient(timeout=self.settings.timeout_seconds),
                platform=self.settings.platform,
                staging=staging or StagingArea(self.settings.staging_dir),
            )
            metadata = MetadataCache(
                fetcher,
                ttl=self.settings.cache_ttl,
                max_workers=self.settings.max_workers,
                cache=cache,
            )
        self.metadata = metadata
        self.policy = SelectionPolicy.from_settings(self.settings)

    @property
    def repositories(self) -> Tuple[Repository, ...]:
        return self.settings.repositories

    def indices(self, type: TypeLike, quiet: bool = False) -> Tuple[RepositoryIndex, ...]:
        """Catalogs for every configured repository, aligned with repositories."""
        return self.metadata.get_or_fetch_all(self.repositories, DistributionType(type), quiet=quiet)

    def query_all(self, type: TypeLike = DistributionType.SOURCE,
                  quiet: bool = False) -> Dict[str, RepositoryIndex]:
        """Map each repository name to its catalog, in configured order."""
        indices = self.indices(type, quiet=quiet)
        return {repo.name: index for repo, index in zip(self.repositories, indices)}

    def find_entry(
        self,
        package: str,
        type: TypeLike = DistributionType.SOURCE,
        repos: Optional[Iterable[str]] = None,
        predicate: Filter = None,
        quiet: bool = False,
    ) -> Tuple[PackageRow, str]:
        """
        Find the first repository offering package.

        Args:
            package: Package name
            type: source or binary
            repos: Repository names to search, in this order (all by default)
            predicate: Row predicate, or an exact version string

        Returns:
            (row, repository_name)

        Raises:
            NotFoundError: If no searched repository satisfies the predicate
        """
        type = DistributionType(type)
        catalogs = self.query_all(type, quiet=quiet)
        if repos is None:
            selected = list(catalogs.values())
        else:
            selected = [catalogs[name] for name in repos if name in catalogs]
        return find_entry(selected, package, predicate, type=type)

    def record(
        self,
        package: str,
        type: TypeLike = DistributionType.SOURCE,
        version: Optional[str] = None,
        repos: Optional[Iterable[str]] = None,
    ) -> Record:
        """Build the record for the first matching entry."""
        type = DistributionType(type)
        row, name = self.find_entry(package, type, repos=repos, predicate=version, quiet=True)
        return build_record(row, type, name)

    def latest(self, package: str, type: TypeLike,
               quiet: bool = True) -> Optional[Tuple[PackageRow, str]]:
        """Highest version of package across all repositories of one type."""
        return best_entry(self.indices(type, quiet=quiet), package)

    def resolve_latest(self, package: str, quiet: bool = True) -> Record:
        """
        Decide which record to use for the newest available package.

        Raises:
            PackageUnavailableError: If no repository offers the package
        """
        source = self.latest(package, DistributionType.SOURCE, quiet=quiet)
        binary = None
        if self.policy.binary_enabled:
            binary = self.latest(package, DistributionType.BINARY, quiet=quiet)

        record = select(package, source, binary, self.policy,
                        repositories=self.repository_names())
        logger.debug(f"Resolved {package} to {record.version} ({record.type}) from {record.repository}")
        return record

    def repository_names(self) -> List[str]:
        return [repo.name for repo in self.repositories]

    def clear_cache(self) -> None:
        self.metadata.clear()


def create(config: Optional[Dict[str, Any]] = None, **kwargs) -> PackageIndex:
    """Create a PackageIndex from a config dict (or the config file)."""
    return PackageIndex(config=config, **kwargs)
