"""
Repository metadata service for pkgindex.

Fetches package catalogs from every configured repository and memoizes
the whole batch:
- MetadataFetcher retrieves one repository's catalog and never raises;
  a failed fetch is an empty index carrying a FetchFailure
- MetadataCache runs the per-repository fetches in parallel, reassembles
  them in configured order and caches the batch for a time-to-live
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Hashable, List, Optional, Sequence, Tuple

from ..config import PlatformInfo
from ..domain.index import (
    DistributionType,
    FetchFailure,
    PackageRow,
    RepositoryIndex,
)
from ..domain.repository import Repository
from ..infra.cran_client import CatalogError, CranClient, contrib_url, parse_packages
from ..infra.staging import StagingArea
from ..infra.timecache import TimeCache

logger = logging.getLogger(__name__)

DEFAULT_TTL = 3600


class MetadataFetcher:
    """
    Retrieves one repository's catalog for one distribution type.

    Failures are reported and turned into empty indices so one unreachable
    repository never blocks resolution against the others.
    """

    def __init__(self, client: CranClient, platform: PlatformInfo,
                 staging: Optional[StagingArea] = None):
        self.client = client
        self.platform = platform
        self.staging = staging

    def catalog_url(self, repository: Repository, type: DistributionType) -> Optional[str]:
        return contrib_url(repository.url, type, self.platform)

    def failure(self, repository: Repository, type: DistributionType, reason: str,
                url: Optional[str] = None) -> RepositoryIndex:
        """Report a failed fetch and return the empty index standing in for it."""
        url = url or self.catalog_url(repository, type) or repository.url
        logger.warning(f"FAILED: {repository.name} ({url}): {reason}")
        return RepositoryIndex.failed(FetchFailure(
            repository=repository.name,
            url=url,
            type=DistributionType(type),
            reason=reason,
        ))

    def fetch(self, repository: Repository, type: DistributionType) -> RepositoryIndex:
        type = DistributionType(type)
        url = self.catalog_url(repository, type)
        if url is None:
            logger.debug(f"No {type} catalog for {repository.name} on {self.platform.os}")
            return RepositoryIndex(repository=repository.name, url="", type=type)

        try:
            text = self.staging.take(url) if self.staging else None
            if text is None:
                text = self.client.fetch_text(url)
            records = parse_packages(text)
        except (CatalogError, OSError) as e:
            return self.failure(repository, type, str(e), url=url)

        rows = [row for row in (PackageRow.from_fields(r, url) for r in records) if row]
        index = RepositoryIndex.from_rows(repository.name, url, type, rows)
        logger.debug(f"{repository.name}: {len(index)} {type} packages from {url}")
        return index


class MetadataCache:
    """
    Memoizes per-repository fetch batches keyed by repository set and type.

    Example:
        cache = MetadataCache(fetcher, ttl=3600)
        indices = cache.get_or_fetch_all(repositories, DistributionType.SOURCE)
    """

    def __init__(
        self,
        fetcher: MetadataFetcher,
        ttl: float = DEFAULT_TTL,
        max_workers: int = 5,
        batch_timeout: Optional[float] = None,
        cache: Optional[TimeCache] = None,
    ):
        """
        Initialize MetadataCache.

        Args:
            fetcher: Fetcher used for each repository
            ttl: Seconds a fetched batch stays valid
            max_workers: Maximum concurrent repository fetches
            batch_timeout: Seconds to wait for a batch before treating
                unfinished fetches as failed (None waits for all)
            cache: Memoization backend (a fresh TimeCache by default)
        """
        self.fetcher = fetcher
        self.ttl = ttl
        self.max_workers = max(1, max_workers)
        self.batch_timeout = batch_timeout
        self.cache = cache or TimeCache()

    @staticmethod
    def key_for(repositories: Sequence[Repository], type: DistributionType) -> Hashable:
        return (tuple((r.name, r.url) for r in repositories), DistributionType(type).value)

    def get_or_fetch_all(
        self,
        repositories: Sequence[Repository],
        type: DistributionType,
        ttl: Optional[float] = None,
        quiet: bool = False,
    ) -> Tuple[RepositoryIndex, ...]:
        """
        Return indices aligned with repositories, fetching on miss or expiry.
        """
        repositories = tuple(repositories)
        type = DistributionType(type)
        return self.cache.get_or_compute(
            self.key_for(repositories, type),
            lambda: self.fetch_all(repositories, type, quiet=quiet),
            ttl=self.ttl if ttl is None else ttl,
            on_expire=self._expire,
        )

    def fetch_all(
        self,
        repositories: Sequence[Repository],
        type: DistributionType,
        quiet: bool = False,
    ) -> Tuple[RepositoryIndex, ...]:
        """Fetch every repository in parallel, preserving configured order."""
        repositories = tuple(repositories)
        if not repositories:
            return ()

        if not quiet:
            logger.info(f"Querying repositories for available {type} packages ...")

        slots: List[Optional[RepositoryIndex]] = [None] * len(repositories)
        executor = ThreadPoolExecutor(max_workers=min(self.max_workers, len(repositories)))
        try:
            futures = {
                executor.submit(self.fetcher.fetch, repo, type): i
                for i, repo in enumerate(repositories)
            }
            done, not_done = wait(futures, timeout=self.batch_timeout)

            for future in done:
                i = futures[future]
                try:
                    slots[i] = future.result()
                except Exception as e:
                    slots[i] = self.fetcher.failure(repositories[i], type, str(e) or e.__class__.__name__)

            for future in not_done:
                i = futures[future]
                future.cancel()
                slots[i] = self.fetcher.failure(repositories[i], type, "timed out")
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if not quiet:
            logger.info("Done!")

        return tuple(slots)

    def clear(self) -> None:
        self.cache.clear()

    def _expire(self, key: Hashable) -> None:
        pairs, type = key
        if self.fetcher.staging is None:
            return
        urls = [self.fetcher.catalog_url(Repository(name, url), DistributionType(type))
                for name, url in pairs]
        self.fetcher.staging.discard(u for u in urls if u)
