"""
Infrastructure layer for pkgindex.

Contains abstractions for external systems:
- CranClient: Catalog retrieval from CRAN-style repositories
- StagingArea: Read-once staged catalog copies
- TimeCache: Time-based memoization with single-flight computation

These provide clean interfaces that can be mocked for testing.
"""

from .cran_client import CranClient, CatalogError, contrib_url, parse_packages
from .staging import StagingArea
from .timecache import TimeCache, CacheEntry

__all__ = [
    'CranClient',
    'CatalogError',
    'contrib_url',
    'parse_packages',
    'StagingArea',
    'TimeCache',
    'CacheEntry',
]
