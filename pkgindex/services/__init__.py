"""
Service layer for pkgindex.

Contains the resolution logic that works over fetched catalogs:
- MetadataFetcher / MetadataCache: Catalog retrieval and memoization
- find_entry / best_entry: Lookup across ordered repository indices
- select / SelectionPolicy: Source-versus-binary decision

Services are the primary API for commands to use.
"""

from .metadata_service import MetadataFetcher, MetadataCache
from .lookup import find_entry, best_entry, make_predicate
from .selector import SelectionPolicy, select

__all__ = [
    'MetadataFetcher',
    'MetadataCache',
    'find_entry',
    'best_entry',
    'make_predicate',
    'SelectionPolicy',
    'select',
]
