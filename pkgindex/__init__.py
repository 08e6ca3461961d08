"""
pkgindex - Package metadata resolution for CRAN-style repositories.

pkgindex answers one question: which exact (version, repository,
distribution type) record should be used for a package right now, given
one or more configured repositories that may each publish a source and a
binary catalog.

Quick Start:
    import pkgindex

    index = pkgindex.PackageIndex()

    # Catalogs per repository, in configured order
    catalogs = index.query_all("source")

    # First repository offering the package
    row, repo = index.find_entry("jsonlite", "source")

    # Newest version, choosing between source and binary
    record = index.resolve_latest("jsonlite")

Domain Objects:
    Repository - Named, URL-addressed package repository
    RepositoryIndex - One repository's catalog for one distribution type
    Record - The resolved answer, with provenance

Errors:
    NotFoundError - No searched repository offers the package
    PackageUnavailableError - Neither a source nor a binary candidate exists
"""

__version__ = "0.3.0"

# High-level API
from .api import PackageIndex, create

# Domain objects
from .domain import (
    Repository,
    RepositoryIndex,
    PackageRow,
    Record,
    DistributionType,
    NeedsCompilation,
    FetchFailure,
    compare_versions,
)

# Services (for advanced use)
from .services import (
    MetadataFetcher,
    MetadataCache,
    SelectionPolicy,
)

# Errors
from .exit_codes import (
    ResolutionError,
    NotFoundError,
    PackageUnavailableError,
    ConfigError,
)

# Configuration
from .config import load_config, load_settings, ResolverSettings

__all__ = [
    # Version
    "__version__",
    # High-level API
    "PackageIndex",
    "create",
    # Domain objects
    "Repository",
    "RepositoryIndex",
    "PackageRow",
    "Record",
    "DistributionType",
    "NeedsCompilation",
    "FetchFailure",
    "compare_versions",
    # Services
    "MetadataFetcher",
    "MetadataCache",
    "SelectionPolicy",
    # Errors
    "ResolutionError",
    "NotFoundError",
    "PackageUnavailableError",
    "ConfigError",
    # Configuration
    "load_config",
    "load_settings",
    "ResolverSettings",
]
