"""
Shared helpers for pkgindex tests.

FakeClient stands in for CranClient: it serves catalog text from a dict
keyed by contrib URL, counts calls, and can be told to fail or stall.
"""

import threading
import time

from pkgindex.config import PlatformInfo, ResolverSettings
from pkgindex.domain import resolve_repositories
from pkgindex.infra import CatalogError

WINDOWS = PlatformInfo(os='windows', arch='x86_64', r_version='4.4')
LINUX = PlatformInfo(os='linux', arch='x86_64', r_version='4.4')


def src_url(repo_url):
    return f"{repo_url}/src/contrib"


def bin_url(repo_url):
    return f"{repo_url}/bin/windows/contrib/4.4"


def catalog(*entries):
    """Build PACKAGES text from (package, version[, needs_compilation]) tuples."""
    stanzas = []
    for entry in entries:
        package, version = entry[0], entry[1]
        lines = [f"Package: {package}", f"Version: {version}"]
        if len(entry) > 2:
            lines.append(f"NeedsCompilation: {entry[2]}")
        stanzas.append("\n".join(lines))
    return "\n\n".join(stanzas) + "\n"


class FakeClient:
    def __init__(self, catalogs=None, delays=None, errors=None):
        self.catalogs = dict(catalogs or {})
        self.delays = dict(delays or {})
        self.errors = dict(errors or {})
        self.calls = []
        self._lock = threading.Lock()

    def fetch_text(self, url):
        with self._lock:
            self.calls.append(url)
        delay = self.delays.get(url)
        if delay:
            time.sleep(delay)
        if url in self.errors:
            raise self.errors[url]
        if url not in self.catalogs:
            raise CatalogError(f"No PACKAGES file at {url}")
        return self.catalogs[url]


def make_settings(repos, platform=WINDOWS, **overrides):
    values = dict(
        repositories=resolve_repositories(repos, mirror="https://cloud.r-project.org"),
        platform=platform,
        pkg_type="both",
        cache_ttl=3600,
        check_source=True,
        compile_from_source=None,
        toolchain_available=True,
        timeout_seconds=5,
        max_workers=4,
    )
    values.update(overrides)
    return ResolverSettings(**values)
