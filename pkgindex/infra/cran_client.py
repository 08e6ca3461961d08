"""
CRAN-style repository client for pkgindex.

Knows where a repository keeps its catalogs and how to read them:
- Source catalogs live under <repo>/src/contrib
- Binary catalogs live under platform-specific bin/ paths
- Catalogs are DCF (Debian Control File) documents named PACKAGES,
  optionally gzip-compressed as PACKAGES.gz

Repositories may be remote (http/https, fetched with requests) or local
(file:// URLs or plain directory paths).
"""

import gzip
import logging
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import unquote, urlparse

import requests

from ..config import PlatformInfo
from ..domain.index import DistributionType

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when a catalog cannot be retrieved or parsed."""


def contrib_url(repo_url: str, type: DistributionType, platform: PlatformInfo) -> Optional[str]:
    """
    Build the catalog location for a repository and distribution type.

    Returns:
        The contrib URL, or None when the platform has no binary catalogs
    """
    base = repo_url.rstrip('/')
    if DistributionType(type) is DistributionType.SOURCE:
        return f"{base}/src/contrib"

    if platform.os == 'windows':
        return f"{base}/bin/windows/contrib/{platform.r_version}"
    if platform.os == 'macos':
        if platform.arch in ('arm64', 'aarch64'):
            return f"{base}/bin/macosx/big-sur-arm64/contrib/{platform.r_version}"
        return f"{base}/bin/macosx/contrib/{platform.r_version}"
    return None


def parse_packages(content: str) -> List[Dict[str, str]]:
    """Parse a PACKAGES document into a list of field dictionaries.

    DCF format:
    - Field: Value
    - Continuation lines start with whitespace
    - Blank lines separate records
    """
    records: List[Dict[str, str]] = []
    current: Dict[str, str] = {}
    current_field = None
    current_value: List[str] = []

    def finish_field():
        if current_field:
            current[current_field] = ' '.join(current_value).strip()

    for line in content.splitlines():
        if not line.strip():
            finish_field()
            if current:
                records.append(current)
            current = {}
            current_field = None
            current_value = []
        elif not line[0].isspace():
            finish_field()
            current_field = None
            if ':' in line:
                field, _, value = line.partition(':')
                current_field = field.strip()
                current_value = [value.strip()]
        elif current_field:
            current_value.append(line.strip())

    finish_field()
    if current:
        records.append(current)

    return records


def _local_path(url: str) -> Optional[Path]:
    parsed = urlparse(url)
    if parsed.scheme == 'file':
        return Path(unquote(parsed.path))
    if not parsed.scheme or len(parsed.scheme) == 1:
        # Bare path (or a Windows drive letter)
        return Path(url)
    return None


class CranClient:
    """
    Retrieves and parses PACKAGES catalogs.

    Example:
        client = CranClient(timeout=10)
        records = client.fetch_packages("https://cloud.r-project.org/src/contrib")
    """

    CATALOG_FILES = ('PACKAGES.gz', 'PACKAGES')

    def __init__(self, timeout: float = 10, session: Optional[requests.Session] = None):
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_text(self, url: str) -> str:
        """
        Retrieve the raw catalog text for a contrib URL.

        Raises:
            CatalogError: If no catalog could be read
        """
        local = _local_path(url)
        if local is not None:
            return self._read_local(local)
        return self._read_remote(url)

    def fetch_packages(self, url: str) -> List[Dict[str, str]]:
        """Retrieve and parse the catalog at a contrib URL."""
        return parse_packages(self.fetch_text(url))

    def _read_local(self, directory: Path) -> str:
        for name in self.CATALOG_FILES:
            path = directory / name
            if not path.exists():
                continue
            try:
                data = path.read_bytes()
                return self._decode(name, data)
            except (OSError, EOFError, UnicodeDecodeError) as e:
                raise CatalogError(f"Cannot read {path}: {e}") from e
        raise CatalogError(f"No PACKAGES file in {directory}")

    def _read_remote(self, url: str) -> str:
        last_error = None
        for name in self.CATALOG_FILES:
            target = f"{url.rstrip('/')}/{name}"
            try:
                response = self.session.get(target, timeout=self.timeout)
            except requests.RequestException as e:
                # Connection problems will not improve with another file name
                raise CatalogError(f"Error fetching {target}: {e}") from e

            if response.status_code == 200:
                try:
                    return self._decode(name, response.content)
                except (OSError, EOFError, UnicodeDecodeError) as e:
                    raise CatalogError(f"Cannot decode {target}: {e}") from e

            logger.debug(f"{target} returned status {response.status_code}")
            last_error = f"{target} returned status {response.status_code}"

        raise CatalogError(last_error or f"No PACKAGES file at {url}")

    @staticmethod
    def _decode(name: str, data: bytes) -> str:
        if name.endswith('.gz'):
            data = gzip.decompress(data)
        return data.decode('utf-8')
