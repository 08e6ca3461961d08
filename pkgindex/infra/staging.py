"""
Staging area for repository catalogs.

When some other part of the tool has already downloaded a fresh copy of a
repository catalog, it can stage it here. The next fetch of that catalog
consumes the staged copy instead of going to the network; a staged copy is
read once and then deleted. Expiring a cache entry discards any staged
copies for its catalogs so the following fetch is a real one.
"""

import logging
import tempfile
from pathlib import Path
from typing import Iterable, Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)


class StagingArea:
    """Read-once store of catalog text keyed by catalog URL."""

    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory else Path(tempfile.gettempdir()) / 'pkgindex'

    def path_for(self, url: str) -> Path:
        return self.directory / f"repos_{quote(url, safe='')}.packages"

    def stage(self, url: str, text: str) -> Path:
        """Stage catalog text for url, replacing any previous copy."""
        path = self.path_for(url)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')
        logger.debug(f"Staged catalog for {url} at {path}")
        return path

    def take(self, url: str) -> Optional[str]:
        """Return and delete the staged catalog for url, if any."""
        path = self.path_for(url)
        try:
            text = path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable staged catalog {path}: {e}")
            path.unlink(missing_ok=True)
            return None
        path.unlink(missing_ok=True)
        logger.debug(f"Using staged catalog for {url}")
        return text

    def discard(self, urls: Iterable[str]) -> int:
        """Delete staged copies for the given catalog URLs."""
        removed = 0
        for url in urls:
            path = self.path_for(url)
            if path.exists():
                path.unlink(missing_ok=True)
                removed += 1
        if removed:
            logger.debug(f"Discarded {removed} staged catalog(s)")
        return removed
