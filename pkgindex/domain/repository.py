"""
Repository domain object for pkgindex.

A Repository is a named, URL-addressed catalog of installable packages.
The configured order of repositories is their lookup precedence.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Tuple

# Reserved URL meaning "use the default CRAN mirror"
CRAN_PLACEHOLDER = "@CRAN@"


@dataclass(frozen=True)
class Repository:
    """A configured package repository."""
    name: str
    url: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'url': self.url,
        }


def resolve_repositories(repos: Mapping[str, str], mirror: str) -> Tuple[Repository, ...]:
    """
    Turn an ordered ``{name: url}`` mapping into Repository objects.

    The placeholder ``@CRAN@`` is replaced with ``mirror`` and trailing
    slashes are stripped. Order is preserved.
    """
    result = []
    for name, url in repos.items():
        url = str(url).strip()
        if url == CRAN_PLACEHOLDER:
            url = mirror
        result.append(Repository(name=str(name), url=url.rstrip('/')))
    return tuple(result)
