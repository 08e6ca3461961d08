"""
Source/binary version selection for pkgindex.

Given the best source candidate and the best binary candidate for a
package, decide which one to install. Operator preferences arrive in an
explicit SelectionPolicy; nothing here reads options or the environment.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ..config import ResolverSettings
from ..domain.index import DistributionType, NeedsCompilation, PackageRow
from ..domain.record import Record, build_record
from ..domain.version import compare_versions
from ..exit_codes import PackageUnavailableError

logger = logging.getLogger(__name__)

Candidate = Optional[Tuple[PackageRow, str]]

NEVER_COMPILE = "never"


@dataclass(frozen=True)
class SelectionPolicy:
    """Operator preferences that steer source/binary selection."""
    binary_enabled: bool = True
    check_source: bool = True
    compile_from_source: Optional[str] = None  # None means compiling is allowed
    toolchain_available: bool = True

    @classmethod
    def from_settings(cls, settings: ResolverSettings) -> 'SelectionPolicy':
        return cls(
            binary_enabled="binary" in settings.pkg_types,
            check_source=settings.check_source,
            compile_from_source=settings.compile_from_source,
            toolchain_available=settings.toolchain_available,
        )

    @property
    def can_compile(self) -> bool:
        return self.toolchain_available and self.compile_from_source != NEVER_COMPILE


def _record(candidate: Tuple[PackageRow, str], type: DistributionType) -> Record:
    row, repository = candidate
    return build_record(row, type, repository)


def select(
    package: str,
    source: Candidate,
    binary: Candidate,
    policy: SelectionPolicy,
    repositories: Iterable[str] = (),
) -> Record:
    """
    Choose between the best source and best binary candidate.

    Rules, first match wins:
    1. Neither candidate exists: the package is unavailable.
    2. Binaries are disabled: use the source candidate, if any.
    3. Only one candidate exists: use it.
    4. The binary is at least as new as the source: use the binary.
    5. Source checking is disabled: use the binary.
    6. The source needs compilation and compiling is not possible or not
       wanted: use the binary.
    7. Otherwise use the source.

    Raises:
        PackageUnavailableError: If no usable candidate exists
    """
    types = ("source", "binary") if policy.binary_enabled else ("source",)

    if source is None and binary is None:
        raise PackageUnavailableError(package, types, repositories)

    if not policy.binary_enabled:
        if source is None:
            raise PackageUnavailableError(package, types, repositories)
        return _record(source, DistributionType.SOURCE)

    if source is None:
        return _record(binary, DistributionType.BINARY)
    if binary is None:
        return _record(source, DistributionType.SOURCE)

    src_row, bin_row = source[0], binary[0]
    if compare_versions(bin_row.version, src_row.version) >= 0:
        return _record(binary, DistributionType.BINARY)

    if not policy.check_source:
        return _record(binary, DistributionType.BINARY)

    if src_row.needs_compilation is NeedsCompilation.YES and not policy.can_compile:
        logger.debug(
            f"{package}: source {src_row.version} needs compilation; "
            f"using binary {bin_row.version}"
        )
        return _record(binary, DistributionType.BINARY)

    return _record(source, DistributionType.SOURCE)
