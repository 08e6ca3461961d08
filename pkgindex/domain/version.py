"""
Package version comparison.

R package versions are dotted sequences of non-negative integers, with
'-' also accepted as a separator (e.g. "1.2-3"). Components are compared
numerically and the shorter version is padded with zeros, so "1.9" sorts
before "1.10" and "1.2" equals "1.2.0".
"""

import re
from typing import Tuple

_SEPARATOR = re.compile(r'[^0-9]+')


def parse_version(version: str) -> Tuple[int, ...]:
    """Split a version string into its integer components."""
    parts = [p for p in _SEPARATOR.split(str(version).strip()) if p]
    return tuple(int(p) for p in parts)


def is_valid_version(version: str) -> bool:
    return bool(parse_version(version))


def compare_versions(a: str, b: str) -> int:
    """
    Compare two version strings.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    a_parts = parse_version(a)
    b_parts = parse_version(b)

    # Pad with zeros for comparison
    max_len = max(len(a_parts), len(b_parts))
    a_parts = a_parts + (0,) * (max_len - len(a_parts))
    b_parts = b_parts + (0,) * (max_len - len(b_parts))

    if a_parts < b_parts:
        return -1
    if a_parts > b_parts:
        return 1
    return 0
