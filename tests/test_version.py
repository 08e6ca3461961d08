"""Tests for package version comparison."""

import pytest

from pkgindex.domain.version import compare_versions, is_valid_version, parse_version


class TestParseVersion:

    def test_dotted(self):
        assert parse_version("1.2.3") == (1, 2, 3)

    def test_dash_separator(self):
        """R versions often use '-' before the last component."""
        assert parse_version("1.2-3") == (1, 2, 3)

    def test_surrounding_whitespace(self):
        assert parse_version(" 4.0 ") == (4, 0)

    def test_no_digits(self):
        assert parse_version("abc") == ()
        assert not is_valid_version("")
        assert is_valid_version("0.1")


class TestCompareVersions:

    def test_numeric_not_lexicographic(self):
        assert compare_versions("1.9", "1.10") < 0
        assert compare_versions("1.10", "1.9") > 0

    def test_padding(self):
        assert compare_versions("1.2", "1.2.0") == 0
        assert compare_versions("1.2.0.0", "1.2") == 0

    def test_longer_is_greater_when_extra_nonzero(self):
        assert compare_versions("2.0.1", "2.0") > 0

    def test_equal(self):
        assert compare_versions("3.4.5", "3.4.5") == 0

    @pytest.mark.parametrize("a,b", [
        ("1.2-3", "1.2.3"),
        ("0.9-1", "0.9.1"),
    ])
    def test_mixed_separators(self, a, b):
        assert compare_versions(a, b) == 0

    def test_major_dominates(self):
        assert compare_versions("2.0", "1.99.99") > 0
