"""Tests for package lookup across repository indices."""

import pytest

from pkgindex.domain import DistributionType, PackageRow, RepositoryIndex
from pkgindex.exit_codes import NOT_FOUND, NotFoundError
from pkgindex.services.lookup import best_entry, find_entry, make_predicate


def index(name, *rows, type=DistributionType.SOURCE):
    url = f"https://{name.lower()}.example.org/src/contrib"
    return RepositoryIndex.from_rows(
        name, url, type,
        [PackageRow(package, version, repository=url) for package, version in rows],
    )


class TestFindEntry:

    def test_first_repository_wins_over_higher_version(self):
        indices = [index("R1", ("P", "1.0")), index("R2", ("P", "9.9"))]

        row, repo = find_entry(indices, "P")

        assert repo == "R1"
        assert row.version == "1.0"

    def test_skips_repositories_without_package(self):
        indices = [index("R1", ("other", "1.0")), index("R2", ("P", "2.0"))]

        row, repo = find_entry(indices, "P")

        assert repo == "R2"

    def test_predicate_falls_through_to_later_repository(self):
        indices = [index("R1", ("P", "1.0")), index("R2", ("P", "2.0")), index("R3", ("P", "2.0"))]

        row, repo = find_entry(indices, "P", lambda r: r.version == "2.0")

        assert repo == "R2"

    def test_version_string_filter(self):
        indices = [index("R1", ("P", "1.0")), index("R2", ("P", "1.5"))]

        row, repo = find_entry(indices, "P", "1.5")

        assert (row.version, repo) == ("1.5", "R2")

    def test_empty_index_is_skipped(self):
        indices = [index("R1"), index("R2", ("P", "1.0"))]
        assert find_entry(indices, "P")[1] == "R2"

    def test_not_found_reports_searched_repositories(self):
        indices = [index("R1", ("P", "1.0")), index("R2")]

        with pytest.raises(NotFoundError) as exc_info:
            find_entry(indices, "P", "3.0", type="binary")

        err = exc_info.value
        assert err.package == "P"
        assert err.type == "binary"
        assert err.repositories == ("R1", "R2")
        assert err.exit_code == NOT_FOUND
        assert "failed to find binary for package P" in str(err)

    def test_not_found_with_no_indices(self):
        with pytest.raises(NotFoundError) as exc_info:
            find_entry([], "P")
        assert exc_info.value.repositories == ()


class TestMakePredicate:

    def test_default_accepts_everything(self):
        assert make_predicate(None)(PackageRow("P", "0.0.1"))

    def test_callable_passed_through(self):
        pred = lambda row: False
        assert make_predicate(pred) is pred


class TestBestEntry:

    def test_highest_version_numerically(self):
        indices = [index("R1", ("P", "1.9")), index("R2", ("P", "1.10")), index("R3", ("P", "1.2"))]

        row, repo = best_entry(indices, "P")

        assert (row.version, repo) == ("1.10", "R2")

    def test_tie_goes_to_earlier_repository(self):
        indices = [index("R1", ("P", "1.2")), index("R2", ("P", "1.2.0"))]

        row, repo = best_entry(indices, "P")

        assert repo == "R1"

    def test_absent(self):
        assert best_entry([index("R1", ("other", "1.0"))], "P") is None
        assert best_entry([], "P") is None
