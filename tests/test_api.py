"""
Tests for the high-level PackageIndex API, end to end over a fake
transport.
"""

import pytest

from pkgindex import PackageIndex
from pkgindex.domain import DistributionType
from pkgindex.exit_codes import NotFoundError, PackageUnavailableError

from helpers import LINUX, FakeClient, bin_url, catalog, make_settings, src_url

R1 = "https://r1.example.org"
R2 = "https://r2.example.org"
REPOS = {"R1": R1, "R2": R2}


def make_index(catalogs, repos=REPOS, **overrides):
    client = FakeClient(catalogs)
    index = PackageIndex(settings=make_settings(repos, **overrides), client=client)
    return index, client


class TestQueryAll:

    def test_maps_names_in_order(self):
        index, _ = make_index({src_url(R1): catalog(("a", "1.0")), src_url(R2): catalog(("b", "1.0"))})

        catalogs = index.query_all("source")

        assert list(catalogs) == ["R1", "R2"]
        assert "a" in catalogs["R1"]
        assert "b" in catalogs["R2"]

    def test_unreachable_repository_gives_empty_index(self):
        index, _ = make_index({src_url(R2): catalog(("b", "1.0"))})

        catalogs = index.query_all(DistributionType.SOURCE)

        assert len(catalogs["R1"]) == 0
        assert catalogs["R1"].error is not None
        assert "b" in catalogs["R2"]


class TestFindEntry:

    def test_precedence_over_quality(self):
        index, _ = make_index({src_url(R1): catalog(("P", "1.0")), src_url(R2): catalog(("P", "9.9"))})

        row, repo = index.find_entry("P", "source")

        assert (row.version, repo) == ("1.0", "R1")

    def test_repos_restrict_and_reorder(self):
        index, _ = make_index({src_url(R1): catalog(("P", "1.0")), src_url(R2): catalog(("P", "9.9"))})

        row, repo = index.find_entry("P", "source", repos=["R2", "R1"])

        assert repo == "R2"

    def test_unknown_repository_names_ignored(self):
        index, _ = make_index({src_url(R1): catalog(("P", "1.0"))})

        with pytest.raises(NotFoundError) as exc_info:
            index.find_entry("P", "source", repos=["Nope", "R2"])

        assert exc_info.value.repositories == ("R2",)

    def test_version_pin(self):
        index, _ = make_index({src_url(R1): catalog(("P", "1.0")), src_url(R2): catalog(("P", "0.9"))})

        row, repo = index.find_entry("P", "source", predicate="0.9")

        assert repo == "R2"

    def test_record(self):
        index, _ = make_index({bin_url(R1): catalog(("P", "1.0"))})

        record = index.record("P", "binary")

        assert record.type is DistributionType.BINARY
        assert record.repository == "R1"
        assert record.url == bin_url(R1)


class TestResolveLatest:

    def test_newer_binary(self):
        index, _ = make_index({
            src_url(R1): catalog(("P", "1.5", "yes")),
            bin_url(R2): catalog(("P", "2.0")),
        })

        record = index.resolve_latest("P")

        assert (record.type, record.version, record.repository) == (DistributionType.BINARY, "2.0", "R2")

    def test_best_source_across_repositories(self):
        index, _ = make_index({
            src_url(R1): catalog(("P", "1.9", "no")),
            src_url(R2): catalog(("P", "1.10", "no")),
            bin_url(R1): catalog(("P", "1.2")),
        })

        record = index.resolve_latest("P")

        assert (record.type, record.version, record.repository) == (DistributionType.SOURCE, "1.10", "R2")

    def test_never_compile_falls_back_to_binary(self):
        catalogs = {src_url(R1): catalog(("P", "2.0", "yes")), bin_url(R1): catalog(("P", "1.5"))}

        never, _ = make_index(catalogs, compile_from_source="never")
        allowed, _ = make_index(catalogs, compile_from_source="always", toolchain_available=True)

        assert (never.resolve_latest("P").type, never.resolve_latest("P").version) == (DistributionType.BINARY, "1.5")
        assert (allowed.resolve_latest("P").type, allowed.resolve_latest("P").version) == (DistributionType.SOURCE, "2.0")

    def test_unavailable(self):
        index, _ = make_index({src_url(R1): catalog(("other", "1.0"))})

        with pytest.raises(PackageUnavailableError) as exc_info:
            index.resolve_latest("P")

        assert exc_info.value.package == "P"
        assert exc_info.value.repositories == ("R1", "R2")

    def test_repeated_resolution_reuses_catalogs(self):
        index, client = make_index({src_url(R1): catalog(("P", "1.0")), bin_url(R1): catalog(("P", "1.0"))})

        first = index.resolve_latest("P")
        calls = len(client.calls)
        second = index.resolve_latest("P")

        assert first == second
        assert len(client.calls) == calls == 4

    def test_source_only_platform_never_fetches_binaries(self):
        index, client = make_index({src_url(R1): catalog(("P", "1.0"))}, platform=LINUX, pkg_type="source")

        record = index.resolve_latest("P")

        assert record.type is DistributionType.SOURCE
        assert all("/bin/" not in url for url in client.calls)

    def test_clear_cache_forces_refetch(self):
        index, client = make_index({src_url(R1): catalog(("P", "1.0"))}, pkg_type="source")

        index.resolve_latest("P")
        index.clear_cache()
        index.resolve_latest("P")

        assert client.calls.count(src_url(R1)) == 2
