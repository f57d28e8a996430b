"""Tests for nextver.versioning.resolver."""

from __future__ import annotations

import re
from pathlib import Path

from nextver.core.result import Err, Ok
from nextver.output.console import MockConsole, Style
from nextver.test.fakes import FakeVcs
from nextver.versioning.cache import CacheEntry, ResolutionCache
from nextver.versioning.resolver import VersionResolver

DEFAULT = re.compile(r"^v(.+)$")


def _resolver(
    vcs: FakeVcs,
    root: Path,
    *,
    by_branch: bool = False,
    console: MockConsole | None = None,
) -> VersionResolver:
    return VersionResolver(
        vcs,
        pattern=DEFAULT,
        cache=ResolutionCache(root),
        console=console or MockConsole(),
        version_by_branch=by_branch,
    )


# =============================================================================
# Whole Repository Tests
# =============================================================================


class TestWholeRepository:
    """Tests for resolution over every tag."""

    def test_highest_tag(self, tmp_path: Path) -> None:
        """The highest version tag wins."""
        vcs = FakeVcs(tags=["v0.001", "v0.002", "v0.010"])
        assert _resolver(vcs, tmp_path).last_version() == Ok("0.010")

    def test_no_tags(self, tmp_path: Path) -> None:
        """No tags means no last version."""
        assert _resolver(FakeVcs(), tmp_path).last_version() == Ok(None)

    def test_malformed_tags_are_skipped(self, tmp_path: Path) -> None:
        """Tags that don't yield a version are ignored."""
        vcs = FakeVcs(tags=["v0.003", "vNEXT", "v1.2-rc1", "nightly"])
        assert _resolver(vcs, tmp_path).last_version() == Ok("0.003")

    def test_does_not_walk_history(self, tmp_path: Path) -> None:
        """Whole-repository mode never walks history or writes the cache."""
        vcs = FakeVcs(tags=["v0.001"], branch_tags=["v0.001"])
        _resolver(vcs, tmp_path).last_version()
        assert "tags_reachable_from_head" not in vcs.calls
        assert not (tmp_path / ".gitnxtver_cache").exists()

    def test_tag_listing_failure_propagates(self, tmp_path: Path) -> None:
        """A git failure listing tags is returned."""
        result = _resolver(FakeVcs(tags_fail=True), tmp_path).last_version()
        assert isinstance(result, Err)
        assert "not a git repository" in result.error.message

    def test_all_versions_queried_once(self, tmp_path: Path) -> None:
        """Tag listing is memoised per resolver."""
        vcs = FakeVcs(tags=["v0.001"])
        resolver = _resolver(vcs, tmp_path)
        resolver.all_versions()
        resolver.all_versions()
        assert vcs.calls["list_all_tags"] == 1

    def test_found_versions_are_logged(self, tmp_path: Path) -> None:
        """Each found version is reported at debug level."""
        console = MockConsole()
        _resolver(FakeVcs(tags=["v0.001", "v0.002"]), tmp_path, console=console).last_version()
        assert console.find("Found version 0.001")
        assert console.count(Style.DIM) == 2


# =============================================================================
# By Branch Tests
# =============================================================================


class TestByBranch:
    """Tests for resolution over tags reachable from HEAD."""

    def test_uses_branch_tags_and_writes_cache(self, tmp_path: Path) -> None:
        """Only ancestry tags count and the result is cached."""
        vcs = FakeVcs(
            tags=["v0.001", "v0.002", "v0.009"],
            branch_tags=["HEAD -> maint", "v0.002", "v0.001"],
            head="commitA",
        )

        result = _resolver(vcs, tmp_path, by_branch=True).last_version()

        assert result == Ok("0.002")
        assert ResolutionCache(tmp_path).get() == CacheEntry("commitA", "0.002")
        assert "list_all_tags" not in vcs.calls

    def test_cache_hit_skips_walk(self, tmp_path: Path) -> None:
        """A cache entry for HEAD avoids the history walk."""
        ResolutionCache(tmp_path).put("commitA", "0.007")
        vcs = FakeVcs(branch_tags=["v0.001"], head="commitA")

        result = _resolver(vcs, tmp_path, by_branch=True).last_version()

        assert result == Ok("0.007")
        assert "tags_reachable_from_head" not in vcs.calls

    def test_stale_cache_is_ignored(self, tmp_path: Path) -> None:
        """A cache entry for another commit is recomputed and replaced."""
        ResolutionCache(tmp_path).put("commitA", "0.007")
        vcs = FakeVcs(branch_tags=["v0.003", "v0.004"], head="commitB")

        result = _resolver(vcs, tmp_path, by_branch=True).last_version()

        assert result == Ok("0.004")
        assert vcs.calls["tags_reachable_from_head"] == 1
        assert vcs.calls["current_commit_id"] == 1
        assert ResolutionCache(tmp_path).get() == CacheEntry("commitB", "0.004")

    def test_no_cache_reads_head_once_after_walk(self, tmp_path: Path) -> None:
        """HEAD is read once, after the walk."""
        vcs = FakeVcs(branch_tags=["v0.001"], head="commitA")
        _resolver(vcs, tmp_path, by_branch=True).last_version()
        assert vcs.calls["current_commit_id"] == 1

    def test_unsupported_walk_falls_back_without_cache_write(self, tmp_path: Path) -> None:
        """An old git falls back to all tags."""
        console = MockConsole()
        vcs = FakeVcs(tags=["v0.001", "v0.005"], branch_tags=None)

        result = _resolver(vcs, tmp_path, by_branch=True, console=console).last_version()

        assert result == Ok("0.005")
        assert ResolutionCache(tmp_path).get() is None
        assert console.find("Unable to walk branch history")
        assert console.has_warning()
        assert not console.has_error()

    def test_no_versions_on_branch_falls_back(self, tmp_path: Path) -> None:
        """A branch without versions falls back with a warning."""
        console = MockConsole()
        vcs = FakeVcs(tags=["v0.004"], branch_tags=["HEAD -> topic"])

        result = _resolver(vcs, tmp_path, by_branch=True, console=console).last_version()

        assert result == Ok("0.004")
        assert console.find("Unable to find version on current branch")
        assert ResolutionCache(tmp_path).get() is None

    def test_nothing_anywhere(self, tmp_path: Path) -> None:
        """No tags anywhere gives None without a warning."""
        console = MockConsole()
        result = _resolver(FakeVcs(), tmp_path, by_branch=True, console=console).last_version()
        assert result == Ok(None)
        assert not console.has_warning()

    def test_unreadable_head_skips_cache_write(self, tmp_path: Path) -> None:
        """Without HEAD nothing is cached."""
        vcs = FakeVcs(branch_tags=["v0.002"], head_fails=True)

        result = _resolver(vcs, tmp_path, by_branch=True).last_version()

        assert result == Ok("0.002")
        assert ResolutionCache(tmp_path).get() is None

    def test_corrupt_cache_is_recomputed(self, tmp_path: Path) -> None:
        """A malformed cache file is a miss."""
        (tmp_path / ".gitnxtver_cache").write_text("garbage", encoding="utf-8")
        vcs = FakeVcs(branch_tags=["v0.002"], head="commitA")

        result = _resolver(vcs, tmp_path, by_branch=True).last_version()

        assert result == Ok("0.002")
        assert ResolutionCache(tmp_path).get() == CacheEntry("commitA", "0.002")

    def test_unparsable_cached_version_for_head_is_recomputed(self, tmp_path: Path) -> None:
        """A cache entry for HEAD whose version doesn't parse is not trusted."""
        (tmp_path / ".gitnxtver_cache").write_text("c0ffee garbage\n", encoding="utf-8")
        vcs = FakeVcs(branch_tags=["v0.002", "v0.003"], head="c0ffee")

        result = _resolver(vcs, tmp_path, by_branch=True).last_version()

        assert result == Ok("0.003")
        assert vcs.calls["tags_reachable_from_head"] == 1
        assert ResolutionCache(tmp_path).get() == CacheEntry("c0ffee", "0.003")
