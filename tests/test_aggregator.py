"""Tests for derived library views."""

from collections import Counter
from datetime import datetime

import pytest

from steam_library.aggregator import (
    apply_sorting,
    categorize_by_playtime,
    compute_dashboard,
    compute_detailed_stats,
    sort_by_name,
    sort_by_playtime,
)
from steam_library.models import LibraryItem


def make_item(app_id, playtime, name=None):
    return LibraryItem(
        app_id=str(app_id),
        name=name or f"Game {app_id}",
        playtime_forever=playtime,
    )


@pytest.fixture
def sample_items():
    """Small library in Steam's order."""
    return [
        make_item(10, 0, "Half-Life"),
        make_item(20, 120, "Team Fortress Classic"),
        make_item(30, 1500, "Day of Defeat"),
    ]


@pytest.fixture
def larger_library():
    """Library with ties and unplayed games."""
    return [
        make_item(400, 50, "Portal"),
        make_item(220, 300, "Half-Life 2"),
        make_item(570, 0, "Dota 2"),
        make_item(730, 300, "Counter-Strike 2"),
        make_item(620, 2000, "Portal 2"),
        make_item(8930, 181, "Civilization V"),
        make_item(240, 0, "Counter-Strike: Source"),
        make_item(1091500, 1200, "Cyberpunk 2077"),
        make_item(292030, 1201, "The Witcher 3"),
        make_item(4000, 180, "Garry's Mod"),
    ]


def ids(items):
    return [item.app_id for item in items]


class TestSorting:
    """Tests for sort orders."""

    def test_sort_by_playtime_descending(self, larger_library):
        """Playtime order is non-increasing and a permutation of the input."""
        result = sort_by_playtime(larger_library)
        playtimes = [item.playtime_forever for item in result]
        assert playtimes == sorted(playtimes, reverse=True)
        assert Counter(ids(result)) == Counter(ids(larger_library))

    def test_sort_by_playtime_stable(self, larger_library):
        """Equal playtimes keep their input order."""
        result = sort_by_playtime(larger_library)
        tied = [item.app_id for item in result if item.playtime_forever == 300]
        assert tied == ["220", "730"]

    def test_sort_by_name_ascending(self, larger_library):
        """Name order is non-decreasing and a permutation of the input."""
        result = sort_by_name(larger_library)
        names = [item.name for item in result]
        assert names == sorted(names)
        assert Counter(ids(result)) == Counter(ids(larger_library))

    def test_sort_by_name_stable(self):
        """Equal names keep their input order."""
        items = [make_item(2, 0, "Same"), make_item(1, 0, "Same"), make_item(3, 0, "Another")]
        assert ids(sort_by_name(items)) == ["3", "2", "1"]

    def test_sort_does_not_mutate_input(self, sample_items):
        """Sorting returns a new list."""
        before = list(sample_items)
        sort_by_playtime(sample_items)
        sort_by_name(sample_items)
        assert sample_items == before

    def test_apply_sorting_name(self, sample_items):
        """'name' selects name order, case-insensitively."""
        assert ids(apply_sorting(sample_items, "NAME")) == ["30", "10", "20"]

    def test_apply_sorting_default(self, sample_items):
        """Missing selector uses playtime order."""
        assert ids(apply_sorting(sample_items, None)) == ["30", "20", "10"]

    def test_apply_sorting_unknown_falls_back(self, sample_items):
        """Unknown selectors fall back to playtime order."""
        assert ids(apply_sorting(sample_items, "rating")) == ["30", "20", "10"]


class TestDashboard:
    """Tests for the dashboard summary."""

    def test_empty_library(self):
        """Empty input gives a zeroed summary."""
        summary = compute_dashboard([])
        assert summary.total_games == 0
        assert summary.total_minutes == 0
        assert summary.total_hours == 0.0
        assert summary.top5_most_played == []
        assert summary.most_recent_game is None
        assert summary.generated_at

    def test_example_library(self, sample_items):
        """Totals, top played and newest game for a small library."""
        summary = compute_dashboard(sample_items)
        assert summary.total_games == 3
        assert summary.total_minutes == 1620
        assert summary.total_hours == 27.0
        assert ids(summary.top5_most_played) == ["30", "20"]
        assert summary.most_recent_game.app_id == "30"

    def test_top5_limit_and_order(self, larger_library):
        """Top played holds at most five games, most played first."""
        summary = compute_dashboard(larger_library)
        assert ids(summary.top5_most_played) == ["620", "292030", "1091500", "220", "730"]

    def test_top5_excludes_unplayed(self):
        """Unplayed games never appear in top played."""
        items = [make_item(1, 0), make_item(2, 10), make_item(3, 0)]
        assert ids(compute_dashboard(items).top5_most_played) == ["2"]

    def test_most_recent_numeric_comparison(self):
        """Newest game compares app ids as numbers."""
        items = [make_item(999, 5), make_item(1000, 0), make_item(50, 0)]
        assert compute_dashboard(items).most_recent_game.app_id == "1000"

    def test_total_hours_rounded(self):
        """Total hours is rounded to one decimal."""
        summary = compute_dashboard([make_item(1, 100)])
        assert summary.total_hours == 1.7

    def test_generated_at_iso(self, sample_items):
        """Timestamp is an ISO-8601 local date-time."""
        now = datetime(2025, 12, 12, 10, 30, 0)
        summary = compute_dashboard(sample_items, now=now)
        assert summary.generated_at == "2025-12-12T10:30:00"

    def test_idempotent(self, larger_library):
        """Repeated calls give the same result."""
        now = datetime(2025, 12, 12, 10, 30, 0)
        assert compute_dashboard(larger_library, now=now) == compute_dashboard(
            larger_library, now=now
        )


class TestDetailedStats:
    """Tests for detailed statistics."""

    def test_empty_library(self):
        """Empty input gives zero counts."""
        stats = compute_detailed_stats([])
        assert stats.total_games == 0
        assert stats.games_with_playtime == 0
        assert stats.games_never_played == 0
        assert stats.average_playtime == 0.0
        assert stats.longest_session is None

    def test_example_library(self, sample_items):
        """Average covers played games only."""
        stats = compute_detailed_stats(sample_items)
        assert stats.total_games == 3
        assert stats.games_with_playtime == 2
        assert stats.games_never_played == 1
        assert stats.average_playtime == 13.5
        assert stats.longest_session.app_id == "30"

    def test_all_unplayed(self):
        """All unplayed gives a zero average and no longest session."""
        stats = compute_detailed_stats([make_item(1, 0), make_item(2, 0)])
        assert stats.games_never_played == 2
        assert stats.games_never_played == stats.total_games
        assert stats.average_playtime == 0.0
        assert stats.longest_session is None

    def test_idempotent(self, larger_library):
        """Repeated calls give the same result."""
        assert compute_detailed_stats(larger_library) == compute_detailed_stats(larger_library)


class TestCategories:
    """Tests for playtime categorization."""

    def test_empty_library(self):
        """Empty input still has all four buckets."""
        buckets = categorize_by_playtime([])
        assert buckets.to_dict() == {
            "neverPlayed": [],
            "casual": [],
            "regular": [],
            "hardcore": [],
        }

    @pytest.mark.parametrize(
        "playtime,bucket",
        [
            (0, "never_played"),
            (1, "casual"),
            (180, "casual"),
            (181, "regular"),
            (1200, "regular"),
            (1201, "hardcore"),
        ],
    )
    def test_boundaries(self, playtime, bucket):
        """Bucket edges are inclusive on the upper bound."""
        buckets = categorize_by_playtime([make_item(1, playtime)])
        assert ids(getattr(buckets, bucket)) == ["1"]

    def test_partition(self, larger_library):
        """Buckets are disjoint and together hold every input item."""
        buckets = categorize_by_playtime(larger_library)
        combined = (
            buckets.never_played + buckets.casual + buckets.regular + buckets.hardcore
        )
        assert Counter(ids(combined)) == Counter(ids(larger_library))
        assert len(combined) == len(larger_library)

    def test_order_within_bucket(self, larger_library):
        """Items keep their input order inside a bucket."""
        buckets = categorize_by_playtime(larger_library)
        assert ids(buckets.never_played) == ["570", "240"]
        assert ids(buckets.casual) == ["400", "4000"]
        assert ids(buckets.regular) == ["220", "730", "8930", "1091500"]
        assert ids(buckets.hardcore) == ["620", "292030"]
