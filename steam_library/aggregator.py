"""Derived views over a list of library items."""

import logging
import math
from datetime import datetime
from typing import List, Optional, Sequence

from steam_library.models import (
    DashboardSummary,
    DetailedStats,
    LibraryItem,
    PlaytimeCategories,
)

logger = logging.getLogger(__name__)

CASUAL_MAX_MINUTES = 180
REGULAR_MAX_MINUTES = 1200
TOP_PLAYED_LIMIT = 5

SORT_OPTIONS = ("playtime", "name")
DEFAULT_SORT = "playtime"


def minutes_to_hours(minutes: float) -> float:
    """Minutes to hours, rounded half-up to one decimal."""
    return math.floor(minutes / 60.0 * 10 + 0.5) / 10


def sort_by_playtime(items: Sequence[LibraryItem]) -> List[LibraryItem]:
    """Most played first. Equal playtimes keep their input order."""
    return sorted(items, key=lambda item: item.playtime_forever, reverse=True)


def sort_by_name(items: Sequence[LibraryItem]) -> List[LibraryItem]:
    """Alphabetical by name. Equal names keep their input order."""
    return sorted(items, key=lambda item: item.name)


def apply_sorting(items: Sequence[LibraryItem], sort_by: Optional[str]) -> List[LibraryItem]:
    """Sort by a named view.

    Unknown selectors fall back to playtime order instead of failing.
    """
    selector = (sort_by or DEFAULT_SORT).lower()
    if selector == "name":
        return sort_by_name(items)
    if selector != "playtime":
        logger.warning("Unknown sort option %r, using %s", sort_by, DEFAULT_SORT)
    return sort_by_playtime(items)


def compute_dashboard(
    items: Sequence[LibraryItem],
    now: Optional[datetime] = None,
) -> DashboardSummary:
    """Summarize a library.

    Args:
        items: Library items in the order Steam returned them
        now: Timestamp to report (defaults to the current local time)

    Returns:
        DashboardSummary with totals, the five most played games (unplayed
        games excluded) and the game with the largest app id
    """
    generated_at = (now or datetime.now()).isoformat()

    if not items:
        return DashboardSummary(
            total_games=0,
            total_minutes=0,
            total_hours=0.0,
            top5_most_played=[],
            most_recent_game=None,
            generated_at=generated_at,
        )

    total_minutes = sum(item.playtime_forever for item in items)
    played = [item for item in items if item.playtime_forever > 0]

    return DashboardSummary(
        total_games=len(items),
        total_minutes=total_minutes,
        total_hours=minutes_to_hours(total_minutes),
        top5_most_played=sort_by_playtime(played)[:TOP_PLAYED_LIMIT],
        # Largest app id stands in for "most recently added"
        most_recent_game=max(items, key=lambda item: item.recency_key),
        generated_at=generated_at,
    )


def compute_detailed_stats(items: Sequence[LibraryItem]) -> DetailedStats:
    """Break a library down into played and never played games."""
    played = [item for item in items if item.playtime_forever > 0]

    if played:
        mean_minutes = sum(item.playtime_forever for item in played) / len(played)
        average = minutes_to_hours(mean_minutes)
        longest = max(played, key=lambda item: item.playtime_forever)
    else:
        average = 0.0
        longest = None

    return DetailedStats(
        total_games=len(items),
        games_with_playtime=len(played),
        games_never_played=len(items) - len(played),
        average_playtime=average,
        longest_session=longest,
    )


def categorize_by_playtime(items: Sequence[LibraryItem]) -> PlaytimeCategories:
    """Partition a library into never played, casual, regular and hardcore."""
    categories = PlaytimeCategories()

    for item in items:
        playtime = item.playtime_forever
        if playtime == 0:
            categories.never_played.append(item)
        elif playtime <= CASUAL_MAX_MINUTES:
            categories.casual.append(item)
        elif playtime <= REGULAR_MAX_MINUTES:
            categories.regular.append(item)
        else:
            categories.hardcore.append(item)

    return categories
