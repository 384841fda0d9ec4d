"""Data models for Steam library items and derived views."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class LibraryItem:
    """Represents a game owned by a Steam account."""

    app_id: str
    name: str
    playtime_forever: int  # minutes
    icon_url: str = ""

    @property
    def playtime_hours(self) -> float:
        """Playtime converted to hours."""
        return self.playtime_forever / 60.0

    @property
    def recency_key(self) -> int:
        """Numeric app id, used as an approximation of acquisition order.

        Steam does not report when a game was added to a library, so newer
        games are assumed to have larger app ids. This is a heuristic only.
        """
        return int(self.app_id)

    def to_dict(self) -> dict:
        """Convert to the camelCase shape used in JSON output."""
        return {
            "appId": self.app_id,
            "name": self.name,
            "playtimeForever": self.playtime_forever,
            "imgIconUrl": self.icon_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LibraryItem":
        """Reconstruct from dictionary."""
        return cls(
            app_id=str(data["appId"]),
            name=data["name"],
            playtime_forever=int(data["playtimeForever"]),
            icon_url=data.get("imgIconUrl") or "",
        )


def _item_dict(item: Optional[LibraryItem]) -> Optional[dict]:
    return item.to_dict() if item else None


@dataclass
class DashboardSummary:
    """Aggregate metrics over a full library."""

    total_games: int
    total_minutes: int
    total_hours: float
    top5_most_played: List[LibraryItem]
    most_recent_game: Optional[LibraryItem]
    generated_at: str

    def to_dict(self) -> dict:
        return {
            "totalGames": self.total_games,
            "totalMinutes": self.total_minutes,
            "totalHours": self.total_hours,
            "top5MostPlayed": [item.to_dict() for item in self.top5_most_played],
            "mostRecentGame": _item_dict(self.most_recent_game),
            "generatedAt": self.generated_at,
        }


@dataclass
class DetailedStats:
    """Played/unplayed breakdown of a library."""

    total_games: int
    games_with_playtime: int
    games_never_played: int
    average_playtime: float  # hours, played games only
    longest_session: Optional[LibraryItem]

    def to_dict(self) -> dict:
        return {
            "totalGames": self.total_games,
            "gamesWithPlaytime": self.games_with_playtime,
            "gamesNeverPlayed": self.games_never_played,
            "averagePlaytime": self.average_playtime,
            "longestSession": _item_dict(self.longest_session),
        }


@dataclass
class PlaytimeCategories:
    """Library partitioned into playtime buckets.

    Bucket bounds, in minutes:
        never_played: 0
        casual: 1-180
        regular: 181-1200
        hardcore: over 1200
    """

    never_played: List[LibraryItem] = field(default_factory=list)
    casual: List[LibraryItem] = field(default_factory=list)
    regular: List[LibraryItem] = field(default_factory=list)
    hardcore: List[LibraryItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "neverPlayed": [item.to_dict() for item in self.never_played],
            "casual": [item.to_dict() for item in self.casual],
            "regular": [item.to_dict() for item in self.regular],
            "hardcore": [item.to_dict() for item in self.hardcore],
        }
