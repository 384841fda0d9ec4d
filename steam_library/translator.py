"""Convert GetOwnedGames records into LibraryItem objects."""

from typing import Iterable, List, Optional

from steam_library.models import LibraryItem

STEAM_MEDIA_URL = "https://media.steampowered.com/steamcommunity/public/images/apps/"


class SteamPayloadError(Exception):
    """Steam API payload is missing or has malformed fields."""

    pass


def build_icon_url(app_id: int, icon_ref: Optional[str]) -> str:
    """Build the full icon URL for a game.

    Returns an empty string when Steam has no usable icon hash.
    """
    if icon_ref is None or not icon_ref.strip() or icon_ref == "undefined":
        return ""
    return f"{STEAM_MEDIA_URL}{app_id}/{icon_ref.strip()}.jpg"


def _require_int(raw: dict, key: str) -> int:
    value = raw.get(key)
    # bool is an int subclass but never a valid id or playtime
    if isinstance(value, bool) or not isinstance(value, int):
        raise SteamPayloadError(f"Game record has invalid {key!r}: {value!r}")
    return value


def to_library_item(raw: dict) -> LibraryItem:
    """Map a single raw game record to a LibraryItem.

    Expected shape:
        {"appid": 730, "name": "...", "playtime_forever": 120,
         "img_icon_url": "8dbc71957312bbd3baea65848b545be9eae2a355"}
    """
    if not isinstance(raw, dict):
        raise SteamPayloadError(f"Game record is not an object: {raw!r}")

    app_id = _require_int(raw, "appid")
    playtime = _require_int(raw, "playtime_forever")
    name = raw.get("name")
    if not isinstance(name, str):
        raise SteamPayloadError(f"Game {app_id} has no name")
    if playtime < 0:
        raise SteamPayloadError(f"Game {app_id} has negative playtime")
    icon_ref = raw.get("img_icon_url")
    if icon_ref is not None and not isinstance(icon_ref, str):
        raise SteamPayloadError(f"Game {app_id} has invalid 'img_icon_url': {icon_ref!r}")

    return LibraryItem(
        app_id=str(app_id),
        name=name,
        playtime_forever=playtime,
        icon_url=build_icon_url(app_id, icon_ref),
    )


def to_library_items(raws: Iterable[dict]) -> List[LibraryItem]:
    """Map a batch of raw records. One bad record fails the whole batch."""
    return [to_library_item(raw) for raw in raws]
