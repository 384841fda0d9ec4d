"""Steam Web API client."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from steam_library.models import LibraryItem
from steam_library.translator import SteamPayloadError, to_library_items

logger = logging.getLogger(__name__)

__all__ = [
    "FetchResult",
    "SteamAuthError",
    "SteamClient",
    "SteamConnectionError",
    "SteamPayloadError",
]


class SteamAuthError(Exception):
    """API key rejected by Steam."""

    pass


class SteamConnectionError(Exception):
    """Connection error."""

    pass


@dataclass
class FetchResult:
    """Outcome of a library fetch.

    A failed fetch carries a reason and no items, so callers can tell
    "no games" apart from "Steam could not be reached".
    """

    ok: bool
    items: List[LibraryItem] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def success(cls, items: List[LibraryItem]) -> "FetchResult":
        return cls(ok=True, items=items)

    @classmethod
    def failure(cls, reason: str) -> "FetchResult":
        return cls(ok=False, reason=reason)


class SteamClient:
    """Client for the Steam IPlayerService API."""

    API_URL = "https://api.steampowered.com/IPlayerService/GetOwnedGames/v0001/"
    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        api_url: Optional[str] = None,
    ):
        """Initialize Steam client."""
        self.api_key = api_key
        self.timeout = timeout
        self.api_url = api_url or self.API_URL

    def __repr__(self) -> str:
        # Keep the key out of tracebacks and debug output
        return f"SteamClient(api_url={self.api_url!r}, timeout={self.timeout})"

    def _build_params(self, steam_id: str) -> dict:
        """Build GetOwnedGames query parameters."""
        return {
            "key": self.api_key,
            "steamid": steam_id,
            "include_appinfo": "true",
            "format": "json",
        }

    def _get(self, steam_id: str) -> requests.Response:
        try:
            response = requests.get(
                self.api_url,
                params=self._build_params(steam_id),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            # requests includes the full URL (and so the key) in its messages
            raise SteamConnectionError(
                f"Cannot connect to Steam API: {type(e).__name__}"
            ) from None

        if response.status_code in (401, 403):
            raise SteamAuthError("Steam API key rejected")
        if response.status_code != 200:
            raise SteamConnectionError(
                f"Steam API error: {response.status_code}"
            )
        return response

    def test_connection(self, steam_id: str = "0") -> bool:
        """Test that Steam accepts the configured key.

        Returns True if the request succeeds, False otherwise.
        """
        try:
            self._get(steam_id)
        except (SteamAuthError, SteamConnectionError):
            return False
        return True

    def get_owned_games(self, steam_id: str) -> List[LibraryItem]:
        """Fetch the games owned by a Steam account.

        Args:
            steam_id: SteamID64 of the account

        Returns:
            List of LibraryItem objects in the order Steam returned them

        Raises:
            SteamConnectionError: Steam could not be reached or errored
            SteamAuthError: API key rejected
            SteamPayloadError: Response body is not a valid games payload
        """
        logger.info("Fetching owned games for %s from %s", steam_id, self.api_url)
        response = self._get(steam_id)

        try:
            data = response.json()
        except ValueError:
            raise SteamPayloadError("Steam API returned a non-JSON body") from None

        payload = data.get("response") if isinstance(data, dict) else None
        if not isinstance(payload, dict) or payload.get("games") is None:
            # Private profiles and unknown ids come back without a games list
            logger.info("No games listed for %s", steam_id)
            return []

        if not isinstance(payload["games"], list):
            raise SteamPayloadError("Steam API returned a games field that is not a list")

        items = to_library_items(payload["games"])
        logger.info("Fetched %d games for %s", len(items), steam_id)
        return items

    def fetch_library(self, steam_id: str) -> FetchResult:
        """Fetch owned games, reporting transport failures as a result.

        Malformed payloads are not recoverable and still raise
        SteamPayloadError.
        """
        try:
            return FetchResult.success(self.get_owned_games(steam_id))
        except (SteamAuthError, SteamConnectionError) as e:
            logger.warning("Library fetch for %s failed: %s", steam_id, e)
            return FetchResult.failure(str(e))
