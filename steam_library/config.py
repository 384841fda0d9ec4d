"""Configuration management for steam-library."""

import os
import stat
from pathlib import Path
from typing import Optional

import yaml

API_KEY_ENV = "STEAM_API_KEY"
SORT_CHOICES = ("playtime", "name")

# SteamID64 of an individual account: 17 digits, universe/type prefix 7656119
STEAM_ID64_PREFIX = "7656119"
STEAM_ID64_LENGTH = 17


class ConfigError(Exception):
    """Configuration error."""

    pass


def is_valid_steam_id(steam_id) -> bool:
    """Check that a value looks like an individual account's SteamID64."""
    if not steam_id or not isinstance(steam_id, str):
        return False
    return (
        steam_id.isdigit()
        and len(steam_id) == STEAM_ID64_LENGTH
        and steam_id.startswith(STEAM_ID64_PREFIX)
    )


class Config:
    """Manages steam-library configuration."""

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize config with data directory."""
        if data_dir is None:
            data_dir = Path.cwd() / "data"
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.config_path = self.data_dir / "config.yaml"
        self.log_path = self.data_dir / "steam-library.log"
        self.export_dir = self.data_dir / "exports"

        # Steam credentials
        self._api_key: Optional[str] = None
        self.default_steam_id: Optional[str] = None

        # Request and view settings
        self.timeout: float = 30
        self.default_sort: str = "playtime"

    @property
    def api_key(self) -> Optional[str]:
        """Steam Web API key; the environment variable wins over the file."""
        return os.environ.get(API_KEY_ENV) or self._api_key

    @property
    def configured(self) -> bool:
        """Check if an API key is available."""
        return bool(self.api_key)

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    def set_steam_credentials(
        self,
        api_key: str,
        default_steam_id: Optional[str] = None,
    ) -> None:
        """Set Steam API key and optional default account."""
        self._api_key = api_key
        self.default_steam_id = default_steam_id or None

    def set_timeout(self, timeout: float) -> None:
        """Set request timeout in seconds."""
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
            raise ConfigError(f"Invalid timeout: {timeout!r} is not a number")
        if timeout <= 0:
            raise ConfigError(f"Invalid timeout: {timeout}")
        self.timeout = timeout

    def set_default_sort(self, sort_by: str) -> None:
        """Set default game list order (playtime or name)."""
        if not isinstance(sort_by, str) or sort_by not in SORT_CHOICES:
            raise ConfigError(f"Invalid sort option: {sort_by}")
        self.default_sort = sort_by

    def resolve_steam_id(self, steam_id: Optional[str]) -> str:
        """Return the given Steam ID or the configured default."""
        resolved = steam_id or self.default_steam_id
        if not resolved:
            raise ConfigError(
                "No Steam ID given and no default configured.\n"
                "Pass a Steam ID or run 'steam-library setup'."
            )
        if not is_valid_steam_id(resolved):
            raise ConfigError(
                f"Invalid Steam ID: {resolved}\n"
                "Expected a 17-digit SteamID64 such as 76561198000000000."
            )
        return resolved

    def save(self) -> None:
        """Save configuration to YAML file."""
        data = {
            "steam": {
                "api_key": self._api_key,
                "default_steam_id": self.default_steam_id,
            },
            "http": {
                "timeout": self.timeout,
            },
            "view": {
                "default_sort": self.default_sort,
            },
        }

        with open(self.config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)

        # The file holds the API key: owner read/write only
        if os.name != "nt":
            os.chmod(self.config_path, stat.S_IRUSR | stat.S_IWUSR)

    def _section(self, data: dict, name: str) -> dict:
        """Return a config section, which must be a mapping when present."""
        section = data.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigError(
                f"Invalid config file: {self.config_path}: "
                f"'{name}' must be a mapping"
            )
        return section

    def load(self) -> None:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            raise ConfigError(
                f"Config file not found: {self.config_path}\n"
                "Run 'steam-library setup' to configure."
            )

        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid config file: {self.config_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Invalid config file: {self.config_path}")

        steam = self._section(data, "steam")
        api_key = steam.get("api_key")
        if api_key is not None and not isinstance(api_key, str):
            raise ConfigError("Invalid config: steam.api_key must be a string")
        self._api_key = api_key
        default_steam_id = steam.get("default_steam_id")
        self.default_steam_id = str(default_steam_id) if default_steam_id else None

        http = self._section(data, "http")
        self.set_timeout(http.get("timeout", 30))

        view = self._section(data, "view")
        self.set_default_sort(view.get("default_sort", "playtime"))
