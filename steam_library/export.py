"""YAML/JSON export of library snapshots."""

import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import yaml

from steam_library.aggregator import compute_dashboard
from steam_library.models import LibraryItem

EXPORT_FORMATS = ("yaml", "json")


class LibraryExporter:
    """Writes library snapshots requested by the user.

    Exports are output only; nothing reads them back as a cache.
    """

    def __init__(self, export_dir: Path):
        """Initialize exporter."""
        self.export_dir = Path(export_dir)

    def default_path(self, steam_id: str, fmt: str) -> Path:
        """Timestamped file name for a snapshot."""
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        return self.export_dir / f"library-{steam_id}-{stamp}.{fmt}"

    def build_snapshot(self, steam_id: str, items: List[LibraryItem]) -> dict:
        """Build the exported document."""
        return {
            "export_metadata": {
                "exported_at": datetime.now().isoformat(),
                "steam_id": steam_id,
                "total_items": len(items),
            },
            "dashboard": compute_dashboard(items).to_dict(),
            "games": [item.to_dict() for item in items],
        }

    def export(
        self,
        steam_id: str,
        items: List[LibraryItem],
        fmt: str = "yaml",
        path: Optional[Path] = None,
    ) -> Path:
        """Write a snapshot and return its path."""
        if fmt not in EXPORT_FORMATS:
            raise ValueError(f"Invalid export format: {fmt}")

        path = Path(path) if path else self.default_path(steam_id, fmt)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.build_snapshot(steam_id, items)

        with open(path, "w") as f:
            if fmt == "json":
                json.dump(data, f, indent=2, ensure_ascii=False)
            else:
                yaml.dump(
                    data,
                    f,
                    default_flow_style=False,
                    allow_unicode=True,
                    sort_keys=False,
                    indent=2,
                )

        return path

    @staticmethod
    def load_items(path: Path) -> List[LibraryItem]:
        """Read the games back out of an export file."""
        path = Path(path)
        if not path.exists():
            return []

        with open(path) as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)

        if not data or "games" not in data:
            return []

        return [LibraryItem.from_dict(game) for game in data["games"]]
