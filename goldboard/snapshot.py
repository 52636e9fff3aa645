"""Snapshot files and settings persistence for GoldBoard."""

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from .models import GoldUnit, SeriesSnapshot
from .series import EmptySeriesError

logger = logging.getLogger(__name__)

PACKAGED_SNAPSHOT = Path(__file__).parent / "data" / "gold-series.json"
DEFAULT_DATA_DIR = Path.home() / ".local" / "share" / "goldboard"
DEFAULT_SETTINGS_FILE = DEFAULT_DATA_DIR / "settings.json"


class SnapshotError(Exception):
    """Snapshot file could not be read."""


class SnapshotStore:
    """Loads the static gold price snapshot."""

    def __init__(self, snapshot_path: Path | None = None):
        # Path: constructor arg > env var > packaged snapshot
        if snapshot_path is None:
            env_path = os.environ.get("GOLDBOARD_SNAPSHOT")
            snapshot_path = Path(env_path) if env_path else PACKAGED_SNAPSHOT
        self.snapshot_path = snapshot_path

    def load(self) -> SeriesSnapshot:
        """Load and validate the snapshot, filling in source and update date."""
        try:
            raw = self.snapshot_path.read_text()
        except OSError as e:
            raise SnapshotError(f"Cannot read snapshot {self.snapshot_path}: {e}") from e

        try:
            snapshot = SeriesSnapshot.model_validate_json(raw)
        except ValidationError as e:
            raise SnapshotError(f"Invalid snapshot {self.snapshot_path}: {e}") from e

        if not snapshot.anchors:
            raise EmptySeriesError(f"Gold series file is empty: {self.snapshot_path}")

        logger.debug("Loaded %d anchors from %s", len(snapshot.anchors), self.snapshot_path)
        return snapshot.model_copy(
            update={
                "source": snapshot.source or "Local snapshot",
                "updated_at": snapshot.updated_at or max(a.date for a in snapshot.anchors),
            }
        )

    def save(self, snapshot: SeriesSnapshot) -> None:
        """Write a snapshot to disk in the same format it is read in."""
        self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        self.snapshot_path.write_text(snapshot.model_dump_json(by_alias=True, indent=2))


class SettingsManager:
    """Manages application settings persistence."""

    def __init__(self, settings_path: Path | None = None):
        self.settings_path = settings_path or DEFAULT_SETTINGS_FILE
        self.settings_path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> dict:
        """Load settings from JSON file."""
        if not self.settings_path.exists():
            return {}
        try:
            return json.loads(self.settings_path.read_text())
        except (json.JSONDecodeError, ValueError):
            logger.warning("Ignoring unreadable settings file %s", self.settings_path)
            return {}

    def _save(self, settings: dict) -> None:
        """Save settings to JSON file."""
        self.settings_path.write_text(json.dumps(settings, indent=2))

    def get_last_range_key(self) -> str:
        """Get the last selected range key, defaulting to 'recent'."""
        value = self._load().get("last_range_key")
        return value if isinstance(value, str) else "recent"

    def set_last_range_key(self, key: str) -> None:
        settings = self._load()
        settings["last_range_key"] = key
        self._save(settings)

    def get_last_unit(self) -> GoldUnit:
        """Get the last selected unit, defaulting to ounces."""
        value = self._load().get("last_unit")
        if value:
            try:
                return GoldUnit(value)
            except ValueError:
                pass
        return GoldUnit.OUNCE

    def set_last_unit(self, unit: GoldUnit) -> None:
        settings = self._load()
        settings["last_unit"] = unit.value
        self._save(settings)
