import json

import pytest

from goldboard.models import GoldUnit
from goldboard.series import EmptySeriesError
from goldboard.snapshot import PACKAGED_SNAPSHOT, SettingsManager, SnapshotError, SnapshotStore


class TestSnapshotStore:
    """Test loading the static gold series."""

    def test_packaged_snapshot_loads(self, monkeypatch):
        monkeypatch.delenv("GOLDBOARD_SNAPSHOT", raising=False)
        store = SnapshotStore()
        assert store.snapshot_path == PACKAGED_SNAPSHOT

        snapshot = store.load()
        assert snapshot.anchors
        assert snapshot.updated_at

    def test_defaults_for_missing_fields(self, tmp_path):
        path = tmp_path / "series.json"
        path.write_text(json.dumps({
            "anchors": [
                {"date": "2024-03-01", "value": 2100},
                {"date": "2024-02-01", "value": 2050},
            ]
        }))

        snapshot = SnapshotStore(path).load()
        assert snapshot.source == "Local snapshot"
        assert snapshot.updated_at == "2024-03-01"

    def test_empty_source_label_uses_default(self, tmp_path):
        path = tmp_path / "series.json"
        path.write_text(json.dumps({"source": "", "anchors": [{"date": "2024-03-01", "value": 1}]}))
        assert SnapshotStore(path).load().source == "Local snapshot"

    def test_env_path(self, tmp_path, monkeypatch):
        path = tmp_path / "series.json"
        monkeypatch.setenv("GOLDBOARD_SNAPSHOT", str(path))
        assert SnapshotStore().snapshot_path == path

    def test_empty_anchors(self, tmp_path):
        path = tmp_path / "series.json"
        path.write_text(json.dumps({"source": "x", "updatedAt": "2024-01-01", "anchors": []}))
        with pytest.raises(EmptySeriesError):
            SnapshotStore(path).load()

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "series.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotError):
            SnapshotStore(path).load()

    def test_invalid_anchor(self, tmp_path):
        path = tmp_path / "series.json"
        path.write_text(json.dumps({"anchors": [{"date": "March 1", "value": -5}]}))
        with pytest.raises(SnapshotError):
            SnapshotStore(path).load()

    def test_impossible_calendar_day(self, tmp_path):
        path = tmp_path / "series.json"
        anchors = [{"date": "2024-02-27", "value": 2000}, {"date": "2024-02-30", "value": 2010}]
        path.write_text(json.dumps({"anchors": anchors}))
        with pytest.raises(SnapshotError):
            SnapshotStore(path).load()

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotError):
            SnapshotStore(tmp_path / "missing.json").load()

    def test_save_then_load(self, tmp_path, snapshot):
        store = SnapshotStore(tmp_path / "nested" / "series.json")
        store.save(snapshot)

        raw = json.loads(store.snapshot_path.read_text())
        assert raw["updatedAt"] == "2024-02-29"
        assert store.load().anchors == snapshot.anchors


class TestSettingsManager:
    """Test settings persistence."""

    def test_defaults(self, tmp_path):
        settings = SettingsManager(tmp_path / "settings.json")
        assert settings.get_last_range_key() == "recent"
        assert settings.get_last_unit() == GoldUnit.OUNCE

    def test_persists_range_and_unit(self, tmp_path):
        path = tmp_path / "settings.json"
        settings = SettingsManager(path)
        settings.set_last_range_key("year-2023")
        settings.set_last_unit(GoldUnit.GRAM)

        reloaded = SettingsManager(path)
        assert reloaded.get_last_range_key() == "year-2023"
        assert reloaded.get_last_unit() == GoldUnit.GRAM

    def test_corrupt_file_falls_back(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("garbage")
        settings = SettingsManager(path)
        assert settings.get_last_unit() == GoldUnit.OUNCE

    def test_unknown_unit_falls_back(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"last_unit": "kg"}))
        assert SettingsManager(path).get_last_unit() == GoldUnit.OUNCE
