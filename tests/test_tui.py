import pytest
from rich.console import Console

from goldboard.dashboard import DataSource
from goldboard.models import GoldUnit, RangeKind
from goldboard.snapshot import SettingsManager
from goldboard.tui import InteractiveTUI


@pytest.fixture
def tui(snapshot, tmp_path, monkeypatch):
    path = tmp_path / "series.json"
    path.write_text(snapshot.model_dump_json(by_alias=True))
    monkeypatch.setenv("GOLDBOARD_SNAPSHOT", str(path))

    interactive = InteractiveTUI(DataSource.SNAPSHOT, SettingsManager(tmp_path / "settings.json"))
    interactive.fetch_snapshot()
    return interactive


class TestInteractiveTUI:
    """Test key handling of the interactive mode."""

    def test_initial_view(self, tui):
        assert tui.error_message is None
        assert tui.view.range.kind == RangeKind.RECENT
        assert tui.view.latest.date == "2024-02-29"

    def test_month_then_step_back(self, tui):
        tui.handle_key("m")
        assert tui.view.range.key == "month-2024-02"

        tui.handle_key("<")
        assert tui.view.range.key == "month-2024-01"
        assert tui.view.points_count == 31

        tui.handle_key(">")
        assert tui.view.range.key == "month-2024-02"

    def test_year_and_recent(self, tui):
        tui.handle_key("y")
        assert tui.view.range.key == "year-2024"
        tui.handle_key("r")
        assert tui.view.range.kind == RangeKind.RECENT

    def test_unit_toggle(self, tui):
        tui.handle_key("u")
        assert tui.view.unit == GoldUnit.GRAM
        tui.handle_key("U")
        assert tui.view.unit == GoldUnit.OUNCE

    def test_chart_toggle(self, tui):
        shown = tui.show_chart
        tui.handle_key("c")
        assert tui.show_chart is not shown

    def test_quit(self, tui):
        assert tui.handle_key("q") is False
        assert tui.handle_key("\x03") is False

    def test_display_renders(self, tui):
        console = Console(width=100, record=True)
        console.print(tui.build_display())
        output = console.export_text()
        assert "Range: recent" in output
        assert "$2,040.00" in output

    def test_missing_snapshot_shows_error(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GOLDBOARD_SNAPSHOT", str(tmp_path / "missing.json"))
        interactive = InteractiveTUI(DataSource.SNAPSHOT, SettingsManager(tmp_path / "settings.json"))
        interactive.fetch_snapshot()

        assert interactive.view is None
        assert "Cannot read snapshot" in interactive.error_message

    def test_explicit_range_and_unit_override_saved_settings(self, tmp_path):
        settings = SettingsManager(tmp_path / "settings.json")
        settings.set_last_range_key("month-2024-01")
        settings.set_last_unit(GoldUnit.OUNCE)

        interactive = InteractiveTUI(
            DataSource.SNAPSHOT, settings, range_key="year-2024", unit=GoldUnit.GRAM
        )
        assert interactive.range_spec.key == "year-2024"
        assert interactive.unit == GoldUnit.GRAM

    def test_saved_settings_used_without_explicit_values(self, tmp_path):
        settings = SettingsManager(tmp_path / "settings.json")
        settings.set_last_range_key("month-2024-01")
        settings.set_last_unit(GoldUnit.GRAM)

        interactive = InteractiveTUI(DataSource.SNAPSHOT, settings)
        assert interactive.range_spec.key == "month-2024-01"
        assert interactive.unit == GoldUnit.GRAM
