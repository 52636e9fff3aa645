"""Interactive TUI mode for GoldBoard."""

import logging
import queue
import sys
import termios
import threading
from datetime import datetime

import readchar
from rich.console import Group
from rich.live import Live
from rich.text import Text

from .api import GoldAPI, GoldAPIError
from .dashboard import DataSource, build_view, fetch_snapshot
from .display import build_dashboard, console
from .models import GoldUnit, GoldView, RangeKind, RangeSpec, SeriesSnapshot
from .ranges import RECENT_RANGE, month_options, resolve_range, step_range, year_options
from .series import EmptySeriesError
from .snapshot import SettingsManager, SnapshotError

logger = logging.getLogger(__name__)

LOGO = r"""
    ╔═╗╔═╗╦  ╔╦╗╔╗ ╔═╗╔═╗╦═╗╔╦╗
    ║ ╦║ ║║   ║║╠╩╗║ ║╠═╣╠╦╝ ║║
    ╚═╝╚═╝╩═╝═╩╝╚═╝╚═╝╩ ╩╩╚══╩╝
"""

KEYBINDINGS = [
    ("r", "recent"),
    ("m", "month"),
    ("y", "year"),
    ("< >", "step"),
    ("u", "unit"),
    ("c", "chart"),
    ("f", "refetch"),
    ("q", "quit"),
]


class InteractiveTUI:
    """Interactive terminal UI for GoldBoard."""

    def __init__(
        self,
        source: DataSource,
        settings: SettingsManager,
        api: GoldAPI | None = None,
        range_key: str | None = None,
        unit: GoldUnit | None = None,
    ):
        self.source = source
        self.settings = settings
        self.api = api
        # Explicit range/unit win over the saved ones
        self.range_spec = resolve_range(range_key or settings.get_last_range_key())
        self.unit = unit or settings.get_last_unit()
        self.snapshot: SeriesSnapshot | None = None
        self.view: GoldView | None = None
        self.show_chart = True
        self.running = False
        self.last_update: datetime | None = None
        self.error_message: str | None = None
        self._key_queue: queue.Queue[str] = queue.Queue()

    def fetch_snapshot(self) -> None:
        """Fetch the series from the data source."""
        try:
            self.snapshot = fetch_snapshot(self.source, self.api)
            self.last_update = datetime.now()
            self.error_message = None
        except (GoldAPIError, SnapshotError, EmptySeriesError) as e:
            logger.debug("Fetch failed: %s", e)
            self.error_message = str(e)
        self.rebuild_view()

    def rebuild_view(self) -> None:
        """Recompute the view for the current range and unit."""
        if self.snapshot is None:
            self.view = None
            return
        try:
            self.view = build_view(self.snapshot, self.range_spec, self.unit)
        except EmptySeriesError as e:
            self.view = None
            self.error_message = str(e)

    def _latest_date(self) -> str:
        return self.view.latest.date if self.view else ""

    def select_range(self, range_spec: RangeSpec) -> None:
        self.range_spec = range_spec
        self.rebuild_view()

    def build_logo(self) -> Text:
        """Build the gold-colored logo."""
        logo_text = Text(justify="center")
        lines = LOGO.rstrip("\n").split("\n")[1:]
        gold_styles = ["bold bright_yellow", "bold yellow", "yellow"]
        for i, line in enumerate(lines):
            style = gold_styles[min(i, len(gold_styles) - 1)]
            logo_text.append(line.strip() + "\n", style=style)
        return logo_text

    def build_keybindings(self) -> Text:
        keys = Text(justify="center")
        for key, action in KEYBINDINGS:
            keys.append(f"  {key}", style="yellow")
            keys.append(f": {action}", style="dim")
        return keys

    def build_status_bar(self) -> Text:
        """Build the status bar."""
        status = Text()

        if self.error_message:
            status.append(f"Error: {self.error_message}", style="red")
        elif self.last_update:
            status.append(f"Updated: {self.last_update.strftime('%H:%M:%S')}", style="dim")
            status.append(" • ", style="dim")
            status.append(f"Range: {self.range_spec.key}", style="dim")
            status.append(" • ", style="dim")
            status.append(f"Source: {self.source.value}", style="dim")

        return status

    def build_display(self) -> Group:
        """Build the complete display."""
        components = [self.build_logo(), self.build_keybindings(), Text()]
        if self.view:
            components.append(build_dashboard(self.view, self.show_chart, console.width))
        elif not self.error_message:
            components.append(Text("Loading...", style="dim"))
        components.append(self.build_status_bar())
        return Group(*components)

    def handle_key(self, key: str) -> bool:
        """Handle a key press. Returns False to quit."""
        key = key.lower() if len(key) == 1 else key

        if key in ("q", "\x03"):  # q or Ctrl+C
            return False

        if key == "f":
            self.fetch_snapshot()
        elif key == "r":
            self.select_range(RECENT_RANGE)
        elif key == "m" and self.range_spec.kind != RangeKind.MONTH:
            self.select_range(month_options(self._latest_date())[0])
        elif key == "y" and self.range_spec.kind != RangeKind.YEAR:
            self.select_range(year_options(self._latest_date())[0])
        elif key in ("<", ","):
            self.select_range(step_range(self.range_spec, self._latest_date(), 1))
        elif key in (">", "."):
            self.select_range(step_range(self.range_spec, self._latest_date(), -1))
        elif key == "u":
            self.unit = GoldUnit.GRAM if self.unit == GoldUnit.OUNCE else GoldUnit.OUNCE
            self.rebuild_view()
        elif key == "c":
            self.show_chart = not self.show_chart

        return True

    def _key_reader_thread(self) -> None:
        """Background thread to read key presses."""
        while self.running:
            try:
                key = readchar.readkey()
            except (OSError, termios.error):
                self._key_queue.put("q")  # Signal quit on terminal error
                break
            self._key_queue.put(key)

    def run(self) -> None:
        """Run the interactive TUI."""
        self.running = True

        # Save terminal settings to restore on exit
        try:
            old_settings = termios.tcgetattr(sys.stdin)
        except termios.error:
            old_settings = None

        self.fetch_snapshot()

        key_thread = threading.Thread(target=self._key_reader_thread, daemon=True)
        key_thread.start()

        try:
            with Live(
                self.build_display(),
                console=console,
                refresh_per_second=2,
                screen=True,
                vertical_overflow="crop",
            ) as live:
                while self.running:
                    try:
                        key = self._key_queue.get(timeout=0.1)
                    except queue.Empty:
                        continue
                    if not self.handle_key(key):
                        break
                    live.update(self.build_display())

        except KeyboardInterrupt:
            pass
        finally:
            self.running = False
            if old_settings:
                try:
                    termios.tcsetattr(sys.stdin, termios.TCSADRAIN, old_settings)
                except termios.error:
                    pass

        self.settings.set_last_range_key(self.range_spec.key)
        self.settings.set_last_unit(self.unit)


def run_interactive(
    source: DataSource,
    api: GoldAPI | None = None,
    range_key: str | None = None,
    unit: GoldUnit | None = None,
) -> None:
    """Run the interactive TUI."""
    tui = InteractiveTUI(source, SettingsManager(), api, range_key=range_key, unit=unit)
    tui.run()
