"""Rich-based terminal display for GoldBoard."""

from datetime import datetime

from asciichartpy import plot
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .charts import resample
from .models import FxRate, GoldChanges, GoldView, RangeSpec

console = Console()

CHANGE_LABELS = {"day1": "1 day", "day7": "7 days", "day30": "30 days"}


def format_usd(value: float, precision: int = 2) -> str:
    """Format a USD amount with commas and fixed precision."""
    if value < 0:
        return f"-${abs(value):,.{precision}f}"
    return f"${value:,.{precision}f}"


def format_percent(value: float) -> str:
    """Format a fractional change as an always-signed percentage, e.g. '+1.5%'."""
    pct = round(value * 100, 2) or 0.0
    return f"{pct:+,.2f}".rstrip("0").rstrip(".") + "%"


def format_date(value: str) -> str:
    """Format YYYY-MM-DD as 'Jan 6, 2024'; anything unparseable is returned as is."""
    try:
        parsed = datetime.strptime(value[:10], "%Y-%m-%d")
    except (TypeError, ValueError):
        return value
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def format_idr(value: float) -> str:
    """Format rupiah the Indonesian way: 'Rp 16.250.000'."""
    return "Rp " + f"{round(value):,}".replace(",", ".")


def format_change(change: float | None) -> Text:
    """Color-coded percentage change, dimmed dash when unknown."""
    if change is None:
        return Text("-", style="dim")
    style = "green" if change >= 0 else "red"
    return Text(format_percent(change), style=style)


def build_price_panel(view: GoldView) -> Panel:
    """Latest price, source and data freshness."""
    table = Table(show_header=False, box=None)
    table.add_column("Label", style="dim")
    table.add_column("Value")

    table.add_row("Price", Text(f"{format_usd(view.latest.value)} {view.unit_suffix}", style="bold yellow"))
    table.add_row("As of", format_date(view.latest.date))
    table.add_row("Source", view.source_label)
    table.add_row("Updated", format_date(view.last_updated))

    return Panel(table, title=f"Gold ({view.unit.label})", border_style="yellow")


def build_changes_panel(changes: GoldChanges) -> Panel:
    table = Table(show_header=False, box=None, padding=(0, 2), expand=True)
    for _ in CHANGE_LABELS:
        table.add_column(justify="center", ratio=1)

    table.add_row(*(Text(label, style="dim") for label in CHANGE_LABELS.values()))
    table.add_row(*(format_change(getattr(changes, name)) for name in CHANGE_LABELS))

    return Panel(table, title="Changes", border_style="blue")


def build_stats_panel(view: GoldView) -> Panel:
    """Range and 52-week high/low."""
    table = Table(show_header=False, box=None)
    table.add_column("Label", style="dim")
    table.add_column("Value", justify="right")

    label = view.range.label
    table.add_row(f"{label} high", format_usd(view.range_stats.high))
    table.add_row(f"{label} low", format_usd(view.range_stats.low))
    table.add_row("52w high", format_usd(view.year_stats.high))
    table.add_row("52w low", format_usd(view.year_stats.low))

    return Panel(
        table,
        title=f"{label} range",
        subtitle=f"[dim]{view.points_count} points[/dim]",
        border_style="cyan",
    )


def build_chart_panel(view: GoldView, width: int | None = None) -> Panel:
    """ASCII price chart of the selected range."""
    if not view.range_points:
        return Panel(Text("No historical data available.", style="dim"), border_style="magenta")

    # Account for panel borders (2), padding (2), and y-axis labels (~12)
    chart_width = (width or console.width) - 16
    chart_width = max(20, min(chart_width, 120))

    values = resample([p.value for p in view.range_points], chart_width)
    chart = plot(values, {"height": 8, "format": "{:10,.2f} "})

    start_date = format_date(view.range_points[0].date)
    end_date = format_date(view.range_points[-1].date)
    content = Text(f"{chart}\n\n")
    content.append(f"{start_date} to {end_date}", style="dim")

    return Panel(
        content,
        title=f"{view.range.label} range - {view.source_label}",
        border_style="magenta",
    )


def build_dashboard(view: GoldView, show_chart: bool = False, width: int | None = None) -> Group:
    """Build the full dashboard for a view."""
    components = [
        build_price_panel(view),
        build_changes_panel(view.changes),
        build_stats_panel(view),
    ]
    if show_chart:
        components.append(build_chart_panel(view, width))
    return Group(*components)


def display_dashboard(view: GoldView, show_chart: bool = False) -> None:
    console.print(build_dashboard(view, show_chart))


def display_calculator(view: GoldView, usd: float, amount: float) -> None:
    """Show a USD <-> gold conversion at the latest price."""
    table = Table(show_header=False, box=None)
    table.add_column("Label", style="dim")
    table.add_column("Value", justify="right")

    table.add_row("Price", f"{format_usd(view.latest.value)} {view.unit_suffix}")
    table.add_row("USD", format_usd(usd))
    table.add_row(f"Gold ({view.unit.value})", f"{amount:,.4f}")

    console.print(Panel(
        table,
        title="Gold Calculator",
        subtitle=f"[dim]Price as of {format_date(view.latest.date)}[/dim]",
        border_style="yellow",
    ))


def display_fx(rate: FxRate, usd: float, idr: int) -> None:
    """Show a USD <-> IDR conversion."""
    table = Table(show_header=False, box=None)
    table.add_column("Label", style="dim")
    table.add_column("Value", justify="right")

    table.add_row("Rate", f"1 USD = {format_idr(rate.rate)}")
    table.add_row("USD", format_usd(usd))
    table.add_row("IDR", format_idr(idr))

    subtitle = None
    if rate.updated_at:
        subtitle = f"[dim]Rate updated {format_date(rate.updated_at.strftime('%Y-%m-%d'))}[/dim]"
    console.print(Panel(table, title="USD to IDR", subtitle=subtitle, border_style="green"))


def display_ranges(months: list[RangeSpec], years: list[RangeSpec]) -> None:
    """List selectable range keys."""
    table = Table(title="Ranges")
    table.add_column("Key")
    table.add_column("Label")

    table.add_row("recent", "Recent (14 days)")
    for option in months + years:
        table.add_row(option.key, option.label)

    console.print(table)


def display_error(message: str) -> None:
    """Display error message."""
    console.print(f"[red]Error:[/red] {escape(message)}")


def display_success(message: str) -> None:
    """Display success message."""
    console.print(f"[green]{message}[/green]")
