"""CLI interface for GoldBoard."""

import logging
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from .api import FxAPI, GoldAPI, GoldAPIError, clear_cache
from .calculator import gold_to_usd, idr_to_usd, usd_to_gold, usd_to_idr
from .dashboard import DataSource, load_view
from .display import (
    console,
    display_calculator,
    display_dashboard,
    display_error,
    display_fx,
    display_ranges,
    display_success,
)
from .models import GoldUnit, GoldView
from .ranges import month_options, year_options
from .series import EmptySeriesError
from .snapshot import SnapshotError
from .tui import run_interactive

app = typer.Typer(
    name="goldboard",
    help="Personal gold price dashboard with range stats and converters.",
    invoke_without_command=True,
)

RangeOption = Annotated[
    Optional[str],
    typer.Option("--range", "-r", help="Range key: recent, month-YYYY-MM or year-YYYY"),
]
UnitOption = Annotated[Optional[GoldUnit], typer.Option("--unit", "-u", help="Price unit")]
SourceOption = Annotated[
    DataSource,
    typer.Option("--source", "-s", help="Use the packaged snapshot or the live API"),
]


def setup_logging(verbose: bool) -> None:
    """Route log records through rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=verbose)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_view(range_key: str, unit: GoldUnit, source: DataSource) -> GoldView:
    """Build the view, turning data errors into a clean exit."""
    try:
        with console.status("Loading gold prices..."):
            return load_view(range_key, unit, source)
    except (GoldAPIError, SnapshotError, EmptySeriesError) as e:
        display_error(str(e))
        raise typer.Exit(1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    range_key: RangeOption = None,
    unit: UnitOption = None,
    source: SourceOption = DataSource.SNAPSHOT,
    chart: Annotated[
        bool,
        typer.Option("--chart", "-c", help="Show price chart"),
    ] = False,
    once: Annotated[
        bool,
        typer.Option("--once", "-1", help="Run once and exit (non-interactive)"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Display the gold price dashboard."""
    setup_logging(verbose)
    if ctx.invoked_subcommand is not None:
        return

    # Interactive mode (default); explicit --range/--unit override saved settings
    if not once and not chart:
        try:
            api = GoldAPI() if source == DataSource.LIVE else None
            run_interactive(source, api, range_key=range_key, unit=unit)
        except GoldAPIError as e:
            display_error(str(e))
            raise typer.Exit(1)
        return

    # Non-interactive mode (--once or --chart)
    view = get_view(range_key or "recent", unit or GoldUnit.OUNCE, source)
    display_dashboard(view, show_chart=chart)


@app.command()
def calc(
    usd: Annotated[
        Optional[float],
        typer.Option("--usd", help="USD amount to convert into gold"),
    ] = None,
    amount: Annotated[
        Optional[float],
        typer.Option("--amount", "-a", help="Gold amount (in --unit) to value in USD"),
    ] = None,
    unit: UnitOption = None,
    source: SourceOption = DataSource.SNAPSHOT,
) -> None:
    """Convert between USD and gold at the latest price."""
    if usd is not None and amount is not None:
        display_error("Pass either --usd or --amount, not both.")
        raise typer.Exit(1)

    view = get_view("recent", unit or GoldUnit.OUNCE, source)
    price = view.latest.value

    if amount is not None:
        display_calculator(view, gold_to_usd(amount, price), amount)
        return

    usd = 1000.0 if usd is None else usd
    gold = usd_to_gold(usd, price)
    if gold is None:
        display_error("Latest gold price is zero; cannot convert.")
        raise typer.Exit(1)
    display_calculator(view, usd, gold)


@app.command()
def fx(
    usd: Annotated[
        Optional[float],
        typer.Option("--usd", help="USD amount to convert into IDR"),
    ] = None,
    idr: Annotated[
        Optional[int],
        typer.Option("--idr", help="IDR amount to convert into USD"),
    ] = None,
) -> None:
    """Convert between USD and Indonesian rupiah."""
    if usd is not None and idr is not None:
        display_error("Pass either --usd or --idr, not both.")
        raise typer.Exit(1)

    try:
        with console.status("Fetching exchange rate..."):
            rate = FxAPI().get_rate("IDR")
    except GoldAPIError as e:
        display_error(str(e))
        raise typer.Exit(1)

    if idr is not None:
        display_fx(rate, idr_to_usd(idr, rate.rate), idr)
        return

    usd = 100.0 if usd is None else usd
    display_fx(rate, usd, usd_to_idr(usd, rate.rate))


@app.command()
def ranges(source: SourceOption = DataSource.SNAPSHOT) -> None:
    """List the month and year ranges available for the current data."""
    view = get_view("recent", GoldUnit.OUNCE, source)
    latest_date = view.latest.date
    display_ranges(month_options(latest_date), year_options(latest_date))


@app.command()
def refresh() -> None:
    """Clear cached API responses so the next run refetches."""
    removed = clear_cache()
    display_success(f"Cleared {removed} cached response{'s' if removed != 1 else ''}.")


if __name__ == "__main__":
    app()
