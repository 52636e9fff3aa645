"""Assembling the dashboard view from a gold price series."""

import logging
from enum import Enum

from .api import GoldAPI
from .charts import change_over_days, high_low
from .models import GoldChanges, GoldStats, GoldUnit, GoldView, RangeSpec, SeriesSnapshot
from .ranges import resolve_range, resolve_unit, slice_range
from .series import EmptySeriesError, convert_series, densify
from .snapshot import SnapshotStore

logger = logging.getLogger(__name__)

YEAR_RANGE = RangeSpec.recent(365)
CHANGE_LAGS = {"day1": 1, "day7": 7, "day30": 30}


class DataSource(str, Enum):
    """Where the gold series comes from."""

    SNAPSHOT = "snapshot"
    LIVE = "live"


def build_view(snapshot: SeriesSnapshot, range_spec: RangeSpec, unit: GoldUnit) -> GoldView:
    """Derive the full dashboard view for one range and unit."""
    points = convert_series(densify(snapshot.anchors), unit)
    if not points:
        raise EmptySeriesError("Gold data is empty")

    latest = points[-1]
    range_points = slice_range(points, range_spec, latest)
    year_points = slice_range(points, YEAR_RANGE, latest)

    range_stats = high_low(range_points) or GoldStats(low=latest.value, high=latest.value)
    year_stats = high_low(year_points) or range_stats

    # Changes use the full series so short ranges still report a 30 day change
    changes = GoldChanges(
        **{name: change_over_days(points, lag) for name, lag in CHANGE_LAGS.items()}
    )

    return GoldView(
        latest=latest,
        range=range_spec,
        unit=unit,
        unit_suffix=unit.suffix,
        source_label=snapshot.source,
        range_points=range_points,
        range_stats=range_stats,
        year_stats=year_stats,
        last_updated=snapshot.updated_at or latest.date,
        changes=changes,
        points_count=len(range_points),
    )


def fetch_snapshot(source: DataSource, api: GoldAPI | None = None) -> SeriesSnapshot:
    """Obtain a series from the chosen source."""
    if source == DataSource.LIVE:
        api = api or GoldAPI()
        return api.get_snapshot()
    return SnapshotStore().load()


def load_view(
    range_key: str | list[str] | None,
    unit: str | list[str] | None,
    source: DataSource = DataSource.SNAPSHOT,
    api: GoldAPI | None = None,
) -> GoldView:
    """Resolve raw range/unit parameters and build the view from the source."""
    range_spec = resolve_range(range_key)
    gold_unit = resolve_unit(unit)
    logger.debug("Building view for %s in %s from %s", range_spec.key, gold_unit.value, source.value)
    return build_view(fetch_snapshot(source, api), range_spec, gold_unit)
