"""Daily gold price series: densifying anchors and converting units."""

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta, timezone

from .models import Anchor, GoldPoint, GoldUnit

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000
GRAMS_PER_OUNCE = 31.1034768


class EmptySeriesError(Exception):
    """No price data available to build a series from."""


def to_unit(price_per_ounce: float, unit: GoldUnit) -> float:
    """Convert a USD/oz price into the given unit."""
    if unit == GoldUnit.GRAM:
        return price_per_ounce / GRAMS_PER_OUNCE
    return price_per_ounce


def from_unit(price: float, unit: GoldUnit) -> float:
    """Convert a price quoted in the given unit back to USD/oz."""
    if unit == GoldUnit.GRAM:
        return price * GRAMS_PER_OUNCE
    return price


def convert_series(points: list[GoldPoint], unit: GoldUnit) -> list[GoldPoint]:
    """Return the series re-quoted in the given unit."""
    if unit == GoldUnit.OUNCE:
        return list(points)
    return [
        GoldPoint(date=p.date, time=p.time, value=to_unit(p.value, unit))
        for p in points
    ]


def day_to_time(day: str) -> int:
    """Epoch milliseconds at UTC midnight of a YYYY-MM-DD date."""
    parsed = datetime.strptime(day, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    return int(parsed.timestamp()) * 1000


def time_to_day(time_ms: int) -> str:
    """YYYY-MM-DD date of an epoch millisecond timestamp (UTC)."""
    return datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc).strftime("%Y-%m-%d")


def _sorted_unique(anchors: Iterable[Anchor]) -> list[Anchor]:
    """Sort anchors by date, keeping the last supplied anchor for a date."""
    by_date: dict[str, Anchor] = {}
    for anchor in anchors:
        if anchor.date in by_date:
            logger.warning(
                "Duplicate anchor for %s (%.2f replaces %.2f)",
                anchor.date,
                anchor.value,
                by_date[anchor.date].value,
            )
        by_date[anchor.date] = anchor
    return [by_date[d] for d in sorted(by_date)]


def densify(anchors: Iterable[Anchor]) -> list[GoldPoint]:
    """Expand sparse anchors into one point per calendar day.

    Days between two anchors are linearly interpolated. The result covers
    every day from the first to the last anchor inclusive.
    """
    ordered = _sorted_unique(anchors)
    if not ordered:
        raise EmptySeriesError("Gold series has no anchors")

    if len(ordered) == 1:
        only = ordered[0]
        return [GoldPoint(date=only.date, time=day_to_time(only.date), value=only.value)]

    points: list[GoldPoint] = []
    for index, (start, end) in enumerate(zip(ordered, ordered[1:])):
        start_time = day_to_time(start.date)
        end_time = day_to_time(end.date)
        span = max(1, round((end_time - start_time) / DAY_MS))

        for day in range(span + 1):
            # Day 0 of every later pair is the last day of the previous pair
            if index > 0 and day == 0:
                continue
            ratio = day / span if span else 0
            if day == span:
                value = end.value
            else:
                value = start.value + (end.value - start.value) * ratio
            time = start_time + day * DAY_MS
            points.append(GoldPoint(date=time_to_day(time), time=time, value=value))

    logger.debug("Densified %d anchors into %d daily points", len(ordered), len(points))
    return points


def forward_fill(
    rates: Mapping[str, float],
    start: date | None = None,
    end: date | None = None,
) -> list[GoldPoint]:
    """Build a daily series from per-day observed rates.

    Days with no observation copy the nearest earlier observed rate; days
    before the first observation copy the first observed rate. The window
    defaults to the first and last observed days.
    """
    observed = {d: v for d, v in rates.items() if v and v > 0}
    if not observed:
        raise EmptySeriesError("No observed rates to build a series from")

    days = sorted(observed)
    first_day = date.fromisoformat(days[0])
    start = start or first_day
    end = end or date.fromisoformat(days[-1])
    if end < start:
        raise EmptySeriesError(f"Empty window {start} to {end}")

    earlier = [d for d in days if d <= start.isoformat()]
    last_value = observed[earlier[-1] if earlier else days[0]]
    filled = 0
    points: list[GoldPoint] = []
    current = start
    while current <= end:
        key = current.isoformat()
        if key in observed:
            last_value = observed[key]
        else:
            filled += 1
        points.append(GoldPoint(date=key, time=day_to_time(key), value=last_value))
        current += timedelta(days=1)

    if filled:
        logger.debug("Forward-filled %d of %d days", filled, len(points))
    return points


def rates_to_anchors(rates: Mapping[str, float]) -> list[Anchor]:
    """Turn a per-day rate mapping into anchors, dropping empty observations."""
    return [Anchor(date=d, value=v) for d, v in sorted(rates.items()) if v and v > 0]


def points_to_anchors(points: Iterable[GoldPoint]) -> list[Anchor]:
    return [Anchor(date=p.date, value=p.value) for p in points]
