"""Chart range keys and range slicing."""

import re
from datetime import date
from urllib.parse import urlencode

from .models import GoldPoint, GoldUnit, RangeKind, RangeSpec
from .series import DAY_MS

DEFAULT_RECENT_DAYS = 14
RECENT_RANGE = RangeSpec.recent(DEFAULT_RECENT_DAYS)

_MONTH_KEY = re.compile(r"month-([0-9]{4})-([0-9]{2})")
_YEAR_KEY = re.compile(r"year-([0-9]{4})")


def _first(value: str | list[str] | None) -> str | None:
    """Repeated query parameters arrive as lists; only the first counts."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def resolve_range(key: str | list[str] | None) -> RangeSpec:
    """Parse a range key, falling back to the recent range for anything malformed."""
    normalized = (_first(key) or "").lower()

    if not normalized or normalized == RECENT_RANGE.key:
        return RECENT_RANGE

    if match := _MONTH_KEY.fullmatch(normalized):
        year, month = match.groups()
        if int(year) >= 1 and 1 <= int(month) <= 12:
            return RangeSpec.for_month(year, month)

    if match := _YEAR_KEY.fullmatch(normalized):
        year = match.group(1)
        if int(year) >= 1:
            return RangeSpec.for_year(year)

    return RECENT_RANGE


def resolve_unit(value: str | list[str] | None) -> GoldUnit:
    """Parse a unit value, defaulting to troy ounces."""
    try:
        return GoldUnit(_first(value))
    except ValueError:
        return GoldUnit.OUNCE


def build_href(range_key: str, unit: GoldUnit) -> str:
    """Link for a range/unit pair, leaving defaults out of the query."""
    params = {}
    if range_key != RECENT_RANGE.key:
        params["range"] = range_key
    if unit != GoldUnit.OUNCE:
        params["unit"] = unit.value
    query = urlencode(params)
    return f"/?{query}" if query else "/"


def slice_range(
    points: list[GoldPoint],
    range_spec: RangeSpec,
    latest: GoldPoint,
) -> list[GoldPoint]:
    """Points inside the range, or the whole series when none fall inside it."""
    if not points:
        return []

    match range_spec.kind:
        case RangeKind.RECENT:
            days = range_spec.days if range_spec.days is not None else DEFAULT_RECENT_DAYS
            cutoff = latest.time - days * DAY_MS
            sliced = [p for p in points if p.time >= cutoff]
        case RangeKind.MONTH if range_spec.year and range_spec.month:
            prefix = f"{range_spec.year}-{range_spec.month}"
            sliced = [p for p in points if p.date.startswith(prefix)]
        case RangeKind.YEAR if range_spec.year:
            sliced = [p for p in points if p.date.startswith(range_spec.year)]
        case _:
            return list(points)

    return sliced or list(points)


def month_options(latest_date: str, count: int = 12) -> list[RangeSpec]:
    """Month ranges counting back from the month of the latest data point."""
    try:
        base = date.fromisoformat(latest_date)
    except ValueError:
        base = date.today()

    options = []
    year, month = base.year, base.month
    for _ in range(count):
        options.append(RangeSpec.for_month(f"{year:04d}", f"{month:02d}"))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return options


def year_options(latest_date: str, count: int = 10) -> list[RangeSpec]:
    """Year ranges counting back from the year of the latest data point."""
    try:
        base_year = date.fromisoformat(latest_date).year
    except ValueError:
        base_year = date.today().year
    return [RangeSpec.for_year(f"{base_year - i:04d}") for i in range(count)]


def step_range(range_spec: RangeSpec, latest_date: str, offset: int) -> RangeSpec:
    """Move a month or year range by offset positions within its options.

    Positive offsets go back in time. Recent ranges are returned unchanged.
    """
    if range_spec.kind == RangeKind.MONTH:
        options = month_options(latest_date)
    elif range_spec.kind == RangeKind.YEAR:
        options = year_options(latest_date)
    else:
        return range_spec

    keys = [option.key for option in options]
    index = keys.index(range_spec.key) if range_spec.key in keys else 0
    return options[(index + offset) % len(options)]
