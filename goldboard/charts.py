"""Price history statistics for GoldBoard."""

from .models import GoldPoint, GoldStats
from .series import DAY_MS


def high_low(points: list[GoldPoint]) -> GoldStats | None:
    """Lowest and highest value in the points, None when there are none."""
    if not points:
        return None

    low = high = points[0].value
    for point in points[1:]:
        if point.value < low:
            low = point.value
        elif point.value > high:
            high = point.value

    return GoldStats(low=low, high=high)


def change_over_days(points: list[GoldPoint], lag_days: int) -> float | None:
    """Fractional change of the latest point against lag_days earlier.

    Compares with the most recent point at or before the lag. Returns None
    when the series does not reach back that far, or when the earlier price
    is zero and the ratio would not be finite.
    """
    if not points:
        return None

    latest = points[-1]
    target = latest.time - lag_days * DAY_MS

    prior = next((p for p in reversed(points) if p.time <= target), None)
    if prior is None or prior.value == 0:
        return None

    return (latest.value - prior.value) / prior.value


def resample(values: list[float], target_points: int) -> list[float]:
    """Stretch or squeeze values onto target_points evenly spaced samples."""
    if not values or target_points <= 0:
        return []
    if len(values) == target_points:
        return list(values)
    if len(values) == 1 or target_points == 1:
        return values[-1:] * target_points

    last = len(values) - 1
    step = last / (target_points - 1)
    out = []
    for i in range(target_points):
        pos = i * step
        lo = min(int(pos), last - 1)
        out.append(values[lo] + (values[lo + 1] - values[lo]) * (pos - lo))
    return out
