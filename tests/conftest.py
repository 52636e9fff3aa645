import pytest

from goldboard.models import Anchor, GoldPoint, SeriesSnapshot
from goldboard.series import DAY_MS, day_to_time, time_to_day


def make_points(values, start="2024-01-01"):
    """Daily points starting at start with the given values."""
    base = day_to_time(start)
    return [
        GoldPoint(date=time_to_day(base + i * DAY_MS), time=base + i * DAY_MS, value=value)
        for i, value in enumerate(values)
    ]


@pytest.fixture
def ten_day_anchors():
    return [
        Anchor(date="2024-01-01", value=2000),
        Anchor(date="2024-01-11", value=2100),
    ]


@pytest.fixture
def snapshot():
    """Roughly two months of sparse anchors."""
    return SeriesSnapshot(
        source="Test fixture",
        updated_at="2024-02-29",
        anchors=[
            Anchor(date="2024-02-29", value=2040.0),
            Anchor(date="2024-01-01", value=2000.0),
            Anchor(date="2024-01-31", value=2060.0),
            Anchor(date="2024-02-14", value=1990.0),
        ],
    )
