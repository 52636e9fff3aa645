"""Data models for GoldBoard."""

from datetime import date as calendar_date
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GoldUnit(str, Enum):
    """Units a gold price can be quoted in."""

    OUNCE = "oz"
    GRAM = "g"

    @property
    def label(self) -> str:
        return "Ounce" if self is GoldUnit.OUNCE else "Gram"

    @property
    def suffix(self) -> str:
        return f"USD/{self.value}"


class RangeKind(str, Enum):
    """Kinds of chart range."""

    RECENT = "recent"
    MONTH = "month"
    YEAR = "year"


class RangeSpec(BaseModel):
    """A selected chart range: recent N days, a calendar month or a year."""

    model_config = ConfigDict(frozen=True)

    kind: RangeKind
    key: str = Field(description="Range key, e.g. 'recent', 'month-2024-03', 'year-2023'")
    label: str
    days: int | None = Field(default=None, description="Trailing days for recent ranges")
    year: str | None = Field(default=None, description="Four digit year")
    month: str | None = Field(default=None, description="Two digit month")

    @classmethod
    def recent(cls, days: int = 14) -> "RangeSpec":
        return cls(kind=RangeKind.RECENT, key="recent", label="Recent", days=days)

    @classmethod
    def for_month(cls, year: str, month: str) -> "RangeSpec":
        label = datetime(int(year), int(month), 1).strftime("%B %Y")
        return cls(
            kind=RangeKind.MONTH,
            key=f"month-{year}-{month}",
            label=label,
            year=year,
            month=month,
        )

    @classmethod
    def for_year(cls, year: str) -> "RangeSpec":
        return cls(kind=RangeKind.YEAR, key=f"year-{year}", label=year, year=year)


class Anchor(BaseModel):
    """A source-provided price sample, USD per troy ounce."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$", description="Calendar day, YYYY-MM-DD")
    value: float = Field(gt=0, description="Price in USD per troy oz")

    @field_validator("date")
    @classmethod
    def _real_calendar_day(cls, value: str) -> str:
        # The pattern alone lets through days like 2024-02-30
        calendar_date.fromisoformat(value)
        return value


class GoldPoint(BaseModel):
    """One day of the dense daily series."""

    model_config = ConfigDict(frozen=True)

    date: str
    time: int = Field(description="Epoch milliseconds at UTC midnight of date")
    value: float


class GoldStats(BaseModel):
    """High/low over a run of points."""

    model_config = ConfigDict(frozen=True)

    low: float
    high: float


class GoldChanges(BaseModel):
    """Fractional changes against 1, 7 and 30 days ago."""

    model_config = ConfigDict(frozen=True)

    day1: float | None = None
    day7: float | None = None
    day30: float | None = None


class SeriesSnapshot(BaseModel):
    """A gold price series as handed over by a data source."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str = "Local snapshot"
    updated_at: str | None = Field(default=None, alias="updatedAt")
    anchors: list[Anchor] = Field(default_factory=list)


class GoldView(BaseModel):
    """Everything the dashboard shows for one range/unit request."""

    model_config = ConfigDict(frozen=True)

    latest: GoldPoint
    range: RangeSpec
    unit: GoldUnit
    unit_suffix: str
    source_label: str
    range_points: list[GoldPoint]
    range_stats: GoldStats
    year_stats: GoldStats
    last_updated: str
    changes: GoldChanges
    points_count: int


class FxRate(BaseModel):
    """Exchange rate quote: 1 base = rate quote."""

    model_config = ConfigDict(frozen=True)

    base: str = "USD"
    quote: str = "IDR"
    rate: float = Field(gt=0)
    updated_at: datetime | None = None
