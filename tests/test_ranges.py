import pytest

from goldboard.models import GoldUnit, RangeKind, RangeSpec
from goldboard.ranges import (
    RECENT_RANGE,
    build_href,
    month_options,
    resolve_range,
    resolve_unit,
    slice_range,
    step_range,
    year_options,
)

from conftest import make_points


class TestResolveRange:
    """Test parsing of untrusted range keys."""

    def test_recent(self):
        assert resolve_range("recent") == RECENT_RANGE
        assert RECENT_RANGE.days == 14

    @pytest.mark.parametrize("key", [None, "", "   ", []])
    def test_missing_key_is_recent(self, key):
        assert resolve_range(key) == RECENT_RANGE

    def test_month(self):
        range_spec = resolve_range("month-2024-03")
        assert range_spec.kind == RangeKind.MONTH
        assert range_spec.year == "2024"
        assert range_spec.month == "03"
        assert range_spec.key == "month-2024-03"
        assert range_spec.label == "March 2024"

    def test_case_insensitive(self):
        assert resolve_range("MONTH-2024-03") == RangeSpec.for_month("2024", "03")

    def test_year(self):
        range_spec = resolve_range("year-2023")
        assert range_spec.kind == RangeKind.YEAR
        assert range_spec.year == "2023"
        assert range_spec.label == "2023"

    def test_first_list_item_wins(self):
        assert resolve_range(["year-2022", "year-2021"]).year == "2022"

    @pytest.mark.parametrize(
        "key",
        [
            "month-abc-13",
            "month-2024-13",
            "month-2024-00",
            "month-2024-3",
            "month-24-03",
            "month-2024-03-01",
            "year-23",
            "year-20234",
            "year-abcd",
            "year-0000",
            "weekly",
        ],
    )
    def test_malformed_keys_fall_back_to_recent(self, key):
        assert resolve_range(key) == resolve_range("recent")

    @pytest.mark.parametrize(
        "key", [" month-2024-03 ", "year-2023 ", "month-2024-03\n", "\tyear-2023"]
    )
    def test_padded_keys_are_not_trimmed(self, key):
        assert resolve_range(key) == RECENT_RANGE

    def test_year_zero_rejected_like_month_year_zero(self):
        assert resolve_range("year-0000") == RECENT_RANGE
        assert resolve_range("month-0000-05") == RECENT_RANGE
        assert resolve_range("year-0001") == RangeSpec.for_year("0001")


class TestResolveUnit:
    """Test unit parameter parsing."""

    def test_known_units(self):
        assert resolve_unit("oz") == GoldUnit.OUNCE
        assert resolve_unit("g") == GoldUnit.GRAM
        assert resolve_unit(["g"]) == GoldUnit.GRAM

    @pytest.mark.parametrize("value", [None, "", "kg", []])
    def test_unknown_defaults_to_ounce(self, value):
        assert resolve_unit(value) == GoldUnit.OUNCE

    def test_unit_suffix(self):
        assert GoldUnit.GRAM.suffix == "USD/g"
        assert GoldUnit.OUNCE.suffix == "USD/oz"


class TestBuildHref:
    """Test links that leave default parameters out."""

    def test_defaults(self):
        assert build_href("recent", GoldUnit.OUNCE) == "/"

    def test_range_only(self):
        assert build_href("year-2023", GoldUnit.OUNCE) == "/?range=year-2023"

    def test_range_and_unit(self):
        assert build_href("month-2024-03", GoldUnit.GRAM) == "/?range=month-2024-03&unit=g"


class TestSliceRange:
    """Test range selection over a dense series."""

    def test_recent_boundary_is_inclusive(self):
        points = make_points(range(2000, 2011))  # 2024-01-01 .. 2024-01-11
        sliced = slice_range(points, RangeSpec.recent(5), points[-1])
        assert len(sliced) == 6
        assert sliced[0].date == "2024-01-06"
        assert sliced[-1].date == "2024-01-11"

    def test_month(self):
        points = make_points([1.0] * 60)  # Jan 1 .. Feb 29 2024
        sliced = slice_range(points, RangeSpec.for_month("2024", "02"), points[-1])
        assert len(sliced) == 29
        assert all(p.date.startswith("2024-02") for p in sliced)

    def test_year(self):
        points = make_points([1.0] * 10, start="2023-12-27")
        sliced = slice_range(points, RangeSpec.for_year("2024"), points[-1])
        assert [p.date for p in sliced][:2] == ["2024-01-01", "2024-01-02"]
        assert len(sliced) == 5

    def test_empty_month_returns_full_series(self):
        points = make_points([1.0, 2.0, 3.0])
        sliced = slice_range(points, RangeSpec.for_month("2019", "07"), points[-1])
        assert sliced == points

    def test_empty_input(self):
        assert slice_range([], RECENT_RANGE, make_points([1.0])[0]) == []


class TestRangeOptions:
    """Test the selectable month and year ranges."""

    def test_months_cross_year_boundary(self):
        options = month_options("2024-02-15", count=3)
        assert [o.key for o in options] == ["month-2024-02", "month-2024-01", "month-2023-12"]

    def test_years(self):
        options = year_options("2024-02-15", count=3)
        assert [o.key for o in options] == ["year-2024", "year-2023", "year-2022"]

    def test_default_counts(self):
        assert len(month_options("2024-02-15")) == 12
        assert len(year_options("2024-02-15")) == 10

    def test_step_month_back_and_forward(self):
        current = RangeSpec.for_month("2024", "01")
        assert step_range(current, "2024-02-15", 1).key == "month-2023-12"
        assert step_range(current, "2024-02-15", -1).key == "month-2024-02"

    def test_step_recent_is_unchanged(self):
        assert step_range(RECENT_RANGE, "2024-02-15", 1) == RECENT_RANGE
