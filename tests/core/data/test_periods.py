"""测试 UTC 周期计算."""

from datetime import datetime, timedelta, timezone

import pytest

from dukafeed.core.data.periods import as_utc, is_current, iter_periods, next_period, period_start
from dukafeed.core.models import TimeRange

MOMENT = datetime(2024, 12, 31, 23, 45, 12, 500, tzinfo=timezone.utc)


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class TestPeriodStart:
    """测试周期对齐."""

    @pytest.mark.parametrize(
        ("time_range", "expected"),
        [
            (TimeRange.YEAR, utc(2024, 1, 1)),
            (TimeRange.MONTH, utc(2024, 12, 1)),
            (TimeRange.DAY, utc(2024, 12, 31)),
            (TimeRange.HOUR, utc(2024, 12, 31, 23)),
        ],
    )
    def test_floor(self, time_range, expected):
        assert period_start(time_range, MOMENT) == expected

    def test_as_utc(self):
        assert as_utc(datetime(2024, 1, 1, 5)) == utc(2024, 1, 1, 5)
        assert as_utc(datetime(2024, 1, 1, 5, tzinfo=timezone(timedelta(hours=2)))) == utc(2024, 1, 1, 3)


class TestNextPeriod:
    """测试周期递进."""

    def test_month_wraps_year(self):
        assert next_period(TimeRange.MONTH, utc(2024, 12, 1)) == utc(2025, 1, 1)

    def test_day_crosses_leap_day(self):
        assert next_period(TimeRange.DAY, utc(2024, 2, 28)) == utc(2024, 2, 29)

    def test_iter_periods_half_open(self):
        periods = list(iter_periods(TimeRange.MONTH, utc(2024, 11, 15), utc(2025, 2, 1)))
        assert periods == [utc(2024, 11, 1), utc(2024, 12, 1), utc(2025, 1, 1)]

    def test_iter_periods_empty(self):
        assert list(iter_periods(TimeRange.HOUR, utc(2024, 1, 1), utc(2024, 1, 1))) == []


class TestIsCurrent:
    """测试当前周期判断."""

    def test_same_month_different_year(self):
        assert not is_current(TimeRange.MONTH, utc(2023, 12, 5), MOMENT)
        assert is_current(TimeRange.MONTH, utc(2024, 12, 5), MOMENT)

    def test_day(self):
        assert is_current(TimeRange.DAY, utc(2024, 12, 31, 1), MOMENT)
        assert not is_current(TimeRange.DAY, utc(2024, 12, 30, 23), MOMENT)
