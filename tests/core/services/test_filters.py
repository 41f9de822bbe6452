"""测试解码后的记录过滤."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from dukafeed.core.config.options import build_options
from dukafeed.core.models import Bar, Tick
from dukafeed.core.services.filters import apply_filters, filter_flats, scale_volume, shift_time, trim_range


def utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def bar(hour: int, volume: float) -> Bar:
    return Bar(time=utc(2024, 1, 2, hour), open=1.0, high=2.0, low=0.5, close=1.5, volume=volume)


def tick(hour: int, minute: int = 0) -> Tick:
    return Tick(time=utc(2024, 1, 2, hour, minute), ask=1.1, bid=1.0, ask_volume=0.0, bid_volume=0.5)


class TestFilters:
    """测试单个过滤器."""

    def test_filter_flats_drops_zero_volume_bars(self):
        records = [bar(0, 0.0), bar(1, 2.0), bar(2, 0)]
        assert [r.time.hour for r in filter_flats(records)] == [1]

    def test_filter_flats_keeps_ticks(self):
        """零成交量的 tick 不受影响."""
        records = [Tick(time=utc(2024, 1, 2), ask=1.0, bid=1.0, ask_volume=0.0, bid_volume=0.0)]
        assert list(filter_flats(records)) == records

    def test_scale_volume(self):
        scaled = list(scale_volume([bar(0, 1.5), tick(1)], 1000))
        assert scaled[0].volume == 1500.0
        assert scaled[1].bid_volume == 500.0

    def test_scale_volume_identity(self):
        records = [bar(0, 1.5)]
        assert list(scale_volume(records, 1)) == records

    def test_shift_time_fixed_offset(self):
        shifted = list(shift_time([bar(3, 1.0)], None, timedelta(hours=2)))
        assert shifted[0].time == utc(2024, 1, 2, 5)

    def test_shift_time_timezone_keeps_instant(self):
        shifted = list(shift_time([bar(15, 1.0)], "America/New_York", timedelta(0)))[0]

        assert shifted.time == utc(2024, 1, 2, 15)
        assert shifted.time.tzinfo == ZoneInfo("America/New_York")
        assert shifted.time.hour == 10

    def test_trim_range_half_open(self):
        records = [tick(0), tick(1), tick(2)]
        kept = list(trim_range(records, utc(2024, 1, 2, 1), utc(2024, 1, 2, 2)))
        assert [r.time.hour for r in kept] == [1]


class TestApplyFilters:
    """测试过滤器组合."""

    def test_defaults(self):
        options = build_options("EUR/USD", from_=utc(2024, 1, 2, 1), to=utc(2024, 1, 2, 3))
        records = [bar(0, 1.0), bar(1, 0.0), bar(2, 2.0), bar(3, 1.0)]

        result = list(apply_filters(records, options))

        assert [(r.time.hour, r.volume) for r in result] == [(2, 2.0)]

    def test_ignore_flats_disabled_and_volume_units(self):
        options = build_options(
            "EUR/USD",
            from_=utc(2024, 1, 2),
            to=utc(2024, 1, 3),
            ignore_flats=False,
            volume_units="thousands",
        )
        result = list(apply_filters([bar(0, 0.0), bar(1, 2.0)], options))

        assert [r.volume for r in result] == [0.0, 2000.0]

    def test_offset_shift_trims_source_instants(self):
        """平移后仍按原始时刻裁剪."""
        options = build_options("EUR/USD", from_=utc(2024, 1, 2, 1), to=utc(2024, 1, 2, 3), utc_offset="02:00")
        result = list(apply_filters([bar(0, 1.0), bar(1, 1.0), bar(2, 1.0), bar(3, 1.0)], options))

        assert [r.time for r in result] == [utc(2024, 1, 2, 3), utc(2024, 1, 2, 4)]

    def test_timezone_shift(self):
        options = build_options("EUR/USD", from_=utc(2024, 1, 2), to=utc(2024, 1, 3), timezone="Europe/Zurich")
        result = list(apply_filters([bar(5, 1.0)], options))

        assert result[0].time.hour == 6
        assert result[0].time == utc(2024, 1, 2, 5)
