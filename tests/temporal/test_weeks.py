"""Tests for ISO week and day bucketing."""

from datetime import date, datetime, timedelta, timezone

import pytest

from commit_attribution.temporal.weeks import (
    MS_PER_DAY,
    MS_PER_WEEK,
    day_start,
    format_ms,
    parse_timestamp,
    week_label,
    week_number,
    week_start,
)


def _weekday(ts_ms):
    return datetime.fromtimestamp(ts_ms / 1000, tz=timezone.utc).isoweekday()


class TestWeekStart:
    def test_year_boundary(self, ms):
        """Saturday 2022-01-01 belongs to the week of Monday 2021-12-27."""
        assert week_start(ms("2022-01-01T15:30:00Z")) == ms("2021-12-27T00:00:00Z")

    def test_sunday_goes_back_six_days(self, ms):
        assert week_start(ms("2024-03-10T23:59:59.999Z")) == ms("2024-03-04T00:00:00Z")

    def test_monday_midnight_unchanged(self, ms):
        monday = ms("2024-03-04T00:00:00Z")
        assert week_start(monday) == monday

    def test_before_epoch(self, ms):
        assert week_start(ms("1969-12-31T12:00:00Z")) == ms("1969-12-29T00:00:00Z")

    def test_always_monday_midnight_and_idempotent(self, ms):
        start = ms("2019-06-01T07:13:00Z")
        for i in range(0, 2500):
            ts = start + i * 37 * 3_600_000 + 1234
            ws = week_start(ts)
            assert ws % MS_PER_DAY == 0
            assert _weekday(ws) == 1
            assert ws <= ts < ws + MS_PER_WEEK
            assert week_start(ws) == ws


class TestWeekLabel:
    def test_iso_year_differs_from_calendar_year(self, ms):
        assert week_label(week_start(ms("2024-12-30T12:00:00Z"))) == "2025-W01"

    def test_week_53(self, ms):
        assert week_label(week_start(ms("2021-01-03T10:00:00Z"))) == "2020-W53"

    def test_zero_padded(self, ms):
        assert week_label(ms("2024-02-05T00:00:00Z")) == "2024-W06"

    def test_boundary_weeks_stay_in_range(self):
        for year in range(2000, 2031):
            for day in (date(year, 12, 29) + timedelta(days=i) for i in range(6)):
                ts = parse_timestamp(day)
                label = week_label(week_start(ts))
                assert 1 <= int(label.split("-W")[1]) <= 53
                assert 1 <= week_number(week_start(ts)) <= 53


class TestDayStart:
    def test_truncates_to_midnight(self, ms):
        assert day_start(ms("2024-05-17T23:59:59.999Z")) == ms("2024-05-17T00:00:00Z")

    def test_before_epoch(self, ms):
        assert day_start(-1) == -MS_PER_DAY


class TestParseTimestamp:
    def test_iso_with_z(self):
        assert parse_timestamp("2024-12-30T12:00:00Z") == 1_735_560_000_000

    def test_iso_with_offset(self):
        assert parse_timestamp("2024-12-30T14:00:00+02:00") == 1_735_560_000_000

    def test_millis(self):
        assert parse_timestamp("2024-01-01T00:00:00.250Z") == 1_704_067_200_250

    def test_numeric(self):
        assert parse_timestamp(1_735_560_000_000) == 1_735_560_000_000
        assert parse_timestamp("1735560000000") == 1_735_560_000_000

    def test_naive_datetime_is_utc(self):
        assert parse_timestamp(datetime(2024, 12, 30, 12)) == 1_735_560_000_000

    def test_date(self):
        assert parse_timestamp(date(1970, 1, 2)) == MS_PER_DAY

    @pytest.mark.parametrize("value", ["yesterday", "", True])
    def test_rejects(self, value):
        with pytest.raises(ValueError):
            parse_timestamp(value)


class TestFormatMs:
    def test_format(self, ms):
        assert format_ms(ms("2021-12-27T00:00:00Z")) == "2021-12-27T00:00:00.000Z"
        assert format_ms(1_704_067_200_250) == "2024-01-01T00:00:00.250Z"


@pytest.mark.slow
class TestWeekSweep:
    def test_every_week_1900_to_2100(self):
        """Consecutive weeks step W+1, or wrap to W01 after W52/W53."""
        ws = week_start(parse_timestamp(date(1900, 1, 1)))
        end = parse_timestamp(date(2101, 1, 1))
        prev_year, prev_week = None, None
        while ws < end:
            label = week_label(ws)
            year, week = int(label[:4]), int(label[6:])
            assert 1 <= week <= 53
            for day in range(7):
                assert week_label(week_start(ws + day * MS_PER_DAY + 1)) == label
            if prev_year is not None:
                if year == prev_year:
                    assert week == prev_week + 1
                else:
                    assert (year, week) == (prev_year + 1, 1)
                    assert prev_week in (52, 53)
            prev_year, prev_week = year, week
            ws += MS_PER_WEEK
