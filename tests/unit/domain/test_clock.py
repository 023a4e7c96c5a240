"""Tests for Clock abstraction and timestamp helpers"""

from datetime import datetime, timedelta, timezone

import pytest

from mediguard.domain import FixedClock, SystemClock, ensure_utc, parse_timestamp


class TestSystemClock:
    """Tests for SystemClock"""

    def test_now_returns_utc_datetime(self):
        """SystemClock.now() returns timezone-aware UTC datetime"""
        now = SystemClock().now()

        assert isinstance(now, datetime)
        assert now.tzinfo == timezone.utc

    def test_now_is_close_to_wall_clock(self):
        before = datetime.now(timezone.utc)
        now = SystemClock().now()
        after = datetime.now(timezone.utc)

        assert before <= now <= after


class TestFixedClock:
    """Tests for FixedClock"""

    def test_now_returns_fixed_time(self, fixed_clock: FixedClock):
        assert fixed_clock.now() == datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        assert fixed_clock.now() == fixed_clock.now()

    def test_advance_by_timedelta(self, fixed_clock: FixedClock):
        initial = fixed_clock.now()
        fixed_clock.advance(timedelta(minutes=5))

        assert fixed_clock.now() == initial + timedelta(minutes=5)

    def test_advance_by_seconds(self, fixed_clock: FixedClock):
        """advance() accepts plain seconds, as poll intervals are configured"""
        initial = fixed_clock.now()
        fixed_clock.advance(1.5)
        fixed_clock.advance(2)

        assert fixed_clock.now() == initial + timedelta(seconds=3.5)

    def test_set_changes_time(self, fixed_clock: FixedClock):
        new_time = datetime(2025, 6, 30, 18, 45, 0, tzinfo=timezone.utc)
        fixed_clock.set(new_time)

        assert fixed_clock.now() == new_time

    def test_naive_datetime_is_taken_as_utc(self):
        clock = FixedClock(datetime(2024, 1, 1, 12, 0, 0))

        assert clock.now().tzinfo == timezone.utc
        assert clock.now().hour == 12

    def test_aware_datetime_is_converted_to_utc(self):
        """12:00 at UTC-5 is 17:00 UTC"""
        est = timezone(timedelta(hours=-5))
        clock = FixedClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=est))

        assert clock.now().tzinfo == timezone.utc
        assert clock.now().hour == 17


class TestTimestamps:
    """Tests for ensure_utc and parse_timestamp"""

    def test_ensure_utc_converts_offsets(self):
        ist = timezone(timedelta(hours=5, minutes=30))
        value = ensure_utc(datetime(2024, 1, 15, 17, 30, tzinfo=ist))

        assert value == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def test_parse_trailing_z(self):
        """JavaScript toISOString() output"""
        value = parse_timestamp("2024-01-15T12:00:00.123Z")

        assert value == datetime(2024, 1, 15, 12, 0, 0, 123000, tzinfo=timezone.utc)

    def test_parse_explicit_offset(self):
        value = parse_timestamp("2024-01-15T13:00:00+01:00")

        assert value == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def test_parse_passes_datetimes_through(self):
        value = parse_timestamp(datetime(2024, 1, 15, 12, 0))

        assert value.tzinfo == timezone.utc

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")
