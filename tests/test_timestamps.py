"""Tests for timestamp normalization utilities."""

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

import pytest
from dateutil.tz import tzoffset

from shell_scheduler.utils.timestamps import normalize_timestamp, resolve_timezone


class TestNormalizeTimestamp:
    """Tests for normalize_timestamp function."""

    def test_second_timestamp(self) -> None:
        """Second timestamps are correctly converted."""
        # 2024-01-12 18:40:00 UTC in seconds
        result = normalize_timestamp(1705084800)
        assert result == datetime(2024, 1, 12, 18, 40, tzinfo=timezone.utc)

    def test_millisecond_timestamp(self) -> None:
        """Millisecond timestamps are detected by magnitude."""
        result = normalize_timestamp(1705084800000)
        assert result == datetime(2024, 1, 12, 18, 40, tzinfo=timezone.utc)

    def test_iso_string_with_z(self) -> None:
        """ISO strings with Z suffix are parsed correctly."""
        result = normalize_timestamp("2026-10-19T20:00:00Z")
        assert result == datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)

    def test_iso_string_with_offset(self) -> None:
        """ISO strings with timezone offset are converted to UTC."""
        result = normalize_timestamp("2026-10-19T15:00:00-05:00")
        assert result == datetime(2026, 10, 19, 20, 0, tzinfo=timezone.utc)

    def test_free_form_string(self) -> None:
        """Human-style dates are accepted."""
        result = normalize_timestamp("Oct 19 2026 2:30pm")
        assert result == datetime(2026, 10, 19, 14, 30, tzinfo=timezone.utc)

    def test_naive_string_uses_default_tz(self) -> None:
        """Naive strings are interpreted in default_tz."""
        berlin = ZoneInfo("Europe/Berlin")
        result = normalize_timestamp("2026-01-15 12:00", default_tz=berlin)
        # Berlin is UTC+1 in January
        assert result == datetime(2026, 1, 15, 11, 0, tzinfo=timezone.utc)

    def test_naive_datetime_defaults_to_utc(self) -> None:
        """Naive datetimes without default_tz are UTC."""
        result = normalize_timestamp(datetime(2026, 10, 19, 20, 0))
        assert result.hour == 20
        assert result.tzinfo == timezone.utc

    def test_aware_datetime_conversion(self) -> None:
        """Aware datetimes are converted to UTC."""
        eastern = tzoffset("EST", -5 * 3600)
        dt = datetime(2024, 1, 12, 15, 0, 0, tzinfo=eastern)
        result = normalize_timestamp(dt, default_tz=ZoneInfo("Asia/Tokyo"))
        assert result.hour == 20
        assert result.tzinfo == timezone.utc

    def test_invalid_type_raises_valueerror(self) -> None:
        """Invalid types raise ValueError."""
        with pytest.raises(ValueError, match="Cannot parse timestamp"):
            normalize_timestamp([1, 2, 3])

    def test_none_raises_valueerror(self) -> None:
        """None raises ValueError."""
        with pytest.raises(ValueError, match="Cannot parse timestamp"):
            normalize_timestamp(None)

    def test_bool_raises_valueerror(self) -> None:
        """Booleans are not epoch values."""
        with pytest.raises(ValueError, match="Cannot parse timestamp"):
            normalize_timestamp(True)

    def test_out_of_range_after_utc_shift_raises_valueerror(self) -> None:
        """Local times that fall outside datetime range in UTC raise ValueError."""
        new_york = ZoneInfo("America/New_York")
        with pytest.raises(ValueError, match="Cannot parse timestamp"):
            normalize_timestamp("9999-12-31 23:00", default_tz=new_york)

    @pytest.mark.parametrize("value", ["not a date", "", "   "])
    def test_invalid_string_raises_valueerror(self, value: str) -> None:
        """Unparseable strings raise ValueError."""
        with pytest.raises(ValueError, match="Cannot parse timestamp"):
            normalize_timestamp(value)


class TestResolveTimezone:
    """Tests for resolve_timezone function."""

    def test_named_zone(self) -> None:
        """IANA names resolve to ZoneInfo."""
        assert resolve_timezone("Europe/Berlin") == ZoneInfo("Europe/Berlin")

    @pytest.mark.parametrize("name", [None, ""])
    def test_local_fallback(self, name) -> None:
        """Missing name resolves to the host timezone."""
        result = resolve_timezone(name)
        assert isinstance(result, tzinfo)
        assert result.utcoffset(datetime.now()) is not None

    def test_unknown_zone_raises(self) -> None:
        """Unknown names raise."""
        with pytest.raises(Exception):
            resolve_timezone("Nowhere/Special")
