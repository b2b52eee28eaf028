"""
Tests for the time and day length formatters and the display record.
"""

import pytest

from services.formatting import (
    DEFAULT_TIMEZONE,
    NOT_AVAILABLE,
    format_day_length,
    format_time,
    to_display_record,
)


class TestFormatTime:
    @pytest.mark.parametrize("value", [None, "", "   ", "N/A"])
    def test_missing_values(self, value):
        assert format_time(value) == NOT_AVAILABLE

    def test_strips_seconds_from_12_hour_clock(self):
        assert format_time("7:15:18 AM") == "7:15 AM"
        assert format_time("12:01:59 PM") == "12:01 PM"

    def test_keeps_24_hour_digits_before_marker(self):
        assert format_time("20:30:00 PM") == "20:30 PM"

    def test_lowercase_marker(self):
        assert format_time("7:15:18 am") == "7:15 am"

    def test_time_without_seconds_is_unchanged(self):
        assert format_time("7:15 AM") == "7:15 AM"

    def test_utc_timestamp(self):
        assert format_time("2024-06-01T07:15:00Z") == "07:15 AM"

    def test_timestamp_with_offset_is_shown_in_utc(self):
        assert format_time("2024-06-01T09:15:00+02:00") == "07:15 AM"

    def test_naive_timestamp_is_treated_as_utc(self):
        assert format_time("2024-06-01 19:05:00") == "07:05 PM"

    def test_unknown_shape_passes_through(self):
        assert format_time("around noon") == "around noon"

    def test_broken_timestamp_passes_through(self):
        assert format_time("2024-13-45T07:15:00") == "2024-13-45T07:15:00"


class TestFormatDayLength:
    @pytest.mark.parametrize("value", [None, "", "N/A"])
    def test_missing_values(self, value):
        assert format_day_length(value) == NOT_AVAILABLE

    def test_canonical_passthrough(self):
        assert format_day_length("13h 17m") == "13h 17m"

    def test_hours_minutes(self):
        assert format_day_length("13:17") == "13h 17m"

    def test_hours_minutes_seconds_drops_seconds(self):
        assert format_day_length("13:17:38") == "13h 17m"

    def test_leading_zeros_are_dropped(self):
        assert format_day_length("08:05") == "8h 5m"

    def test_non_numeric_clock_component_gives_sentinel(self):
        assert format_day_length("ab:cd") == NOT_AVAILABLE
        assert format_day_length("13:xx") == NOT_AVAILABLE

    def test_integer_seconds(self):
        assert format_day_length(47820) == "13h 17m"

    def test_seconds_are_truncated_not_rounded(self):
        assert format_day_length(47879) == "13h 17m"

    def test_float_seconds(self):
        assert format_day_length(47820.9) == "13h 17m"

    def test_seconds_as_string(self):
        assert format_day_length("47820") == "13h 17m"

    def test_zero_seconds(self):
        assert format_day_length(0) == "0h 0m"

    def test_polar_day(self):
        assert format_day_length(86400) == "24h 0m"

    def test_unparseable_passes_through(self):
        assert format_day_length("long") == "long"

    def test_negative_seconds_pass_through(self):
        assert format_day_length(-60) == "-60"


class TestDisplayRecord:
    def test_maps_every_field(self, sample_results):
        record = to_display_record(sample_results)
        assert record.sunrise == "7:15 AM"
        assert record.sunset == "20:30 PM"
        assert record.dawn == "6:44 AM"
        assert record.dusk == "9:01 PM"
        assert record.solar_noon == "1:52 PM"
        assert record.day_length == "13h 17m"
        assert record.timezone == "America/New_York"

    def test_missing_fields_become_sentinels(self):
        record = to_display_record({"sunrise": "7:15:18 AM"})
        assert record.sunset == NOT_AVAILABLE
        assert record.day_length == NOT_AVAILABLE
        assert record.timezone == DEFAULT_TIMEZONE

    def test_empty_record(self):
        record = to_display_record(None)
        assert set(record.to_dict().values()) == {NOT_AVAILABLE, DEFAULT_TIMEZONE}

    def test_machine_mode_record(self):
        record = to_display_record({
            "sunrise": "2024-06-01T09:25:13+00:00",
            "sunset": "2024-06-02T00:31:07+00:00",
            "day_length": 54354,
            "timezone": "UTC",
        })
        assert record.sunrise == "09:25 AM"
        assert record.sunset == "12:31 AM"
        assert record.day_length == "15h 5m"
