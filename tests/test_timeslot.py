from datetime import datetime

import pytest

from medsched.errors import InvalidFormat
from medsched.timeslot import (
    add_minutes,
    clock_time,
    normalize_day,
    normalize_time,
    parse_time,
    weekday_name,
)


class TestParseTime:
    @pytest.mark.parametrize("value, expected", [("9:30", (9, 30)), ("23:59", (23, 59)), ("00:00", (0, 0))])
    def test_accepts(self, value, expected):
        assert parse_time(value) == expected

    @pytest.mark.parametrize("value", ["24:00", "9:60", "9-30", "930", "", "9:5", "123:00", None])
    def test_rejects(self, value):
        with pytest.raises(InvalidFormat):
            parse_time(value)

    def test_invalid_format_is_a_value_error(self):
        with pytest.raises(ValueError):
            parse_time("noon")

    def test_normalize_pads_hour(self):
        assert normalize_time(" 9:05 ") == "09:05"


class TestAddMinutes:
    def test_simple(self):
        assert add_minutes("10:00", 10) == "10:10"

    def test_minute_rollover(self):
        assert add_minutes("10:55", 10) == "11:05"

    def test_wraps_past_midnight(self):
        assert add_minutes("23:55", 10) == "00:05"

    def test_negative_delta(self):
        assert add_minutes("00:05", -10) == "23:55"


class TestDays:
    def test_normalize_day_casing(self):
        assert normalize_day(" WEDNESDAY ") == "Wednesday"
        assert normalize_day("monday") == "Monday"

    def test_weekday_name_is_locale_independent(self):
        # 2026-10-21 is a Wednesday
        moment = datetime(2026, 10, 21, 14, 30)
        assert weekday_name(moment) == "Wednesday"
        assert clock_time(moment) == "14:30"
