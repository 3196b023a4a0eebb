"""Tests for calendar keys and week anchoring."""

from datetime import date, datetime, timedelta

import pytest

from weekly_keeper.engine.dates import (
    WeekAnchor,
    date_key_of,
    default_work_day_keys,
    from_timestamp_ms,
    is_settlement_day,
    month_key_of,
    parse_date_key,
    week_date_keys,
    week_range_label,
    week_start_key_of,
)


class TestDateKeys:
    """Tests for date keys."""

    def test_date_key_ignores_time_of_day(self):
        """Test that the time of day does not change the key."""
        assert date_key_of(datetime(2024, 3, 5, 23, 59)) == "2024-03-05"
        assert date_key_of(date(2024, 3, 5)) == "2024-03-05"

    def test_date_key_is_zero_padded(self):
        """Test that months and days are zero padded."""
        assert date_key_of(date(2024, 1, 2)) == "2024-01-02"

    def test_parse_is_inverse(self):
        """Test that parsing a key gives back the date."""
        assert parse_date_key(date_key_of(date(2023, 12, 31))) == date(2023, 12, 31)

    def test_month_key(self):
        """Test month key extraction."""
        assert month_key_of("2024-03-04") == "2024-03"

    def test_from_timestamp_ms(self):
        """Test conversion of epoch milliseconds to local time."""
        moment = datetime(2024, 3, 5, 7, 45)
        assert from_timestamp_ms(int(moment.timestamp() * 1000)) == moment


class TestWeekAnchoring:
    """Tests for mapping dates to week keys."""

    def test_sunday_under_stable_anchor_closes_its_week(self):
        """Test that a Sunday belongs to the week that started six days earlier."""
        assert week_start_key_of(date(2024, 3, 10)) == "2024-03-04"
        assert week_start_key_of(date(2024, 3, 10), WeekAnchor.STABLE) == "2024-03-04"

    def test_sunday_under_settlement_roll_opens_next_week(self):
        """Test that settlement roll files a Sunday under the next Monday."""
        assert week_start_key_of(date(2024, 3, 10), WeekAnchor.SETTLEMENT_ROLL) == "2024-03-11"

    def test_weekdays_same_under_both_anchors(self):
        """Test that Monday to Saturday map the same under both anchors."""
        for offset in range(6):
            day = date(2024, 3, 4) + timedelta(days=offset)
            assert week_start_key_of(day, WeekAnchor.STABLE) == "2024-03-04"
            assert week_start_key_of(day, WeekAnchor.SETTLEMENT_ROLL) == "2024-03-04"

    def test_every_day_of_week_maps_to_same_key(self):
        """Test that all seven days share one week key."""
        keys = {week_start_key_of(parse_date_key(k)) for k in week_date_keys("2024-03-04")}
        assert keys == {"2024-03-04"}

    @pytest.mark.parametrize("anchor", list(WeekAnchor))
    def test_week_key_is_idempotent(self, anchor):
        """Test that a week key maps to itself."""
        day = date(2024, 1, 1)
        for _ in range(60):
            key = week_start_key_of(day, anchor)
            assert week_start_key_of(parse_date_key(key), anchor) == key
            day += timedelta(days=1)

    def test_week_spanning_new_year(self):
        """Test a week that starts in December."""
        assert week_start_key_of(date(2025, 1, 1)) == "2024-12-30"

    def test_settlement_day_is_sunday(self):
        """Test that only Sunday is the settlement day."""
        assert is_settlement_day(date(2024, 3, 10))
        assert not is_settlement_day(date(2024, 3, 9))


class TestWeekDays:
    """Tests for the days of a week."""

    def test_week_date_keys(self):
        """Test the seven keys of a week crossing a month end."""
        assert week_date_keys("2024-02-26") == [
            "2024-02-26", "2024-02-27", "2024-02-28", "2024-02-29",
            "2024-03-01", "2024-03-02", "2024-03-03",
        ]

    def test_default_work_days_are_monday_to_saturday(self):
        """Test the default work days of a new week."""
        keys = default_work_day_keys("2024-03-04")
        assert keys[0] == "2024-03-04"
        assert keys[-1] == "2024-03-09"
        assert len(keys) == 6

    def test_range_label(self):
        """Test the range label within one year."""
        assert week_range_label("2024-03-04") == "Mar 4 - Mar 10, 2024"

    def test_range_label_across_years(self):
        """Test the range label across a new year."""
        assert week_range_label("2024-12-30") == "Dec 30, 2024 - Jan 5, 2025"
