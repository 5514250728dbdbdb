"""Tests for relative and absolute revision timestamps."""

from datetime import datetime, timedelta, UTC

import pytest

from builder_history.lib.humanize import format_revision_date, human_time_diff

BASE = datetime(2026, 3, 4, 9, 7, tzinfo=UTC)


class TestHumanTimeDiff:
    @pytest.mark.parametrize(
        "delta, expected",
        [
            (timedelta(seconds=0), "1 min"),
            (timedelta(seconds=20), "1 min"),
            (timedelta(minutes=1), "1 min"),
            (timedelta(minutes=2, seconds=29), "2 mins"),
            (timedelta(minutes=2, seconds=30), "3 mins"),
            (timedelta(minutes=45), "45 mins"),
            (timedelta(hours=1), "1 hour"),
            (timedelta(hours=5), "5 hours"),
            (timedelta(days=1), "1 day"),
            (timedelta(days=6), "6 days"),
            (timedelta(days=7), "1 week"),
            (timedelta(days=21), "3 weeks"),
            (timedelta(days=30), "1 month"),
            (timedelta(days=200), "7 months"),
            (timedelta(days=365), "1 year"),
            (timedelta(days=800), "2 years"),
        ],
    )
    def test_buckets(self, delta, expected):
        """Test each unit bucket and its rounding."""
        assert human_time_diff(BASE - delta, BASE) == expected

    def test_order_does_not_matter(self):
        """Start and end may be swapped."""
        assert human_time_diff(BASE, BASE - timedelta(hours=3)) == "3 hours"

    def test_naive_datetimes_are_utc(self):
        """Naive datetimes are read as UTC."""
        naive = (BASE - timedelta(hours=2)).replace(tzinfo=None)

        assert human_time_diff(naive, BASE) == "2 hours"


class TestFormatRevisionDate:
    def test_default_utc(self):
        """Test the "M j @ H:i" format in UTC."""
        assert format_revision_date(BASE) == "Mar 4 @ 09:07"

    def test_converts_timezone(self):
        """Test conversion into the configured timezone."""
        assert format_revision_date(BASE, "Asia/Tokyo") == "Mar 4 @ 18:07"

    def test_day_has_no_leading_zero(self):
        """Single-digit days are not zero padded."""
        assert format_revision_date(datetime(2026, 1, 1, 0, 5, tzinfo=UTC)) == "Jan 1 @ 00:05"
