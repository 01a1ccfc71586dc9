import logging
from datetime import timedelta

import pytest

from factories import NOW, watched
from retention import RetentionFilter, latest_played, retention_str

DAY = timedelta(days=1)


class TestRetentionFilter:
    def test_played_before_retention_date_is_expired(self):
        retention = RetentionFilter(timedelta(hours=24), "Radarr")
        assert retention.is_expired(NOW - timedelta(hours=25), now=NOW)

    def test_played_after_retention_date_is_kept(self):
        retention = RetentionFilter(timedelta(hours=24), "Radarr")
        assert not retention.is_expired(NOW - timedelta(hours=23), now=NOW)

    def test_boundary_is_strict(self):
        retention = RetentionFilter(timedelta(hours=24), "Radarr")
        assert not retention.is_expired(NOW - timedelta(hours=24), now=NOW)

    def test_filter_keeps_only_expired_items(self):
        old = watched("Old", "1", hours_ago=25)
        recent = watched("Recent", "2", hours_ago=23)
        retention = RetentionFilter(timedelta(hours=24), "Radarr")

        assert retention.filter([old, recent], now=NOW) == [old]

    def test_filter_skips_items_without_last_played(self):
        never = watched("Never", "1", hours_ago=None)
        retention = RetentionFilter(DAY, "Radarr")

        assert retention.filter([never], now=NOW) == []

    def test_no_retention_passes_everything_with_warning(self, caplog):
        items = [watched("A", "1", hours_ago=1), watched("B", "2", hours_ago=None)]
        retention = RetentionFilter(None, "Radarr")

        with caplog.at_level(logging.WARNING):
            result = retention.filter(items, now=NOW)

        assert result == items
        assert "no retention period is set for Radarr" in caplog.text

    def test_no_retention_and_no_items_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert RetentionFilter(None, "Sonarr").filter([], now=NOW) == []
        assert caplog.text == ""

    @pytest.mark.parametrize("retention_period", [None, DAY])
    def test_favorites_are_always_excluded(self, retention_period):
        favorite = watched("Fav", "1", hours_ago=24 * 30, is_favorite=True)
        retention = RetentionFilter(retention_period, "Radarr")

        assert retention.filter([favorite], now=NOW) == []

    def test_custom_last_played_accessor(self):
        groups = [("show", [NOW - 3 * DAY, NOW - timedelta(hours=1)])]
        retention = RetentionFilter(DAY, "Sonarr")

        result = retention.filter(
            groups,
            last_played=lambda g: latest_played(g[1]),
            name=lambda g: g[0],
            favorite=lambda g: False,
            now=NOW,
        )

        # the most recently watched episode decides
        assert result == []


class TestRetentionStr:
    def test_nothing_left(self):
        assert retention_str(NOW - timedelta(hours=1), NOW) == "0"

    def test_zero(self):
        assert retention_str(NOW, NOW) == "0"

    def test_one_day(self):
        assert retention_str(NOW, NOW - timedelta(days=1, minutes=5)) == "1 day"

    def test_days(self):
        assert retention_str(NOW, NOW - timedelta(days=3, minutes=5)) == "3 days"

    def test_one_hour(self):
        assert retention_str(NOW, NOW - timedelta(hours=1)) == "1 hour"

    def test_hours(self):
        assert retention_str(NOW, NOW - timedelta(hours=13)) == "13 hours"

    def test_one_minute(self):
        assert retention_str(NOW, NOW - timedelta(seconds=70)) == "1 minute"

    def test_minutes(self):
        assert retention_str(NOW, NOW - timedelta(seconds=125)) == "2 minutes"


def test_latest_played_ignores_missing_dates():
    assert latest_played([None, NOW - DAY, NOW, None]) == NOW
    assert latest_played([None]) is None
