"""Tests for rolling per-account engagement statistics."""

import pytest

from osint_alerts.alerts.engagement import EngagementTracker


class TestEngagementTracker:
    """Test rolling window bookkeeping."""

    def test_unknown_account_has_zero_average(self):
        tracker = EngagementTracker()
        assert tracker.average("@nobody") == 0.0
        assert tracker.history("@nobody") == []

    def test_record_returns_previous_average(self):
        tracker = EngagementTracker()
        assert tracker.record("@a", 10) == 0.0
        assert tracker.record("@a", 30) == 10.0
        assert tracker.average("@a") == 20.0

    def test_average_is_mean_of_history(self):
        tracker = EngagementTracker()
        for value in (120, 100):
            tracker.record("@alice", value)
        assert tracker.average("@alice") == 110.0

    def test_window_truncates_oldest(self):
        tracker = EngagementTracker(window=3)
        assert tracker.window == 3
        for value in (100, 1, 2, 3):
            tracker.record("@a", value)

        assert tracker.history("@a") == [1, 2, 3]
        assert tracker.average("@a") == 2.0

    def test_default_window_is_twenty(self):
        tracker = EngagementTracker()
        for value in range(25):
            tracker.record("@a", value)

        history = tracker.history("@a")
        assert len(history) == 20
        assert history[0] == 5
        assert tracker.average("@a") == sum(history) / len(history)

    def test_accounts_are_independent(self):
        tracker = EngagementTracker()
        tracker.record("@a", 10)
        tracker.record("@b", 1000)

        assert tracker.average("@a") == 10.0
        assert tracker.average("@b") == 1000.0
        assert tracker.account_count == 2

    def test_invalid_window(self):
        with pytest.raises(ValueError):
            EngagementTracker(window=0)
