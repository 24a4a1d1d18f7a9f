"""Rolling per-account engagement statistics for viral post detection."""

from collections import deque


class EngagementTracker:
    """
    Bounded engagement history per social account.

    Each account keeps its last ``window`` engagement scores; the account
    average is always the arithmetic mean of exactly those scores, so it
    can be reproduced from ``history()`` at any time.

    Usage:
        tracker = EngagementTracker(window=20)
        baseline = tracker.record("@alice", 15)  # 0.0, no history yet
        baseline = tracker.record("@alice", 50)  # 15.0
    """

    def __init__(self, window: int = 20) -> None:
        if window < 1:
            raise ValueError(f"window must be >= 1, got {window}")
        self._window = window
        self._history: dict[str, deque[int]] = {}
        self._averages: dict[str, float] = {}

    @property
    def window(self) -> int:
        return self._window

    @property
    def account_count(self) -> int:
        return len(self._history)

    def average(self, handle: str) -> float:
        """Current rolling average for an account (0.0 if unknown)."""
        return self._averages.get(handle, 0.0)

    def history(self, handle: str) -> list[int]:
        """Engagement scores currently in the account's window, oldest first."""
        return list(self._history.get(handle, ()))

    def record(self, handle: str, engagement: int) -> float:
        """
        Push an engagement score and recompute the account average.

        Args:
            handle: Account identity.
            engagement: Engagement score of the post being recorded.

        Returns:
            The account average *before* this score was added, which is the
            baseline the score should be compared against.
        """
        baseline = self.average(handle)

        history = self._history.get(handle)
        if history is None:
            history = deque(maxlen=self._window)
            self._history[handle] = history
        history.append(engagement)
        self._averages[handle] = sum(history) / len(history)

        return baseline
