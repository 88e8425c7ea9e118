"""
Post-wake caffeine lock.

Adenosine keeps clearing for roughly 90 minutes after waking; caffeine taken
inside that window masks it rather than helping. WakeClock tracks the most
recent wake-up instant reported by the sleep sensor and turns it into a
lock flag plus a MM:SS countdown.

Timestamps are local wall-clock datetimes. Whatever the sensor reports
replaces the previous instant wholesale.
"""
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

CLEARANCE_WINDOW = timedelta(minutes=90)

LOCKED_MESSAGE = "ADENOSINE CLEARING"
UNLOCKED_MESSAGE = "READY FOR CAFFEINE"


@dataclass(frozen=True)
class LockState:
    """Caffeine lock status at one instant."""
    locked: bool
    remaining_minutes: int
    remaining_seconds: int

    @property
    def remaining(self) -> timedelta:
        return timedelta(minutes=self.remaining_minutes, seconds=self.remaining_seconds)

    @property
    def countdown(self) -> str:
        """Countdown formatted as MM:SS."""
        return f"{self.remaining_minutes:02d}:{self.remaining_seconds:02d}"

    @property
    def message(self) -> str:
        return LOCKED_MESSAGE if self.locked else UNLOCKED_MESSAGE


def compute_lock_state(
    wake_up_instant: Optional[datetime],
    now: datetime,
    window: timedelta = CLEARANCE_WINDOW,
) -> LockState:
    """
    Derive the caffeine lock state for `now`.

    Args:
        wake_up_instant: last reported wake-up time, or None if the sensor
                         has not reported yet.
        now: current local time.
        window: clearance window length (90 minutes).

    Returns:
        LockState. With no wake-up instant the full window is reported as
        remaining. Exactly `window` after waking counts as unlocked.
    """
    if wake_up_instant is None:
        return _locked_for(window.total_seconds())

    elapsed = now - wake_up_instant
    # A wake instant later than `now` (clock skew, late sensor data) never
    # extends the countdown past the full window.
    remaining = min(window - elapsed, window).total_seconds()

    if remaining > 0:
        return _locked_for(remaining)
    return LockState(locked=False, remaining_minutes=0, remaining_seconds=0)


def _locked_for(remaining_s: float) -> LockState:
    return LockState(
        locked=True,
        remaining_minutes=int(remaining_s // 60),
        remaining_seconds=int(remaining_s % 60),
    )


class WakeClock:
    """Holds the wake-up instant and answers lock-state queries."""

    def __init__(self, wake_up_instant: Optional[datetime] = None):
        self._wake_up_instant = wake_up_instant
        self._lock = threading.Lock()

    @property
    def wake_up_instant(self) -> Optional[datetime]:
        return self._wake_up_instant

    def set_wake_time(self, instant: Optional[datetime]) -> None:
        """Replace the stored wake-up instant (no merge with the old value)."""
        with self._lock:
            self._wake_up_instant = instant

    def lock_state(self, now: datetime) -> LockState:
        with self._lock:
            instant = self._wake_up_instant
        return compute_lock_state(instant, now)
