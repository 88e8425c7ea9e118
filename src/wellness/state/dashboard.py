"""
Dashboard aggregator.

Combines WakeClock, SolarRequirement and HydrationLedger into one immutable
DashboardSnapshot. The sub-engines never look at each other; this is the only
place their states meet.

Two things trigger recomputation:
  1. tick(now), driven at 1 Hz by the scheduler
  2. any input call (new wake time, weather reading, intake change)

Every recomputation builds a fresh snapshot, stores it as `latest`, and hands
it to subscribers before the call returns.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Callable, List, Optional

from wellness.state.hydration import HydrationLedger, HydrationState
from wellness.state.solar import SolarRequirement, SolarState
from wellness.state.wake_clock import LockState, WakeClock

logger = logging.getLogger(__name__)

# Month/day names spelled out so the banner does not depend on the C locale.
_WEEKDAYS = (
    "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY",
)
_MONTHS = (
    "JANUARY", "FEBRUARY", "MARCH", "APRIL", "MAY", "JUNE",
    "JULY", "AUGUST", "SEPTEMBER", "OCTOBER", "NOVEMBER", "DECEMBER",
)


class Greeting(str, Enum):
    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    EVENING = "EVENING"
    NIGHT = "NIGHT"

    @property
    def text(self) -> str:
        return f"GOOD {self.value}"


def greeting_for(now: datetime) -> Greeting:
    """Greeting for the local hour: [5,12) morning, [12,17) afternoon, [17,21) evening."""
    hour = now.hour
    if 5 <= hour < 12:
        return Greeting.MORNING
    if 12 <= hour < 17:
        return Greeting.AFTERNOON
    if 17 <= hour < 21:
        return Greeting.EVENING
    return Greeting.NIGHT


def format_date_label(day: date) -> str:
    """Upper-case banner such as "MONDAY, JANUARY 9"."""
    return f"{_WEEKDAYS[day.weekday()]}, {_MONTHS[day.month - 1]} {day.day}"


def local_now() -> datetime:
    """Local wall-clock time truncated to the whole second."""
    return datetime.now().replace(microsecond=0)


@dataclass(frozen=True)
class DashboardSnapshot:
    """Everything the presentation layer needs for one frame."""
    computed_at: datetime
    greeting: Greeting
    date_label: str
    caffeine: LockState
    solar: SolarState
    hydration: HydrationState
    user_name: str = ""

    @property
    def headline(self) -> str:
        """Greeting line, e.g. "GOOD MORNING, ALEX" or just "GOOD MORNING"."""
        name = self.user_name.strip()
        if not name:
            return self.greeting.text
        return f"{self.greeting.text}, {name.upper()}"


Listener = Callable[[DashboardSnapshot], None]


class Dashboard:
    """
    Owns the three sub-engines and the current snapshot.

    Args:
        wake_clock: caffeine lock engine.
        solar: sunlight requirement engine.
        ledger: hydration ledger (already loaded from storage).
        clock: returns the current local time; used when an input call is
               made without an explicit `now`.
        user_name: name shown after the greeting; empty shows no name.
    """

    def __init__(
        self,
        wake_clock: WakeClock,
        solar: SolarRequirement,
        ledger: HydrationLedger,
        clock: Callable[[], datetime] = local_now,
        user_name: str = "",
    ):
        self.wake_clock = wake_clock
        self.solar = solar
        self.ledger = ledger
        self._clock = clock
        self.user_name = user_name
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()
        self._latest: Optional[DashboardSnapshot] = None
        self._closed = False

    @property
    def latest(self) -> Optional[DashboardSnapshot]:
        """Most recently published snapshot, or None before the first one."""
        return self._latest

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    # ─── Pure read ────────────────────────────────────────────────────────────

    def snapshot(self, now: datetime) -> DashboardSnapshot:
        """Compute a snapshot for `now` without mutating or publishing anything."""
        with self._lock:
            return DashboardSnapshot(
                computed_at=now,
                greeting=greeting_for(now),
                date_label=format_date_label(now.date()),
                caffeine=self.wake_clock.lock_state(now),
                solar=self.solar.snapshot(),
                hydration=self.ledger.snapshot(),
                user_name=self.user_name,
            )

    # ─── Tick ─────────────────────────────────────────────────────────────────

    def tick(self, now: Optional[datetime] = None) -> Optional[DashboardSnapshot]:
        """Periodic recomputation. Rolls the hydration day over first if needed."""
        now = now or self._clock()
        with self._lock:
            if self._closed:
                return None
            self.ledger.check_rollover(now.date())
            return self._publish(now)

    # ─── Inputs ───────────────────────────────────────────────────────────────

    def set_wake_time(
        self, instant: Optional[datetime], now: Optional[datetime] = None
    ) -> Optional[DashboardSnapshot]:
        with self._lock:
            self.wake_clock.set_wake_time(instant)
            logger.info("Wake-up time set to %s", instant.isoformat() if instant else None)
            return self._recompute(now)

    def update_reading(
        self, uv_index: int, cloud_cover: float, now: Optional[datetime] = None
    ) -> Optional[DashboardSnapshot]:
        with self._lock:
            self.solar.update_reading(uv_index, cloud_cover)
            logger.info("Weather reading: UV %s, clouds %.0f%%", uv_index, cloud_cover * 100)
            return self._recompute(now)

    def update_exposure(
        self, minutes: int, now: Optional[datetime] = None
    ) -> Optional[DashboardSnapshot]:
        with self._lock:
            self.solar.update_exposure(minutes)
            return self._recompute(now)

    def add_intake(self, now: Optional[datetime] = None) -> Optional[DashboardSnapshot]:
        now = now or self._clock()
        with self._lock:
            self.ledger.check_rollover(now.date())
            self.ledger.add_intake()
            return self._recompute(now)

    def remove_intake(self, now: Optional[datetime] = None) -> Optional[DashboardSnapshot]:
        now = now or self._clock()
        with self._lock:
            self.ledger.check_rollover(now.date())
            self.ledger.remove_intake()
            return self._recompute(now)

    def set_pending_amount(
        self, text: str, now: Optional[datetime] = None
    ) -> Optional[DashboardSnapshot]:
        with self._lock:
            self.ledger.set_pending_amount(text)
            return self._recompute(now)

    def reset_daily(self, now: Optional[datetime] = None) -> Optional[DashboardSnapshot]:
        now = now or self._clock()
        with self._lock:
            self.ledger.reset_daily(now.date())
            return self._recompute(now)

    def close(self) -> None:
        """Stop publishing. Inputs still mutate state but nobody is notified."""
        with self._lock:
            self._closed = True
            self._listeners.clear()

    # ─── Internal helpers ─────────────────────────────────────────────────────

    def _recompute(self, now: Optional[datetime]) -> Optional[DashboardSnapshot]:
        if self._closed:
            return None
        return self._publish(now or self._clock())

    def _publish(self, now: datetime) -> DashboardSnapshot:
        snap = self.snapshot(now)
        self._latest = snap
        for listener in list(self._listeners):
            listener(snap)
        return snap
