"""
Daily water intake ledger.

Intake is tracked in millilitres against a daily goal and always stays in
[0, goal]. The running total and the date it belongs to are written to the
key-value store on every change, so a restart later the same day picks up
where it left off and a restart on a new day starts from zero.
"""
import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Mapping, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_GOAL_ML = 4000
DEFAULT_AMOUNT_ML = 250

INTAKE_KEY = "hydration.current_intake_ml"
DATE_KEY = "hydration.last_saved_date"


class KeyValueStore(Protocol):
    """Storage capability the ledger persists through."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def set_many(self, values: Mapping[str, str]) -> None:
        """Write every key together; a failure writes none of them."""
        ...


def parse_amount(text: Optional[str], default: int = DEFAULT_AMOUNT_ML) -> int:
    """
    Parse a user-typed increment.

    Returns `default` for anything that is not a positive integer
    ("", "abc", "0", "-50", "12.5").
    """
    if text is None:
        return default
    try:
        value = int(text.strip())
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True)
class HydrationState:
    current_ml: int
    goal_ml: int
    progress: float
    pending_amount_ml: int

    @property
    def current_liters_text(self) -> str:
        return f"{self.current_ml / 1000:.1f}"

    @property
    def goal_liters_text(self) -> str:
        return f"{self.goal_ml / 1000:.0f}"


class HydrationLedger:
    """
    Persistent intake counter with day rollover.

    Args:
        store: key-value storage capability.
        today: local calendar date at start-up; a stored total from any other
               date is discarded.
        daily_goal_ml: upper bound for the running total (must be > 0).
        default_amount_ml: increment used when the pending text is invalid.
    """

    def __init__(
        self,
        store: KeyValueStore,
        today: date,
        daily_goal_ml: int = DEFAULT_GOAL_ML,
        default_amount_ml: int = DEFAULT_AMOUNT_ML,
    ):
        if daily_goal_ml <= 0:
            raise ValueError(f"daily_goal_ml must be positive, got {daily_goal_ml}")
        self._store = store
        self._goal_ml = daily_goal_ml
        self._default_amount_ml = default_amount_ml
        self._pending_text = str(default_amount_ml)
        self._lock = threading.RLock()

        self._current_ml = self._load_intake()
        self._last_saved_date = self._load_date()
        self.check_rollover(today)

    # ─── Properties ───────────────────────────────────────────────────────────

    @property
    def current_intake_ml(self) -> int:
        return self._current_ml

    @property
    def daily_goal_ml(self) -> int:
        return self._goal_ml

    @property
    def last_saved_date(self) -> Optional[date]:
        return self._last_saved_date

    @property
    def pending_amount_text(self) -> str:
        return self._pending_text

    @property
    def pending_amount_ml(self) -> int:
        """Effective increment, evaluated from the current text."""
        return parse_amount(self._pending_text, self._default_amount_ml)

    # ─── Mutations ────────────────────────────────────────────────────────────

    def set_pending_amount(self, text: str) -> None:
        with self._lock:
            self._pending_text = text

    def add_intake(self) -> None:
        with self._lock:
            self._current_ml = min(self._current_ml + self.pending_amount_ml, self._goal_ml)
            self._persist()

    def remove_intake(self) -> None:
        with self._lock:
            self._current_ml = max(self._current_ml - self.pending_amount_ml, 0)
            self._persist()

    def reset_daily(self, today: Optional[date] = None) -> None:
        """Zero the running total and stamp it with `today` (defaults to date.today())."""
        with self._lock:
            self._current_ml = 0
            self._last_saved_date = today or date.today()
            self._persist()

    def check_rollover(self, today: date) -> bool:
        """Reset if the stored total belongs to another day. Returns True on reset."""
        with self._lock:
            if self._last_saved_date == today:
                return False
            logger.info(
                "Hydration rollover: %s -> %s (discarding %d ml)",
                self._last_saved_date,
                today,
                self._current_ml,
            )
            self.reset_daily(today)
            return True

    def snapshot(self) -> HydrationState:
        with self._lock:
            current = self._current_ml
            pending = self.pending_amount_ml
        return HydrationState(
            current_ml=current,
            goal_ml=self._goal_ml,
            progress=min(current / self._goal_ml, 1.0),
            pending_amount_ml=pending,
        )

    # ─── Persistence ──────────────────────────────────────────────────────────

    def _persist(self) -> None:
        self._store.set_many({
            INTAKE_KEY: str(self._current_ml),
            DATE_KEY: self._last_saved_date.isoformat(),
        })

    def _load_intake(self) -> int:
        raw = self._store.get(INTAKE_KEY)
        if raw is None:
            return 0
        try:
            value = int(raw)
        except ValueError:
            logger.warning("Ignoring unreadable stored intake %r", raw)
            return 0
        return max(0, min(value, self._goal_ml))

    def _load_date(self) -> Optional[date]:
        raw = self._store.get(DATE_KEY)
        if raw is None:
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            logger.warning("Ignoring unreadable stored date %r", raw)
            return None
