"""Wire the dashboard together from settings and the database engine."""
from datetime import datetime
from typing import Callable, Optional

from wellness.config import Settings, get_settings
from wellness.db.store import SqlKeyValueStore
from wellness.state.dashboard import Dashboard, local_now
from wellness.state.hydration import HydrationLedger
from wellness.state.solar import SolarRequirement
from wellness.state.wake_clock import WakeClock


def build_dashboard(
    engine=None,
    settings: Optional[Settings] = None,
    clock: Callable[[], datetime] = local_now,
) -> Dashboard:
    """
    Build a Dashboard backed by the SQL key-value store.

    The hydration ledger is loaded immediately and rolled over if the stored
    total belongs to another day.
    """
    if engine is None:
        from wellness.db.engine import get_engine
        engine = get_engine()
    settings = settings or get_settings()

    ledger = HydrationLedger(
        SqlKeyValueStore(engine),
        today=clock().date(),
        daily_goal_ml=settings.daily_goal_ml,
        default_amount_ml=settings.default_intake_amount_ml,
    )
    return Dashboard(
        WakeClock(),
        SolarRequirement(),
        ledger,
        clock=clock,
        user_name=settings.user_name,
    )
