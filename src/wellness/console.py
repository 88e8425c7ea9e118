"""
Plain-text rendering of a DashboardSnapshot for the terminal, and a
listener that logs only the transitions worth seeing (lock flips, greeting
changes, hydration changes) instead of every tick.
"""
import logging
from typing import Optional

from wellness.state.dashboard import DashboardSnapshot

logger = logging.getLogger(__name__)


def render_snapshot(snap: DashboardSnapshot) -> str:
    caffeine = snap.caffeine
    solar = snap.solar
    water = snap.hydration
    lines = [
        f"{snap.headline}  {snap.date_label}",
        f"  Caffeine  {caffeine.message:<20} {caffeine.countdown}",
        f"  Sunlight  UV {solar.uv_index:<3} {solar.required_text:<14} {solar.status_text}"
        f" ({solar.progress:.0%})",
        f"  Water     {water.current_liters_text} / {water.goal_liters_text} L"
        f" ({water.progress:.0%}, step {water.pending_amount_ml} ml)",
    ]
    return "\n".join(lines)


class TransitionLogger:
    """Dashboard listener: DEBUG every frame, INFO on visible changes."""

    def __init__(self):
        self._last: Optional[DashboardSnapshot] = None

    def __call__(self, snap: DashboardSnapshot) -> None:
        logger.debug("tick %s caffeine=%s", snap.computed_at.isoformat(), snap.caffeine.countdown)
        last = self._last
        self._last = snap
        if last is None:
            logger.info("\n%s", render_snapshot(snap))
            return
        if last.caffeine.locked != snap.caffeine.locked:
            logger.info("Caffeine: %s", snap.caffeine.message)
        if last.greeting != snap.greeting:
            logger.info("%s  %s", snap.headline, snap.date_label)
        if last.hydration.current_ml != snap.hydration.current_ml:
            logger.info(
                "Water: %s / %s L",
                snap.hydration.current_liters_text,
                snap.hydration.goal_liters_text,
            )
        if last.solar != snap.solar:
            logger.info("Sunlight: UV %d, %s", snap.solar.uv_index, snap.solar.status_text)
