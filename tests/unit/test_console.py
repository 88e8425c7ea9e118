"""Tests for terminal rendering and the transition-logging listener."""
import logging
from datetime import datetime, timedelta

import pytest

from wellness.console import TransitionLogger, render_snapshot
from wellness.state.dashboard import Dashboard
from wellness.state.hydration import HydrationLedger
from wellness.state.solar import SolarRequirement
from wellness.state.wake_clock import WakeClock

NOW = datetime(2025, 1, 13, 8, 0)


@pytest.fixture
def dashboard(memory_store):
    ledger = HydrationLedger(memory_store, today=NOW.date())
    return Dashboard(WakeClock(), SolarRequirement(), ledger, clock=lambda: NOW)


class TestRenderSnapshot:
    def test_contains_every_section(self, dashboard):
        dashboard.set_wake_time(datetime(2025, 1, 13, 7, 0))
        dashboard.update_reading(5, 0.8)
        dashboard.update_exposure(5)
        text = render_snapshot(dashboard.add_intake())

        assert "GOOD MORNING" in text
        assert "MONDAY, JANUARY 13" in text
        assert "ADENOSINE CLEARING" in text
        assert "30:00" in text
        assert "20 MIN NEEDED" in text
        assert "15 MIN REMAINING" in text
        assert "0.2 / 4 L" in text

    def test_greets_user_by_name(self, memory_store):
        ledger = HydrationLedger(memory_store, today=NOW.date())
        dashboard = Dashboard(
            WakeClock(), SolarRequirement(), ledger, clock=lambda: NOW, user_name="Alex"
        )
        first_line = render_snapshot(dashboard.tick()).splitlines()[0]
        assert first_line == "GOOD MORNING, ALEX  MONDAY, JANUARY 13"

    def test_without_name_first_line_is_greeting_and_date(self, dashboard):
        first_line = render_snapshot(dashboard.tick()).splitlines()[0]
        assert first_line == "GOOD MORNING  MONDAY, JANUARY 13"


class TestTransitionLogger:
    def test_logs_full_render_first_then_only_changes(self, dashboard, caplog):
        dashboard.set_wake_time(datetime(2025, 1, 13, 7, 0))
        dashboard.subscribe(TransitionLogger())

        with caplog.at_level(logging.INFO, logger="wellness.console"):
            dashboard.tick(NOW)
            dashboard.tick(NOW + timedelta(seconds=1))
        messages = [r.getMessage() for r in caplog.records if r.name == "wellness.console"]
        assert len(messages) == 1
        assert "GOOD MORNING" in messages[0]

    def test_logs_caffeine_unlock(self, dashboard, caplog):
        dashboard.set_wake_time(datetime(2025, 1, 13, 7, 0))
        dashboard.subscribe(TransitionLogger())
        dashboard.tick(NOW)

        with caplog.at_level(logging.INFO, logger="wellness.console"):
            dashboard.tick(datetime(2025, 1, 13, 8, 30))
        assert any("READY FOR CAFFEINE" in r.getMessage() for r in caplog.records)

    def test_logs_water_change(self, dashboard, caplog):
        dashboard.subscribe(TransitionLogger())
        dashboard.tick(NOW)

        with caplog.at_level(logging.INFO, logger="wellness.console"):
            dashboard.add_intake()
        assert any(r.getMessage().startswith("Water: 0.2") for r in caplog.records)
