"""
Integration tests: the dashboard built on the SQL store across restarts,
day rollover and a simulated morning of ticks.
"""
from datetime import datetime, timedelta

from sqlmodel import Session, select

from wellness.app import build_dashboard
from wellness.config import Settings
from wellness.models.storage import StoredValue
from wellness.state.dashboard import Greeting
from wellness.state.hydration import DATE_KEY, INTAKE_KEY

MONDAY_8AM = datetime(2025, 1, 13, 8, 0)


def _build(engine, now, **settings):
    return build_dashboard(engine=engine, settings=Settings(**settings), clock=lambda: now)


class TestRestart:
    def test_same_day_restart_keeps_intake(self, engine):
        first = _build(engine, MONDAY_8AM)
        first.add_intake()
        first.add_intake()

        second = _build(engine, MONDAY_8AM + timedelta(hours=4))
        assert second.tick().hydration.current_ml == 500

    def test_next_day_restart_resets_intake(self, engine):
        first = _build(engine, MONDAY_8AM)
        first.add_intake()

        second = _build(engine, MONDAY_8AM + timedelta(days=1))
        assert second.ledger.current_intake_ml == 0
        with Session(engine) as s:
            rows = {r.key: r.value for r in s.exec(select(StoredValue)).all()}
        assert rows[INTAKE_KEY] == "0"
        assert rows[DATE_KEY] == "2025-01-14"

    def test_goal_from_settings(self, engine):
        dashboard = _build(engine, MONDAY_8AM, daily_goal_ml=1000, default_intake_amount_ml=400)
        dashboard.add_intake()
        dashboard.add_intake()
        snap = dashboard.add_intake()
        assert snap.hydration.current_ml == 1000
        assert snap.hydration.progress == 1.0

    def test_user_name_from_settings(self, engine):
        dashboard = _build(engine, MONDAY_8AM, user_name="Sam")
        assert dashboard.tick().headline == "GOOD MORNING, SAM"


class TestMorning:
    def test_ticks_through_the_unlock(self, engine):
        dashboard = _build(engine, MONDAY_8AM)
        dashboard.set_wake_time(datetime(2025, 1, 13, 7, 0))

        start = datetime(2025, 1, 13, 8, 29, 58)
        states = [dashboard.tick(start + timedelta(seconds=i)).caffeine for i in range(4)]

        assert [s.locked for s in states] == [True, True, False, False]
        assert states[0].countdown == "00:02"
        assert states[1].countdown == "00:01"
        assert states[2].countdown == "00:00"

    def test_midnight_tick_rolls_hydration_and_greeting(self, engine):
        dashboard = _build(engine, MONDAY_8AM)
        dashboard.add_intake()

        before = dashboard.tick(datetime(2025, 1, 13, 23, 59, 59))
        after = dashboard.tick(datetime(2025, 1, 14, 0, 0, 0))

        assert before.hydration.current_ml == 250
        assert after.hydration.current_ml == 0
        assert after.greeting is Greeting.NIGHT
        assert after.date_label == "TUESDAY, JANUARY 14"

    def test_late_wake_report_applies_immediately(self, engine):
        """A sensor result arriving between ticks is visible without waiting for the next tick."""
        dashboard = _build(engine, MONDAY_8AM)
        assert dashboard.tick(MONDAY_8AM).caffeine.remaining_minutes == 90
        snap = dashboard.set_wake_time(datetime(2025, 1, 13, 6, 0))
        assert snap.caffeine.locked is False
        assert dashboard.latest is snap
