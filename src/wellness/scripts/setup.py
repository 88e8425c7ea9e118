"""
Link the dashboard to a Garmin watch.

The caffeine card counts down from the moment you woke up, and the only
place that moment is recorded is the watch's sleep log. This script logs in
to Garmin Connect once, keeps the resulting tokens (never the password) and
then reads last night's sleep to show which wake-up time the dashboard will
use.

Usage:
    python -m wellness setup
    python -m wellness setup --relink    (replace an existing link)
"""
import getpass
from datetime import date
from typing import Optional

from wellness.config import get_settings
from wellness.garmin.auth import GarminAuth
from wellness.garmin.normalizer import wake_time_from_sleep


class SetupAborted(Exception):
    """Raised when setup stops before a link is stored. Carries the exit code."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


def describe_wake_time(api, today: date) -> str:
    """One line telling the user what the wake-up refresh will see today."""
    try:
        wake = wake_time_from_sleep(api.get_sleep_data(today.isoformat()))
    except Exception as exc:
        return f"Could not read last night's sleep yet ({exc}); the dashboard will retry."
    if wake is None:
        hour = get_settings().default_wake_hour
        return f"No sleep logged for last night; the caffeine timer will start from {hour:02d}:00."
    return f"Last night's wake-up: {wake:%H:%M}. The caffeine timer counts from there."


def run_setup(relink: bool = False, today: Optional[date] = None) -> str:
    """
    Store a Garmin session for the wake-up refresh job.

    Returns the wake-up summary printed at the end.

    Raises:
        SetupAborted: empty input, declined relink, or a rejected login.
    """
    auth = GarminAuth(get_settings().garmin_tokens_dir)

    print("\nLink your watch so the caffeine timer knows when you woke up.")
    print(f"Only session tokens are kept, in {auth.tokens_dir}\n")

    if auth.has_session() and not relink:
        answer = input("This dashboard is already linked. Link again? [y/N] ").strip().lower()
        if answer != "y":
            raise SetupAborted("Keeping the current link.", exit_code=0)

    email = input("Garmin account email: ").strip()
    if not email:
        raise SetupAborted("No email entered.")
    password = getpass.getpass("Garmin account password: ")
    if not password:
        raise SetupAborted("No password entered.")

    print("\nSigning in...")
    try:
        api = auth.authenticate_and_save(email, password)
    except Exception as exc:
        raise SetupAborted(f"Garmin rejected the login: {exc}") from exc

    summary = describe_wake_time(api, today or date.today())
    print(f"Linked. {summary}\n")
    return summary


def main(relink: bool = False) -> int:
    try:
        run_setup(relink=relink)
    except SetupAborted as exc:
        print(exc)
        return exc.exit_code
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
