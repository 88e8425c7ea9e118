"""
Main entrypoint.

Usage:
    python -m wellness setup                      # link a Garmin watch
    python -m wellness                            # run the live dashboard loop
    python -m wellness status --wake 07:00 --clouds 0.8 --sun-minutes 5
    python -m wellness water add --amount 500     # add / remove / reset intake
"""
import argparse
import asyncio
import logging
import sys
from datetime import date, datetime

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)
logger = logging.getLogger(__name__)


def _run_setup(relink: bool) -> None:
    from wellness.scripts import setup
    code = setup.main(relink=relink)
    if code:
        sys.exit(code)


async def _run_dashboard() -> None:
    from wellness.app import build_dashboard
    from wellness.console import TransitionLogger
    from wellness.scheduler.jobs import build_scheduler, refresh_wake_time, refresh_weather

    dashboard = build_dashboard()
    dashboard.subscribe(TransitionLogger())
    dashboard.tick()

    scheduler = build_scheduler(dashboard)
    scheduler.start()
    logger.info("Scheduler started (tick, wake_refresh, weather_refresh)")

    # First sensor fetch right away rather than after the first interval
    await asyncio.gather(refresh_wake_time(dashboard), refresh_weather(dashboard))

    try:
        await asyncio.Event().wait()
    except (KeyboardInterrupt, SystemExit, asyncio.CancelledError):
        logger.info("Shutting down...")
    finally:
        scheduler.shutdown(wait=False)
        dashboard.close()
        logger.info("Goodbye.")


def _parse_clock_time(value: str) -> datetime:
    """argparse type: "HH:MM" today."""
    try:
        parsed = datetime.strptime(value, "%H:%M").time()
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected HH:MM, got {value!r}")
    return datetime.combine(date.today(), parsed)


def _show_status(args: argparse.Namespace) -> None:
    from wellness.app import build_dashboard
    from wellness.console import render_snapshot

    dashboard = build_dashboard()
    if args.wake is not None:
        dashboard.set_wake_time(args.wake)
    if args.uv is not None or args.clouds is not None:
        dashboard.update_reading(args.uv or 0, args.clouds or 0.0)
    if args.sun_minutes is not None:
        dashboard.update_exposure(args.sun_minutes)
    print(render_snapshot(dashboard.tick()))


def _change_water(args: argparse.Namespace) -> None:
    from wellness.app import build_dashboard
    from wellness.console import render_snapshot

    dashboard = build_dashboard()
    if args.amount is not None:
        dashboard.set_pending_amount(args.amount)

    if args.action == "add":
        snap = dashboard.add_intake()
    elif args.action == "remove":
        snap = dashboard.remove_intake()
    else:
        snap = dashboard.reset_daily()
    print(render_snapshot(snap))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wellness", description="Daily wellness dashboard")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("run", help="Run the live dashboard loop (default)")
    setup = sub.add_parser("setup", help="Link a Garmin watch for the wake-up time")
    setup.add_argument("--relink", action="store_true", help="Replace an existing link")

    status = sub.add_parser("status", help="Print one snapshot")
    status.add_argument("--wake", type=_parse_clock_time, help="Wake-up time today, HH:MM")
    status.add_argument("--uv", type=int, help="UV index")
    status.add_argument("--clouds", type=float, help="Cloud cover ratio 0.0-1.0")
    status.add_argument("--sun-minutes", type=int, help="Minutes of sunlight so far")

    water = sub.add_parser("water", help="Change today's water intake")
    water.add_argument("action", choices=["add", "remove", "reset"])
    water.add_argument("--amount", help="Step in ml (invalid values fall back to the default)")

    return parser


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)

    if args.command == "setup":
        _run_setup(args.relink)
    elif args.command == "status":
        _show_status(args)
    elif args.command == "water":
        _change_water(args)
    else:
        try:
            asyncio.run(_run_dashboard())
        except KeyboardInterrupt:
            pass


if __name__ == "__main__":
    main(sys.argv[1:])
