"""
APScheduler jobs driving the dashboard.

  - tick:            recompute the snapshot every second
  - wake_refresh:    pull last night's wake-up time from Garmin
  - weather_refresh: pull UV index and cloud cover from OpenWeatherMap

All jobs are coroutines so AsyncIOScheduler runs them on the event loop
thread, one at a time. Sensor jobs log failures and leave the last known
value in the dashboard.
"""
import logging
from datetime import date, datetime, time
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from wellness.config import get_settings
from wellness.state.dashboard import local_now

logger = logging.getLogger(__name__)


def build_scheduler(dashboard) -> AsyncIOScheduler:
    """
    Create and configure the APScheduler.

    Args:
        dashboard: the Dashboard every job pushes into.

    Returns:
        Configured AsyncIOScheduler (not yet started).
    """
    settings = get_settings()
    scheduler = AsyncIOScheduler()

    scheduler.add_job(
        _tick,
        trigger="interval",
        seconds=settings.tick_interval_seconds,
        id="tick",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        kwargs={"dashboard": dashboard},
    )
    scheduler.add_job(
        refresh_wake_time,
        trigger="interval",
        minutes=settings.wake_refresh_minutes,
        id="wake_refresh",
        replace_existing=True,
        max_instances=1,
        kwargs={"dashboard": dashboard},
    )
    scheduler.add_job(
        refresh_weather,
        trigger="interval",
        minutes=settings.weather_refresh_minutes,
        id="weather_refresh",
        replace_existing=True,
        max_instances=1,
        kwargs={"dashboard": dashboard},
    )

    return scheduler


def default_wake_time(day: date, hour: int) -> datetime:
    """Fallback wake-up instant when the watch recorded no sleep."""
    return datetime.combine(day, time(hour=hour))


async def _tick(dashboard) -> None:
    dashboard.tick(local_now())


async def refresh_wake_time(dashboard, today: Optional[date] = None) -> None:
    """
    Push today's wake-up time into the dashboard.

    No sleep record → default wake hour today. Fetch failure → logged, the
    previous wake-up time stays.
    """
    from wellness.garmin.auth import GarminAuth
    from wellness.garmin.client import GarminClient

    settings = get_settings()
    today = today or date.today()

    try:
        client = GarminClient(GarminAuth(settings.garmin_tokens_dir))
        await client.connect()
        wake = await client.get_wake_time(today)
    except Exception as exc:
        logger.error("Wake-time refresh failed: %s", exc)
        return

    if wake is None:
        wake = default_wake_time(today, settings.default_wake_hour)
        logger.warning(
            "No sleep data found, using default wake-up time (%02d:00)",
            settings.default_wake_hour,
        )

    dashboard.set_wake_time(wake)


async def refresh_weather(dashboard) -> None:
    """Push the current UV index and cloud cover into the dashboard."""
    from wellness.weather.openweather import OpenWeatherClient

    settings = get_settings()
    if not settings.openweather_api_key:
        logger.info("OPENWEATHER_API_KEY not set; skipping weather refresh.")
        return
    if settings.latitude is None or settings.longitude is None:
        logger.info("LATITUDE/LONGITUDE not set; skipping weather refresh.")
        return

    client = OpenWeatherClient.create(
        api_key=settings.openweather_api_key,
        base_url=settings.openweather_base_url,
    )
    try:
        reading = await client.fetch_reading(settings.latitude, settings.longitude)
    except Exception as exc:
        logger.error("Weather refresh failed: %s", exc)
        return
    finally:
        await client.close()

    dashboard.update_reading(reading.uv_index, reading.cloud_cover)
