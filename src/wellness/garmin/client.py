"""
Async wrapper around the garminconnect library for sleep data.

garminconnect is synchronous; we run it in a thread pool executor so it
doesn't block the asyncio event loop that also drives the dashboard tick.
"""
import asyncio
from datetime import date
from typing import Any, Dict, Optional

import garminconnect

from wellness.garmin.auth import GarminAuth
from wellness.garmin.normalizer import wake_time_from_sleep


class GarminClient:
    """
    Thin async wrapper over garminconnect.Garmin.

    Call connect() before any data methods. connect() restores the saved
    tokens via GarminAuth; no credentials are needed at runtime.
    """

    def __init__(self, auth: Optional[GarminAuth] = None):
        self._auth = auth or GarminAuth()
        self._api: Optional[garminconnect.Garmin] = None

    async def connect(self) -> None:
        """
        Raises:
            NoSessionError: if `python -m wellness setup` has not been run.
            SessionExpiredError: if the tokens have expired (re-run setup).
        """
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._connect_sync)

    def _connect_sync(self) -> None:
        self._api = self._auth.build_client()

    async def _run(self, fn, *args, **kwargs):
        """Run a sync garminconnect call in the thread pool."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, lambda: fn(*args, **kwargs))

    async def get_sleep_data(self, day: date) -> Dict[str, Any]:
        """Fetch the sleep record for the night ending on `day`."""
        return await self._run(self._api.get_sleep_data, day.isoformat())

    async def get_wake_time(self, day: date):
        """Local wake-up time for `day`, or None if no sleep was recorded."""
        payload = await self.get_sleep_data(day)
        return wake_time_from_sleep(payload)
