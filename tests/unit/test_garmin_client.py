"""Tests for the Garmin sleep wrapper and wake-time extraction."""
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import garminconnect
import pytest

from wellness.garmin.client import GarminClient
from wellness.garmin.normalizer import wake_time_from_sleep

# 2025-01-13 06:42:00 expressed as "local" epoch milliseconds
LOCAL_WAKE_MS = int(datetime(2025, 1, 13, 6, 42, tzinfo=timezone.utc).timestamp() * 1000)

FAKE_SLEEP = {
    "dailySleepDTO": {
        "calendarDate": "2025-01-13",
        "sleepStartTimestampLocal": LOCAL_WAKE_MS - 8 * 3600 * 1000,
        "sleepEndTimestampLocal": LOCAL_WAKE_MS,
    }
}


@pytest.fixture
def mock_api():
    api = MagicMock(spec=garminconnect.Garmin)
    api.get_sleep_data.return_value = FAKE_SLEEP
    return api


@pytest.fixture
def connected_client(mock_api):
    """A GarminClient with _api already set (simulates post-connect() state)."""
    client = GarminClient(auth=MagicMock())
    client._api = mock_api
    return client


class TestWakeTimeFromSleep:
    def test_local_end_timestamp_is_wall_clock(self):
        assert wake_time_from_sleep(FAKE_SLEEP) == datetime(2025, 1, 13, 6, 42)

    def test_result_is_naive(self):
        assert wake_time_from_sleep(FAKE_SLEEP).tzinfo is None

    def test_gmt_fallback_converted_to_local(self):
        gmt_ms = 1736750520000
        payload = {"dailySleepDTO": {"sleepEndTimestampGMT": gmt_ms}}
        assert wake_time_from_sleep(payload) == datetime.fromtimestamp(gmt_ms / 1000)

    def test_milliseconds_dropped(self):
        payload = {"dailySleepDTO": {"sleepEndTimestampLocal": LOCAL_WAKE_MS + 750}}
        assert wake_time_from_sleep(payload) == datetime(2025, 1, 13, 6, 42)

    @pytest.mark.parametrize("payload", [
        None,
        {},
        {"dailySleepDTO": None},
        {"dailySleepDTO": {"sleepEndTimestampLocal": None}},
    ])
    def test_no_sleep_recorded(self, payload):
        assert wake_time_from_sleep(payload) is None


class TestGarminClient:
    @pytest.mark.asyncio
    async def test_connect_builds_client_from_auth(self):
        auth = MagicMock()
        client = GarminClient(auth=auth)
        await client.connect()
        auth.build_client.assert_called_once_with()
        assert client._api is auth.build_client.return_value

    @pytest.mark.asyncio
    async def test_get_sleep_data_passes_iso_date(self, connected_client, mock_api):
        await connected_client.get_sleep_data(date(2025, 1, 13))
        mock_api.get_sleep_data.assert_called_once_with("2025-01-13")

    @pytest.mark.asyncio
    async def test_get_wake_time(self, connected_client):
        wake = await connected_client.get_wake_time(date(2025, 1, 13))
        assert wake == datetime(2025, 1, 13, 6, 42)

    @pytest.mark.asyncio
    async def test_get_wake_time_none_without_sleep(self, connected_client, mock_api):
        mock_api.get_sleep_data.return_value = {"dailySleepDTO": {}}
        assert await connected_client.get_wake_time(date(2025, 1, 13)) is None
