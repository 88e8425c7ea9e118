"""
OpenWeatherMap One Call 3.0 client.

Only the `current` block is used: `uvi` (float UV index) and `clouds`
(integer percentage). They are returned as a WeatherReading with the UV index
rounded to the nearest integer and cloud cover scaled to [0, 1].
"""
from dataclasses import dataclass

import httpx

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/3.0"


class WeatherError(RuntimeError):
    """Base class for weather fetch failures."""


class WeatherHttpError(WeatherError):
    """Non-200 response from the API."""

    def __init__(self, status_code: int):
        super().__init__(f"Server error: {status_code}")
        self.status_code = status_code


class WeatherDecodingError(WeatherError):
    """Response body did not contain current.uvi / current.clouds."""


@dataclass(frozen=True)
class WeatherReading:
    uv_index: int
    cloud_cover: float  # 0.0-1.0


def parse_reading(payload: dict) -> WeatherReading:
    """Build a WeatherReading from a One Call response body."""
    try:
        current = payload["current"]
        uvi = float(current["uvi"])
        clouds = int(current["clouds"])
    except (KeyError, TypeError, ValueError) as exc:
        raise WeatherDecodingError("Failed to parse weather data") from exc
    return WeatherReading(uv_index=int(round(uvi)), cloud_cover=clouds / 100.0)


@dataclass
class OpenWeatherClient:
    """HTTPX-backed One Call client."""

    api_key: str
    http_client: httpx.AsyncClient
    base_url: str = DEFAULT_BASE_URL

    @classmethod
    def create(cls, api_key: str, base_url: str = DEFAULT_BASE_URL) -> "OpenWeatherClient":
        """Create a client with a managed httpx session."""
        return cls(api_key=api_key, http_client=httpx.AsyncClient(), base_url=base_url)

    async def fetch_reading(self, latitude: float, longitude: float) -> WeatherReading:
        """
        Fetch current UV index and cloud cover for a location.

        Raises:
            WeatherHttpError: on any non-200 status.
            WeatherDecodingError: if the body is not the expected shape.
            httpx.HTTPError: on transport failures.
        """
        response = await self.http_client.get(
            f"{self.base_url}/onecall",
            params={
                "lat": latitude,
                "lon": longitude,
                "exclude": "minutely,hourly,daily,alerts",
                "appid": self.api_key,
            },
            timeout=15,
        )
        if response.status_code != 200:
            raise WeatherHttpError(response.status_code)
        try:
            payload = response.json()
        except ValueError as exc:
            raise WeatherDecodingError("Response was not JSON") from exc
        return parse_reading(payload)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
