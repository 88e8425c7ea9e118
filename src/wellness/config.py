from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./wellness.db"
    daily_goal_ml: int = Field(default=4000, gt=0)
    default_intake_amount_ml: int = Field(default=250, gt=0)
    tick_interval_seconds: int = Field(default=1, gt=0)
    wake_refresh_minutes: int = 15
    weather_refresh_minutes: int = 30
    default_wake_hour: int = Field(default=7, ge=0, le=23)  # used when no sleep was recorded
    user_name: str = ""
    garmin_tokens_dir: str = "~/.wellness/garmin_tokens"
    openweather_api_key: str = ""
    openweather_base_url: str = "https://api.openweathermap.org/data/3.0"
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
