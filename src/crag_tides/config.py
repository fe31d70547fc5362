"""Centralized settings for the crag-tides backend."""
from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "CRAG_TIDES_"}

    # Redis: empty string means disabled (graceful fallback)
    redis_url: str = ""

    # Supabase: empty strings mean disabled
    supabase_url: str = ""
    supabase_service_key: str = ""
    supabase_jwt_secret: str = ""

    # WorldTides v3
    worldtides_api_key: str = ""
    worldtides_url: str = "https://www.worldtides.info/api/v3"
    worldtides_datum: str = "CD"     # chart datum

    # TTL in seconds for a cached forecast result
    ttl_tides: int = 21600           # 6 h

    # Forecast horizon (hours) requested from the provider
    forecast_hours_default: int = 72
    forecast_hours_min: int = 24
    forecast_hours_max: int = 168

    # Request window around "now" (seconds)
    forecast_lookback_s: int = 3600  # start one hour in the past
    forecast_padding_s: int = 7200   # extra length past the horizon
    forecast_step_s: int = 900       # 15-minute samples

    # Outbound HTTP
    http_timeout_s: int = 20
    http_tries: int = 3


settings = Settings()
