# wipercheck/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (.env file).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    APP_NAME: str = "WiperCheck API"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Geocoding (positionstack)
    POSITIONSTACK_API_KEY: str = ""
    POSITIONSTACK_BASE_URL: str = "http://api.positionstack.com/v1"

    # Routing (OSRM), e.g. http://router.project-osrm.org/route/v1/driving
    OSRM_BASE_URL: str = "http://router.project-osrm.org/route/v1/driving"

    # Forecasts (OpenWeather One Call)
    OPENWEATHER_API_KEY: str = ""
    OPENWEATHER_BASE_URL: str = "https://api.openweathermap.org/data/2.5/onecall"

    # Geospatial forecast cache; an empty URL disables it
    REDIS_URL: str = ""
    CACHE_ENABLED: bool = True
    CACHE_RADIUS_KM: float = 10.0

    # Outbound HTTP
    HTTP_TIMEOUT_S: float = 10.0
    HTTP_MAX_RETRIES: int = 2

    # Upper bound on concurrent forecast / reverse-geocode lookups per request
    MAX_CONCURRENT_LOOKUPS: int = 20

    # Largest accepted departure delay for /journey
    MAX_DELAY_MINUTES: int = 720


settings = Settings()
