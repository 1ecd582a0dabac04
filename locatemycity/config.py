"""Centralised application settings loaded from environment / .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Geodesy
    earth_radius_km: float = 6_371.0

    # Proximity search
    result_cap: int = 200  # max places returned per query
    default_tolerance: float = 5.0  # in the query unit
    max_tolerance_miles: float = 50.0  # clamp applied by DistanceQuery.build
    default_unit: str = "mi"

    # Dataset (GeoNames cities15000, JSON array)
    dataset_path: str = "data/cities15000.min.json"
    dataset_url: str | None = None  # takes precedence over dataset_path
    dataset_timeout_seconds: float = 30.0

    # Origin resolver
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    nominatim_user_agent: str = "LocateMyCity/1.0"
    geocode_timeout_seconds: float = 10.0

    # Travel-time estimates
    driving_speed_kmh: float = 80.0
    flying_speed_kmh: float = 800.0
    walking_speed_kmh: float = 5.0

    # HTTP
    rate_limit: str = "100/minute"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "https://howfarfromme.com",
    ]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
