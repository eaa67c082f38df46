"""Configuration management."""

from typing import Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Boundary data
    boundary_base_url: str = Field(
        default="http://localhost:5173/data/indonesia-district-master 3",
        description="Base URL of the boundary files",
    )
    provinces_file: str = Field(default="prov 37.geojson", description="Province file name")
    regencies_file: str = Field(default="kab 37.geojson", description="Regency file name")
    fetch_timeout: float = Field(default=30.0, description="Boundary fetch timeout in seconds")

    # Synthetic points
    points_min: int = Field(default=5, ge=1, description="Minimum synthetic points per district")
    points_max: int = Field(default=10, ge=1, description="Maximum synthetic points per district")

    @property
    def points_range(self) -> Tuple[int, int]:
        return (self.points_min, max(self.points_min, self.points_max))

    # API
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")


settings = Settings()
