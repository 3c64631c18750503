"""Application configuration using pydantic-settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from propertyvue.simulation import NO_LATENCY, Latency, default_latency
from propertyvue.stores.favorites import FAVORITES_KEY
from propertyvue.stores.recent_searches import RECENT_SEARCHES_KEY


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="PROPERTYVUE_",
        extra="ignore",
    )

    # Durable key-value slots (favorites, recent searches)
    storage_backend: Literal["sqlite", "memory"] = Field(
        default="sqlite",
        description="Where persisted slots live: a SQLite file or process memory",
    )
    database_path: str = Field(default="data/propertyvue.db")
    favorites_key: str = Field(default=FAVORITES_KEY, min_length=1)
    recent_searches_key: str = Field(default=RECENT_SEARCHES_KEY, min_length=1)
    recent_searches_limit: int = Field(default=5, ge=1, le=50)

    # Simulated network latency
    simulate_latency: bool = Field(
        default=True,
        description="Delay store calls like the hosted API would",
    )
    latency_scale: float = Field(
        default=1.0,
        ge=0,
        description="Multiplier applied to every simulated delay",
    )

    # Catalog seed
    seed_path: str = Field(
        default="",
        description="JSON file of seed properties; empty uses the bundled catalog",
    )

    # Logging
    log_json: bool = Field(default=False, description="Emit JSON logs instead of console output")
    log_level: str = Field(default="INFO")

    def get_latency(self) -> Latency:
        """Build the latency model for the stores."""
        if not self.simulate_latency or self.latency_scale == 0:
            return NO_LATENCY
        return default_latency(self.latency_scale)

    def get_seed_path(self) -> Path | None:
        """Seed file override, or None for the bundled catalog."""
        return Path(self.seed_path) if self.seed_path.strip() else None
