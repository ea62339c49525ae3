"""Application settings and configuration loader."""

import os
from pathlib import Path
from typing import Optional
from functools import lru_cache

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class SupabaseConfig(BaseModel):
    """Supabase configuration."""
    url: str
    key: str


class StatsConfig(BaseModel):
    """Address statistics recalculation configuration."""
    # Addresses replayed concurrently per group
    batch_size: int = Field(default=10, gt=0)
    # Rows fetched per Supabase request
    page_size: int = Field(default=1000, gt=0)


class Settings(BaseModel):
    """Application settings."""
    supabase: SupabaseConfig
    stats: StatsConfig = Field(default_factory=StatsConfig)
    config_path: Path = Field(default=Path("config.yaml"))

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from environment and config file."""
        load_dotenv()

        config_path = config_path or Path("config.yaml")
        config_data = {}

        if config_path.exists():
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}

        supabase_config = SupabaseConfig(
            url=os.getenv("SUPABASE_URL", ""),
            key=os.getenv("SUPABASE_KEY", ""),
        )

        # Environment wins over config.yaml
        stats_data = dict(config_data.get("stats", {}))
        if os.getenv("STATS_BATCH_SIZE"):
            stats_data["batch_size"] = int(os.getenv("STATS_BATCH_SIZE"))
        if os.getenv("STATS_PAGE_SIZE"):
            stats_data["page_size"] = int(os.getenv("STATS_PAGE_SIZE"))

        return cls(
            supabase=supabase_config,
            stats=StatsConfig(**stats_data),
            config_path=config_path,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings.load()
