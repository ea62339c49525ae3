"""Thresholds for behavioural address labels."""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field


class LabelConfig(BaseModel):
    """Label thresholds applied to the final replay state."""
    # is_new_address: first trade within this many days of now
    new_address_days: int = Field(default=7, gt=0)

    # is_swing_trader
    swing_min_trades: int = 3
    swing_min_buys: int = 1
    swing_min_sells: int = 1
    swing_min_volume_cat: int = 100  # whole CAT units, buy + sell

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "LabelConfig":
        """Load label thresholds from the `labels` section of a YAML file."""
        config_path = config_path or Path("config.yaml")

        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data.get("labels", {}))
