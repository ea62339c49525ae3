"""Configuration module."""

from .settings import Settings, get_settings
from .labels import LabelConfig

__all__ = ["Settings", "get_settings", "LabelConfig"]
