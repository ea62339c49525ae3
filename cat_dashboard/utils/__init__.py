"""Utility modules."""

from .logging import setup_logging
from .helpers import chunks

__all__ = ["setup_logging", "chunks"]
