"""CAT token dashboard backend: address position and P&L statistics."""

__version__ = "0.1.0"
