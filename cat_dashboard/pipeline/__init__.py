"""Batch recalculation pipeline."""

from .address_stats import AddressStatsCalculator

__all__ = ["AddressStatsCalculator"]
