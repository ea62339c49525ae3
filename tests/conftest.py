"""Shared fixtures for address statistics tests."""

from typing import Optional

import pytest

from cat_dashboard.database.models import SwapRecord


@pytest.fixture
def make_swap():
    """Build SwapRecords with increasing block times unless given."""
    counter = {"time": 1_700_000_000}

    def _make(
        side: str,
        amount_cat,
        amount_usd=None,
        block_time: Optional[int] = None,
        log_index: int = 0,
    ) -> SwapRecord:
        if block_time is None:
            counter["time"] += 60
            block_time = counter["time"]
        return SwapRecord(
            block_time=block_time,
            log_index=log_index,
            side=side,
            amount_cat=str(amount_cat),
            amount_usd=None if amount_usd is None else str(amount_usd),
        )

    return _make


class FakeStore:
    """In-memory stand-in for the Supabase swap/stat store."""

    def __init__(self, swaps_by_address: dict[str, list[dict]], latest_price: Optional[str] = None):
        self.swaps_by_address = swaps_by_address
        self.latest_price = latest_price
        self.stats_rows: dict[str, dict] = {}
        self.round_rows: dict[tuple[str, int], dict] = {}
        self.price_requests = 0

    def get_address_swaps(self, address: str) -> list[dict]:
        return list(self.swaps_by_address.get(address.lower(), []))

    def get_latest_price(self) -> Optional[str]:
        self.price_requests += 1
        return self.latest_price

    def get_address_last_7d_stats(self, address: str, now: Optional[int] = None) -> dict:
        return {"volume_usd": 12.5, "trades": 2}

    def get_all_trading_addresses(self) -> list[str]:
        return list(self.swaps_by_address)

    def upsert_address_stats(self, stats_data: dict) -> dict:
        self.stats_rows[stats_data["address"]] = stats_data
        return stats_data

    def upsert_address_rounds(self, rounds: list[dict]) -> list[dict]:
        for r in rounds:
            self.round_rows[(r["address"], r["round_index"])] = r
        return rounds

    def get_address_stats(self, address: str) -> Optional[dict]:
        return self.stats_rows.get(address.lower())

    def get_address_rounds(self, address: str) -> list[dict]:
        return [
            row for (addr, _), row in sorted(self.round_rows.items())
            if addr == address.lower()
        ]


def swap_row(side: str, amount_cat: str, amount_usd: Optional[str], block_time: int, log_index: int = 0) -> dict:
    """A cat_swaps row as returned by the store."""
    return {
        "id": block_time * 10 + log_index,
        "block_number": block_time // 3,
        "block_time": block_time,
        "tx_hash": f"0x{block_time:064x}",
        "log_index": log_index,
        "trader_address": "0xabc",
        "side": side,
        "amount_cat": amount_cat,
        "amount_usd": amount_usd,
        "price_usd": None,
    }


@pytest.fixture
def fake_store_factory():
    return FakeStore


@pytest.fixture
def make_row():
    return swap_row
