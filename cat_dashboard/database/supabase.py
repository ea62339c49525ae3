"""Supabase client wrapper for swap history and address statistics."""

import time
from functools import lru_cache
from typing import Optional

import httpx
from supabase import create_client, Client
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..config.settings import get_settings

SWAPS_TABLE = "cat_swaps"
STATS_TABLE = "cat_address_trade_stats"
ROUNDS_TABLE = "cat_address_rounds"

SECONDS_PER_DAY = 24 * 60 * 60

# Transient network failures on reads
read_retry = retry(
    retry=retry_if_exception_type(httpx.TransportError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=30),
    reraise=True,
)


class SupabaseClient:
    """Wrapper for Supabase client operations."""

    def __init__(self, client: Client, page_size: int = 1000):
        self._client = client
        self.page_size = page_size

    @property
    def client(self) -> Client:
        """Get the underlying Supabase client."""
        return self._client

    # =========================================================================
    # Swap Operations
    # =========================================================================

    def _fetch_all(self, build_query) -> list[dict]:
        """Page through a query until a short page is returned."""
        rows = []
        offset = 0

        while True:
            result = build_query().range(offset, offset + self.page_size - 1).execute()
            batch = result.data or []
            rows.extend(batch)
            if len(batch) < self.page_size:
                break
            offset += self.page_size

        return rows

    @read_retry
    def get_address_swaps(self, address: str) -> list[dict]:
        """Get all swaps of an address in replay order."""
        return self._fetch_all(
            lambda: self._client.table(SWAPS_TABLE)
            .select("*")
            .eq("trader_address", address.lower())
            .order("block_time")
            .order("log_index")
            .order("id")
        )

    @read_retry
    def get_latest_price(self) -> Optional[str]:
        """Get the price of the most recent priced swap."""
        result = (
            self._client.table(SWAPS_TABLE)
            .select("price_usd")
            .not_.is_("price_usd", "null")
            .order("block_time", desc=True)
            .order("log_index", desc=True)
            .order("id", desc=True)
            .limit(1)
            .execute()
        )
        if not result.data:
            return None
        price = result.data[0].get("price_usd")
        return str(price) if price is not None else None

    @read_retry
    def get_address_last_7d_stats(self, address: str, now: Optional[int] = None) -> dict:
        """Get USD volume and trade count of an address over the last 7 days."""
        now = int(time.time()) if now is None else now
        since = now - 7 * SECONDS_PER_DAY

        rows = self._fetch_all(
            lambda: self._client.table(SWAPS_TABLE)
            .select("amount_usd")
            .eq("trader_address", address.lower())
            .gte("block_time", since)
            .not_.is_("amount_usd", "null")
            .order("id")
        )
        volume_usd = sum(float(r.get("amount_usd") or 0) for r in rows)

        return {"volume_usd": volume_usd, "trades": len(rows)}

    @read_retry
    def get_all_trading_addresses(self) -> list[str]:
        """Get every distinct address with at least one buy or sell."""
        rows = self._fetch_all(
            lambda: self._client.table(SWAPS_TABLE)
            .select("trader_address")
            .not_.is_("side", "null")
            .order("id")
        )

        addresses = []
        seen = set()
        for row in rows:
            address = row.get("trader_address")
            if address and address not in seen:
                seen.add(address)
                addresses.append(address)
        return addresses

    # =========================================================================
    # Address Stats Operations
    # =========================================================================

    def upsert_address_stats(self, stats_data: dict) -> dict:
        """Insert or replace the statistics row of an address."""
        result = self._client.table(STATS_TABLE).upsert(
            {**stats_data, "updated_at": int(time.time())},
            on_conflict="address"
        ).execute()
        return result.data[0] if result.data else {}

    def get_address_stats(self, address: str) -> Optional[dict]:
        """Get the stored statistics row of an address."""
        result = (
            self._client.table(STATS_TABLE)
            .select("*")
            .eq("address", address.lower())
            .execute()
        )
        return result.data[0] if result.data else None

    # =========================================================================
    # Round Operations
    # =========================================================================

    def upsert_address_rounds(self, rounds: list[dict]) -> list[dict]:
        """Batch upsert closed rounds; replays overwrite by (address, round_index)."""
        if not rounds:
            return []
        result = self._client.table(ROUNDS_TABLE).upsert(
            rounds,
            on_conflict="address,round_index"
        ).execute()
        return result.data or []

    def get_address_rounds(self, address: str) -> list[dict]:
        """Get closed rounds of an address in order."""
        result = (
            self._client.table(ROUNDS_TABLE)
            .select("*")
            .eq("address", address.lower())
            .order("round_index")
            .execute()
        )
        return result.data or []


@lru_cache()
def get_supabase_client() -> SupabaseClient:
    """Get cached Supabase client instance."""
    settings = get_settings()
    client = create_client(settings.supabase.url, settings.supabase.key)
    return SupabaseClient(client, page_size=settings.stats.page_size)
