"""
Address statistics calculator.

Replays each address's full swap history from scratch and persists the
resulting statistics row and closed rounds.
"""

import asyncio
import logging
from typing import Callable, Optional

from ..config.labels import LabelConfig
from ..config.settings import get_settings
from ..database.models import AddressRound, AddressStats, Last7DStats, SwapRecord
from ..database.supabase import SupabaseClient, get_supabase_client
from ..metrics.replay import compute_address_stats
from ..utils.helpers import chunks

logger = logging.getLogger(__name__)


class AddressStatsCalculator:
    """
    Recalculates address statistics from swap history.

    Calculates per address:
    - Position, cost basis and average buy price
    - Realized / unrealized / total PnL and ROI
    - Round trips (profit / loss)
    - Behavioural labels
    """

    def __init__(
        self,
        db: Optional[SupabaseClient] = None,
        labels: Optional[LabelConfig] = None
    ):
        self.db = db or get_supabase_client()
        self.labels = labels or LabelConfig.load()

    def calculate_address_stats(
        self,
        address: str,
        latest_price: Optional[str] = None
    ) -> Optional[AddressStats]:
        """
        Calculate and store statistics for a single address.

        Args:
            address: Trader address
            latest_price: Reference CAT price; fetched from the store if omitted

        Returns:
            The stored statistics, or None if the address has no swaps
        """
        address = address.lower()
        rows = self.db.get_address_swaps(address)

        if not rows:
            return None

        if not latest_price:
            latest_price = self.db.get_latest_price()

        swaps = [SwapRecord(**row) for row in rows]
        last_7d = Last7DStats(**self.db.get_address_last_7d_stats(address))

        result = compute_address_stats(
            swaps,
            reference_price=latest_price,
            address=address,
            last_7d=last_7d,
            labels=self.labels,
        )

        # Rounds are written before the stats row that counts them
        self.db.upsert_address_rounds([r.to_dict() for r in result.rounds])
        self.db.upsert_address_stats(result.stats.to_dict())

        logger.debug(
            f"{address}: {result.stats.trade_count} trades, "
            f"{len(result.rounds)} closed rounds, "
            f"total pnl {result.stats.total_pnl_usd:.2f}"
        )

        return result.stats

    def calculate_or_update_address(self, address: str) -> Optional[AddressStats]:
        """Recalculate one address against the latest known price."""
        latest_price = self.db.get_latest_price()
        return self.calculate_address_stats(address, latest_price)

    def get_address_stats(
        self,
        address: str,
        recalculate: bool = False
    ) -> Optional[AddressStats]:
        """
        Get the stored statistics of an address.

        The address is recalculated when no row is stored yet or when
        `recalculate` is set.
        """
        address = address.lower()

        if not recalculate:
            row = self.db.get_address_stats(address)
            if row:
                return AddressStats.model_validate(row)
            logger.info(f"No stored stats for {address}, calculating")

        return self.calculate_or_update_address(address)

    def get_address_rounds(self, address: str) -> list[AddressRound]:
        """Get the stored closed rounds of an address in order."""
        rows = self.db.get_address_rounds(address.lower())
        return [AddressRound.model_validate(row) for row in rows]

    async def calculate_all_addresses(
        self,
        batch_size: Optional[int] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None
    ) -> dict:
        """
        Recalculate statistics for every trading address.

        Addresses are processed in groups of `batch_size`; addresses in a
        group run concurrently and a failure in one does not stop the rest.

        Args:
            batch_size: Addresses per concurrent group (defaults to settings)
            progress_callback: Optional callback(processed, total)

        Returns:
            Summary dict with counts
        """
        batch_size = batch_size or get_settings().stats.batch_size

        logger.info("Starting batch calculation for all addresses...")

        addresses = self.db.get_all_trading_addresses()

        if not addresses:
            return {
                "total": 0,
                "updated": 0,
                "skipped": 0,
                "errors": 0,
            }

        total = len(addresses)
        updated = 0
        skipped = 0
        errors = 0
        processed = 0

        logger.info(f"Found {total} addresses to calculate")

        latest_price = self.db.get_latest_price()

        async def calculate_one(address: str):
            nonlocal updated, skipped, errors, processed

            try:
                stats = await asyncio.to_thread(
                    self.calculate_address_stats, address, latest_price
                )
                if stats is None:
                    skipped += 1
                else:
                    updated += 1
            except Exception as e:
                logger.error(f"Error calculating stats for {address}: {e}")
                errors += 1

            processed += 1
            if processed % 10 == 0:
                logger.info(f"Processed {processed}/{total} addresses")
                if progress_callback:
                    progress_callback(processed, total)

        for batch in chunks(addresses, batch_size):
            await asyncio.gather(*[calculate_one(a) for a in batch])

        if progress_callback and processed % 10 != 0:
            progress_callback(processed, total)

        logger.info(
            f"Batch calculation complete: {updated} updated, {skipped} skipped, {errors} errors"
        )

        return {
            "total": total,
            "updated": updated,
            "skipped": skipped,
            "errors": errors,
        }
