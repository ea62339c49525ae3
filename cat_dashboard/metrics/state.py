"""Mutable accumulator threaded through a single address replay."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CalculationState:
    """
    Running position and counters for one address.

    Token quantities are exact Python ints; USD amounts are floats.
    Round-scoped fields are only meaningful while a round is open
    (`current_round_start_time` is not None).
    """

    # Position and cost basis (pooled average cost)
    position_cat: int = 0
    cost_usd: float = 0.0
    realized_pnl_usd: float = 0.0

    # Rounds
    round_index: int = 0
    profit_round_count: int = 0
    loss_round_count: int = 0

    # Trade counters
    trade_count: int = 0
    buy_count: int = 0
    sell_count: int = 0
    buy_volume_cat: int = 0
    sell_volume_cat: int = 0
    buy_volume_usd: float = 0.0
    sell_volume_usd: float = 0.0

    first_trade_at: Optional[int] = None
    last_trade_at: Optional[int] = None

    # Current round
    current_round_start_time: Optional[int] = None
    current_round_pnl_usd: float = 0.0
    current_round_buy_volume_cat: int = 0
    current_round_buy_volume_usd: float = 0.0
    current_round_sell_volume_cat: int = 0
    current_round_sell_volume_usd: float = 0.0

    @property
    def round_open(self) -> bool:
        return self.current_round_start_time is not None

    def open_round(self, start_time: int) -> None:
        """Start a new round at `start_time`."""
        self.round_index += 1
        self.reset_round()
        self.current_round_start_time = start_time

    def reset_round(self) -> None:
        """Clear all round-scoped fields and mark no round as open."""
        self.current_round_start_time = None
        self.current_round_pnl_usd = 0.0
        self.current_round_buy_volume_cat = 0
        self.current_round_buy_volume_usd = 0.0
        self.current_round_sell_volume_cat = 0
        self.current_round_sell_volume_usd = 0.0


def create_initial_state() -> CalculationState:
    """Fresh state for a replay from scratch."""
    return CalculationState()
