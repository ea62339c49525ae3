"""
Swap processors for the address replay.

Each processor applies one swap to a CalculationState owned by the caller.
Closed rounds are returned to the caller rather than written anywhere, so
the replay stays free of I/O.
"""

import logging
import math
from decimal import Decimal, InvalidOperation
from typing import Optional

from ..database.models import AddressRound, SwapRecord
from .state import CalculationState

logger = logging.getLogger(__name__)


def parse_amount_cat(value) -> int:
    """
    Parse a token quantity into an exact int.

    Fractional parts are truncated toward zero. Parsing goes through
    Decimal so large supplies keep every digit.
    """
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount_cat: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid amount_cat: {value!r}")
    return int(amount)


def parse_amount_usd(value) -> float:
    """Parse a USD amount; missing values count as 0."""
    if value is None or value == "":
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid amount_usd: {value!r}") from e
    if not math.isfinite(amount):
        raise ValueError(f"Invalid amount_usd: {value!r}")
    return amount


def update_time_info(swap: SwapRecord, state: CalculationState) -> None:
    """Count the trade and track first/last trade times."""
    if state.first_trade_at is None:
        state.first_trade_at = swap.block_time
    state.last_trade_at = swap.block_time
    state.trade_count += 1


def process_buy(swap: SwapRecord, state: CalculationState) -> None:
    """Add a buy to the pooled position, opening a round from zero."""
    amount_cat = parse_amount_cat(swap.amount_cat)
    amount_usd = parse_amount_usd(swap.amount_usd)

    if state.position_cat == 0 and not state.round_open:
        state.open_round(swap.block_time)

    state.buy_count += 1
    state.buy_volume_cat += amount_cat
    state.buy_volume_usd += amount_usd

    state.position_cat += amount_cat
    state.cost_usd += amount_usd

    if state.round_open:
        state.current_round_buy_volume_cat += amount_cat
        state.current_round_buy_volume_usd += amount_usd


def process_sell(address: str, swap: SwapRecord, state: CalculationState) -> None:
    """Realize PnL on a sell against the average cost of the position."""
    amount_cat = parse_amount_cat(swap.amount_cat)
    amount_usd = parse_amount_usd(swap.amount_usd)

    state.sell_count += 1
    state.sell_volume_cat += amount_cat
    state.sell_volume_usd += amount_usd

    # Nothing tracked to sell against (airdrops, transfers in)
    if state.position_cat == 0 or state.cost_usd == 0:
        return

    held = state.position_cat
    matched = amount_cat
    sell_value = amount_usd
    if amount_cat > held:
        logger.warning(
            f"Sell of {amount_cat} CAT exceeds position {held} for {address} "
            f"at {swap.block_time}, clamping to zero"
        )
        matched = held
        sell_value = amount_usd * (held / amount_cat)

    avg_buy_price = state.cost_usd / float(held)
    cost_for_this_sell = avg_buy_price * float(matched)
    realized_pnl = sell_value - cost_for_this_sell

    state.realized_pnl_usd += realized_pnl
    state.current_round_pnl_usd += realized_pnl

    state.position_cat = held - matched
    # Float drift can leave a tiny negative residue
    state.cost_usd = max(0.0, state.cost_usd - cost_for_this_sell)

    if state.round_open:
        state.current_round_sell_volume_cat += amount_cat
        state.current_round_sell_volume_usd += amount_usd


def end_round(
    address: str,
    swap: SwapRecord,
    state: CalculationState
) -> Optional[AddressRound]:
    """
    Close the open round after the position returned to zero.

    Returns the closed round, or None if no round was open.
    """
    if not state.round_open:
        return None

    if state.current_round_pnl_usd > 0:
        result_type = "profit"
        state.profit_round_count += 1
    elif state.current_round_pnl_usd < 0:
        result_type = "loss"
        state.loss_round_count += 1
    else:
        result_type = None

    closed = AddressRound(
        address=address,
        round_index=state.round_index - 1,
        start_time=state.current_round_start_time,
        end_time=swap.block_time,
        buy_volume_cat=state.current_round_buy_volume_cat,
        buy_volume_usd=state.current_round_buy_volume_usd,
        sell_volume_cat=state.current_round_sell_volume_cat,
        sell_volume_usd=state.current_round_sell_volume_usd,
        realized_pnl_usd=state.current_round_pnl_usd,
        result_type=result_type,
    )

    state.reset_round()
    state.cost_usd = 0.0

    return closed


def apply_swap(
    address: str,
    swap: SwapRecord,
    state: CalculationState
) -> Optional[AddressRound]:
    """Apply one swap in replay order; returns a round if this swap closed one."""
    update_time_info(swap, state)

    if swap.side == "buy":
        process_buy(swap, state)
    elif swap.side == "sell":
        process_sell(address, swap, state)
        if state.position_cat == 0:
            return end_round(address, swap, state)

    return None
