"""Derived metrics computed once from the final replay state."""

import time
from typing import Optional

from ..config.labels import LabelConfig
from ..database.models import AddressStats, Last7DStats
from .state import CalculationState

SECONDS_PER_DAY = 24 * 60 * 60


def calculate_avg_buy_price(position_cat: int, cost_usd: float) -> Optional[float]:
    """Average cost per CAT of the open position."""
    if position_cat > 0 and cost_usd > 0:
        return cost_usd / float(position_cat)
    return None


def calculate_unrealized_pnl(
    position_cat: int,
    cost_usd: float,
    latest_price: Optional[str]
) -> float:
    """Paper PnL of the open position at `latest_price`; 0 without a price."""
    if position_cat > 0 and latest_price:
        current_price = float(latest_price)
        return float(position_cat) * current_price - cost_usd
    return 0.0


def calculate_roi(total_pnl_usd: float, buy_volume_usd: float) -> Optional[float]:
    """Total PnL as a percentage of everything ever spent buying."""
    if buy_volume_usd > 0:
        return total_pnl_usd / buy_volume_usd * 100
    return None


def calculate_address_labels(
    state: CalculationState,
    total_pnl_usd: float,
    now: Optional[int] = None,
    labels: Optional[LabelConfig] = None
) -> dict[str, bool]:
    """
    Behavioural labels for an address.

    - is_new_address: first trade within the last `new_address_days`
    - is_swing_trader: enough trades, both sides, enough CAT volume
    - is_profitable_realized / is_profitable_total: PnL above zero
    - is_deep_loss: underwater while still holding
    """
    labels = labels or LabelConfig()
    now = int(time.time()) if now is None else now
    cutoff = now - labels.new_address_days * SECONDS_PER_DAY

    is_new_address = state.first_trade_at is not None and state.first_trade_at >= cutoff

    total_volume_cat = state.buy_volume_cat + state.sell_volume_cat
    is_swing_trader = (
        state.trade_count >= labels.swing_min_trades
        and state.buy_count >= labels.swing_min_buys
        and state.sell_count >= labels.swing_min_sells
        and total_volume_cat >= labels.swing_min_volume_cat
    )

    return {
        "is_new_address": is_new_address,
        "is_swing_trader": is_swing_trader,
        "is_profitable_realized": state.realized_pnl_usd > 0,
        "is_profitable_total": total_pnl_usd > 0,
        "is_deep_loss": total_pnl_usd < 0 and state.position_cat > 0,
    }


def build_address_stats(
    address: str,
    state: CalculationState,
    latest_price: Optional[str] = None,
    last_7d: Optional[Last7DStats] = None,
    now: Optional[int] = None,
    labels: Optional[LabelConfig] = None
) -> AddressStats:
    """Assemble the statistics snapshot from the final state."""
    last_7d = last_7d or Last7DStats()

    avg_buy_price = calculate_avg_buy_price(state.position_cat, state.cost_usd)
    unrealized_pnl_usd = calculate_unrealized_pnl(state.position_cat, state.cost_usd, latest_price)
    total_pnl_usd = state.realized_pnl_usd + unrealized_pnl_usd
    roi_total = calculate_roi(total_pnl_usd, state.buy_volume_usd)

    return AddressStats(
        address=address,
        trade_count=state.trade_count,
        buy_count=state.buy_count,
        sell_count=state.sell_count,
        buy_volume_cat=state.buy_volume_cat,
        sell_volume_cat=state.sell_volume_cat,
        buy_volume_usd=state.buy_volume_usd,
        sell_volume_usd=state.sell_volume_usd,
        current_position_cat=state.position_cat,
        current_cost_usd=state.cost_usd,
        avg_buy_price=avg_buy_price,
        realized_pnl_usd=state.realized_pnl_usd,
        unrealized_pnl_usd=unrealized_pnl_usd,
        total_pnl_usd=total_pnl_usd,
        roi_total=roi_total,
        profit_round_count=state.profit_round_count,
        loss_round_count=state.loss_round_count,
        current_round_pnl_usd=state.current_round_pnl_usd,
        first_trade_at=state.first_trade_at,
        last_trade_at=state.last_trade_at,
        last_7d_volume_usd=last_7d.volume_usd,
        last_7d_trades=last_7d.trades,
        **calculate_address_labels(state, total_pnl_usd, now=now, labels=labels),
    )
