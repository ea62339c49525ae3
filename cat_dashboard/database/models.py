"""Data models for swaps, address statistics and rounds."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

ResultType = Literal["profit", "loss"]


def format_usd(value: float) -> str:
    """Render a USD amount with 6 decimals."""
    return f"{value:.6f}"


class SwapRecord(BaseModel):
    """A single indexed CAT swap."""
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    block_number: Optional[int] = None
    block_time: int
    tx_hash: Optional[str] = None
    log_index: int = 0
    trader_address: Optional[str] = None
    side: Optional[str] = None
    amount_cat: str
    amount_usd: Optional[str] = None
    price_usd: Optional[str] = None

    @field_validator("amount_cat", "amount_usd", "price_usd", mode="before")
    @classmethod
    def _numeric_to_str(cls, value):
        # Store rows may carry numeric columns as numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class Last7DStats(BaseModel):
    """Trailing 7-day activity supplied by the store."""
    volume_usd: float = 0
    trades: int = 0


class AddressRound(BaseModel):
    """A closed round trip: position opened from zero and sold back to zero."""
    model_config = ConfigDict(frozen=True)

    address: str
    round_index: int
    start_time: int
    end_time: Optional[int] = None
    buy_volume_cat: int = 0
    buy_volume_usd: float = 0
    sell_volume_cat: int = 0
    sell_volume_usd: float = 0
    realized_pnl_usd: float = 0
    result_type: Optional[ResultType] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for database insertion."""
        return {
            "address": self.address,
            "round_index": self.round_index,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "buy_volume_cat": str(self.buy_volume_cat),
            "buy_volume_usd": format_usd(self.buy_volume_usd),
            "sell_volume_cat": str(self.sell_volume_cat),
            "sell_volume_usd": format_usd(self.sell_volume_usd),
            "realized_pnl_usd": format_usd(self.realized_pnl_usd),
            "result_type": self.result_type,
        }


class AddressStats(BaseModel):
    """Statistics snapshot for one address, rebuilt on every replay."""
    address: str

    # Trade counters
    trade_count: int = 0
    buy_count: int = 0
    sell_count: int = 0
    buy_volume_cat: int = 0
    sell_volume_cat: int = 0
    buy_volume_usd: float = 0
    sell_volume_usd: float = 0

    # Position
    current_position_cat: int = 0
    current_cost_usd: float = 0
    avg_buy_price: Optional[float] = None

    # PnL
    realized_pnl_usd: float = 0
    unrealized_pnl_usd: float = 0
    total_pnl_usd: float = 0
    roi_total: Optional[float] = None
    profit_round_count: int = 0
    loss_round_count: int = 0
    current_round_pnl_usd: float = 0

    first_trade_at: Optional[int] = None
    last_trade_at: Optional[int] = None

    # Labels
    is_new_address: bool = False
    is_swing_trader: bool = False
    is_profitable_realized: bool = False
    is_profitable_total: bool = False
    is_deep_loss: bool = False

    last_7d_volume_usd: float = 0
    last_7d_trades: int = 0

    @property
    def has_open_position(self) -> bool:
        return self.current_position_cat > 0

    @property
    def trading_pattern(self) -> str:
        """Coarse trading style derived from counters and labels."""
        if self.trade_count == 0:
            return "no_trades"
        if self.buy_count == 0:
            return "seller_only"
        if self.sell_count == 0:
            return "buyer_only"
        if self.is_swing_trader:
            return "swing_trader"
        return "mixed"

    def to_dict(self) -> dict:
        """Convert to dictionary for database insertion."""
        data = self.model_dump()
        for key in ["buy_volume_cat", "sell_volume_cat", "current_position_cat"]:
            data[key] = str(data[key])
        for key in [
            "buy_volume_usd", "sell_volume_usd", "current_cost_usd",
            "realized_pnl_usd", "unrealized_pnl_usd", "total_pnl_usd",
            "current_round_pnl_usd", "last_7d_volume_usd",
        ]:
            data[key] = format_usd(data[key])
        if self.avg_buy_price is not None:
            data["avg_buy_price"] = f"{self.avg_buy_price:.8f}"
        if self.roi_total is not None:
            data["roi_total"] = f"{self.roi_total:.4f}"
        return data
