"""Replay an address's swap history into statistics and closed rounds."""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..config.labels import LabelConfig
from ..database.models import AddressRound, AddressStats, Last7DStats, SwapRecord
from .calculations import build_address_stats
from .processors import apply_swap
from .state import CalculationState, create_initial_state


@dataclass
class ReplayResult:
    """Output of one replay."""
    stats: AddressStats
    rounds: list[AddressRound] = field(default_factory=list)
    state: Optional[CalculationState] = None


def compute_address_stats(
    swaps: Iterable[SwapRecord],
    reference_price: Optional[str] = None,
    address: str = "",
    last_7d: Optional[Last7DStats] = None,
    now: Optional[int] = None,
    labels: Optional[LabelConfig] = None
) -> Optional[ReplayResult]:
    """
    Fold swaps into a statistics snapshot.

    Swaps must already be ordered by (block_time, log_index); they are
    processed strictly in the order given. Returns None when there are no
    swaps. Malformed amounts raise ValueError.
    """
    state = create_initial_state()
    rounds: list[AddressRound] = []

    for swap in swaps:
        closed = apply_swap(address, swap, state)
        if closed is not None:
            rounds.append(closed)

    if state.trade_count == 0:
        return None

    stats = build_address_stats(
        address,
        state,
        latest_price=reference_price,
        last_7d=last_7d,
        now=now,
        labels=labels,
    )
    return ReplayResult(stats=stats, rounds=rounds, state=state)
