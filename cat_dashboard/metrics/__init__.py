"""Address position and PnL replay engine."""

from .state import CalculationState, create_initial_state
from .processors import apply_swap, end_round, process_buy, process_sell, update_time_info
from .calculations import build_address_stats, calculate_address_labels
from .replay import ReplayResult, compute_address_stats

__all__ = [
    "CalculationState",
    "create_initial_state",
    "apply_swap",
    "end_round",
    "process_buy",
    "process_sell",
    "update_time_info",
    "build_address_stats",
    "calculate_address_labels",
    "ReplayResult",
    "compute_address_stats",
]
