"""P&L computation engines."""

from tradepnl.engines.aggregation import (
    compute_summary,
    compute_symbol_summaries,
    cumulative_pnl_series,
    pnl_distribution,
)
from tradepnl.engines.fifo import FifoLot, FifoMatcher, calculate_realized_pnl
from tradepnl.engines.filters import account_types, filter_fills, filter_trades_for_display

__all__ = [
    "FifoLot",
    "FifoMatcher",
    "account_types",
    "calculate_realized_pnl",
    "compute_summary",
    "compute_symbol_summaries",
    "cumulative_pnl_series",
    "filter_fills",
    "filter_trades_for_display",
    "pnl_distribution",
]
