"""View filters applied before matching (fills) and after it (trades)."""

from tradepnl.models.fills import NormalizedFill
from tradepnl.models.reports import FilterState
from tradepnl.models.trades import RealizedTrade


def filter_fills(fills: list[NormalizedFill], state: FilterState) -> list[NormalizedFill]:
    """Keep fills inside the date range, account type and symbol search.

    Filtering happens before matching, so a narrowed date range can leave
    sells without their buys; those surface as missing-cost shortfalls.
    """
    selected: list[NormalizedFill] = []
    for fill in fills:
        if state.date_from and fill.trade_date < state.date_from:
            continue
        if state.date_to and fill.trade_date > state.date_to:
            continue
        if state.account_type and fill.account_type != state.account_type:
            continue
        if state.symbol_search and not (
            state.symbol_search in fill.symbol_name or state.symbol_search in fill.symbol_code
        ):
            continue
        selected.append(fill)
    return selected


def filter_trades_for_display(trades: list[RealizedTrade], state: FilterState) -> list[RealizedTrade]:
    if state.include_uncalculable:
        return list(trades)
    return [trade for trade in trades if trade.is_calculable]


def account_types(fills: list[NormalizedFill]) -> list[str]:
    """Distinct non-empty account types, sorted."""
    return sorted({fill.account_type for fill in fills if fill.account_type})
