"""Derived views over realized trades: summary, per-symbol, series, histogram."""

from decimal import ROUND_FLOOR, Decimal

from tradepnl.models.reports import CumulativePoint, DistributionBucket, PnlSummary, SymbolSummary
from tradepnl.models.trades import RealizedTrade

ZERO = Decimal("0")
INFINITY = Decimal("Infinity")


def _calculable(trades: list[RealizedTrade]) -> list[RealizedTrade]:
    return [trade for trade in trades if trade.realized_pnl is not None]


def _by_date(trades: list[RealizedTrade]) -> list[RealizedTrade]:
    return sorted(trades, key=lambda trade: trade.trade_date)


def _ratio(numerator: Decimal | int, denominator: int) -> Decimal:
    return Decimal(numerator) / denominator if denominator else ZERO


def profit_factor(total_profit: Decimal, total_loss: Decimal) -> Decimal | None:
    """|profit / loss|; Infinity with no losses but some profit, None if both are zero."""
    if total_loss != 0:
        return abs(total_profit / total_loss)
    if total_profit > 0:
        return INFINITY
    return None


def compute_summary(trades: list[RealizedTrade]) -> PnlSummary:
    calculable = _calculable(trades)
    pnls = [trade.realized_pnl for trade in calculable]
    wins = [pnl for pnl in pnls if pnl > 0]
    losses = [pnl for pnl in pnls if pnl < 0]

    total_profit = sum(wins, ZERO)
    total_loss = sum(losses, ZERO)

    # Drawdown runs over the cumulative series; the peak starts at zero.
    peak = ZERO
    cumulative = ZERO
    max_drawdown = ZERO
    for trade in _by_date(calculable):
        cumulative += trade.realized_pnl
        peak = max(peak, cumulative)
        max_drawdown = max(max_drawdown, peak - cumulative)

    return PnlSummary(
        total_pnl=sum(pnls, ZERO),
        win_count=len(wins),
        loss_count=len(losses),
        draw_count=sum(1 for pnl in pnls if pnl == 0),
        calculable_count=len(calculable),
        uncalculable_count=len(trades) - len(calculable),
        avg_win=_ratio(total_profit, len(wins)),
        avg_loss=_ratio(total_loss, len(losses)),
        profit_factor=profit_factor(total_profit, total_loss),
        max_drawdown=max_drawdown,
        total_profit=total_profit,
        total_loss=total_loss,
        win_rate=_ratio(len(wins), len(calculable)),
    )


def compute_symbol_summaries(trades: list[RealizedTrade]) -> list[SymbolSummary]:
    """Per-symbol statistics, highest total P&L first."""
    groups: dict[str, list[RealizedTrade]] = {}
    for trade in trades:
        groups.setdefault(trade.symbol_code, []).append(trade)

    summaries: list[SymbolSummary] = []
    for symbol_code, symbol_trades in groups.items():
        pnls = [trade.realized_pnl for trade in _calculable(symbol_trades)]
        wins = sum(1 for pnl in pnls if pnl > 0)
        total = sum(pnls, ZERO)
        summaries.append(
            SymbolSummary(
                symbol_code=symbol_code,
                symbol_name=symbol_trades[0].symbol_name,
                total_pnl=total,
                win_count=wins,
                loss_count=sum(1 for pnl in pnls if pnl < 0),
                trade_count=len(symbol_trades),
                uncalculable_count=len(symbol_trades) - len(pnls),
                avg_pnl=_ratio(total, len(pnls)),
                win_rate=_ratio(wins, len(pnls)),
            )
        )

    summaries.sort(key=lambda summary: summary.total_pnl, reverse=True)
    return summaries


def cumulative_pnl_series(trades: list[RealizedTrade]) -> list[CumulativePoint]:
    points: list[CumulativePoint] = []
    cumulative = ZERO
    for trade in _by_date(_calculable(trades)):
        cumulative += trade.realized_pnl
        points.append(CumulativePoint(trade_date=trade.trade_date, cumulative_pnl=cumulative))
    return points


def _thousands(value: Decimal) -> str:
    # Halves round toward +infinity: -2500 is "-2k", 2500 is "3k".
    rounded = (value / 1000 + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR)
    return f"{rounded}k"


def pnl_distribution(trades: list[RealizedTrade], max_buckets: int = 20) -> list[DistributionBucket]:
    """Equal-width histogram of realized P&L; empty buckets are dropped.

    The last bucket includes its upper bound.
    """
    pnls = [trade.realized_pnl for trade in _calculable(trades)]
    if not pnls:
        return []

    low, high = min(pnls), max(pnls)
    if low == high:
        return [DistributionBucket(label=f"{low}", lower=low, upper=high, count=len(pnls))]

    bucket_count = min(max_buckets, len(pnls))
    step = (high - low) / bucket_count
    buckets: list[DistributionBucket] = []
    for i in range(bucket_count):
        lower = low + step * i
        upper = high if i == bucket_count - 1 else low + step * (i + 1)
        if i == bucket_count - 1:
            count = sum(1 for pnl in pnls if lower <= pnl <= upper)
        else:
            count = sum(1 for pnl in pnls if lower <= pnl < upper)
        if count:
            buckets.append(
                DistributionBucket(
                    label=f"{_thousands(lower)}~{_thousands(upper)}",
                    lower=lower,
                    upper=upper,
                    count=count,
                )
            )
    return buckets
