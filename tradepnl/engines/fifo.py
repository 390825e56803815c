"""FIFO realized-P&L engine.

Open lots are tracked per (symbol code, account type). Each SELL consumes the
oldest lots of its own partition; opening positions are placed ahead of every
lot bought inside the export window. A SELL whose quantity cannot be fully
matched still produces a trade, with an unresolved P&L, and its shortfall is
reported so the user can declare the missing opening position.
"""

import logging
from collections import deque
from dataclasses import dataclass
from decimal import Decimal

from tradepnl.models.enums import Side, UnknownReason
from tradepnl.models.fills import NormalizedFill, OpeningPosition
from tradepnl.models.trades import (
    MissingCostEntry,
    PnlResult,
    RealizedPnl,
    RealizedTrade,
    UnresolvedPnl,
)

logger = logging.getLogger(__name__)

PartitionKey = tuple[str, str]

ZERO = Decimal("0")


@dataclass
class FifoLot:
    """Unconsumed buy quantity at one unit cost."""

    quantity: Decimal
    price: Decimal
    fees: Decimal | None = None


def processing_order(fills: list[NormalizedFill]) -> list[NormalizedFill]:
    """Order fills by trade date, BUY before anything else on the same date.

    Same-day round trips would otherwise starve the SELL of its cost basis.
    The sort is stable, so remaining ties keep their input order.
    """
    return sorted(fills, key=lambda fill: (fill.trade_date, fill.side != Side.BUY))


class FifoMatcher:
    """Matches SELL fills against BUY lots and opening positions, FIFO."""

    def calculate(
        self,
        fills: list[NormalizedFill],
        opening_positions: list[OpeningPosition] | tuple[OpeningPosition, ...] = (),
    ) -> PnlResult:
        """Compute one realized trade per SELL fill plus missing-cost shortfalls.

        Pure: the lot queues are built from scratch for this call and the
        inputs are never mutated.
        """
        lots: dict[PartitionKey, deque[FifoLot]] = {}
        for position in opening_positions:
            queue = lots.setdefault(position.partition_key, deque())
            queue.appendleft(FifoLot(quantity=position.quantity, price=position.avg_cost, fees=ZERO))

        trades: list[RealizedTrade] = []
        missing: dict[PartitionKey, MissingCostEntry] = {}

        for fill in processing_order(fills):
            key = fill.partition_key
            if fill.side == Side.BUY:
                lots.setdefault(key, deque()).append(
                    FifoLot(quantity=fill.quantity, price=fill.price, fees=fill.fees)
                )
            elif fill.side == Side.SELL:
                trades.append(self._close(fill, lots.setdefault(key, deque()), missing))

        logger.info(
            "Matched %d fills into %d sell trades, %d partitions short of cost basis",
            len(fills), len(trades), len(missing),
        )
        return PnlResult(trades=trades, missing_cost_symbols=list(missing.values()))

    @staticmethod
    def _close(
        fill: NormalizedFill,
        queue: deque[FifoLot],
        missing: dict[PartitionKey, MissingCostEntry],
    ) -> RealizedTrade:
        remaining = fill.quantity
        total_cost = ZERO

        while remaining > 0 and queue:
            lot = queue[0]
            take = min(remaining, lot.quantity)
            total_cost += take * lot.price
            lot.quantity -= take
            remaining -= take
            if lot.quantity <= 0:
                queue.popleft()

        matched = fill.quantity - remaining
        buy_price_avg = total_cost / matched if matched > 0 else None

        if remaining > 0:
            key = fill.partition_key
            entry = missing.get(key)
            if entry is None:
                missing[key] = MissingCostEntry(
                    symbol_code=fill.symbol_code,
                    symbol_name=fill.symbol_name,
                    account_type=key[1],
                    short_quantity=remaining,
                )
            else:
                entry.short_quantity += remaining
            logger.debug(
                "%s [%s] %s: %s of %s shares have no cost basis",
                fill.symbol_code, key[1], fill.trade_date, remaining, fill.quantity,
            )
            outcome: RealizedPnl | UnresolvedPnl = UnresolvedPnl(reason=UnknownReason.UNKNOWN_COST)
        else:
            # Unknown fees/tax count as zero; the result is flagged as an estimate.
            fees = fill.fees if fill.fees is not None else ZERO
            tax = fill.tax if fill.tax is not None else ZERO
            pnl = fill.price * fill.quantity - total_cost - fees - tax
            outcome = RealizedPnl(
                pnl=pnl,
                fees_estimated=fill.fees is None or fill.tax is None,
            )

        return RealizedTrade(
            trade_date=fill.trade_date,
            symbol_code=fill.symbol_code,
            symbol_name=fill.symbol_name,
            account_type=fill.account_type,
            quantity=fill.quantity,
            sell_price=fill.price,
            buy_price_avg=buy_price_avg,
            fees=fill.fees,
            tax=fill.tax,
            outcome=outcome,
        )


def calculate_realized_pnl(
    fills: list[NormalizedFill],
    opening_positions: list[OpeningPosition] | tuple[OpeningPosition, ...] = (),
) -> PnlResult:
    """Engine entry point: realized trades and missing-cost shortfalls."""
    return FifoMatcher().calculate(fills, opening_positions)
