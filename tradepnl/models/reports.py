"""Aggregation and view models."""

from decimal import Decimal

from pydantic import BaseModel, Field

from tradepnl.models.fills import IsoDate


class PnlSummary(BaseModel):
    total_pnl: Decimal = Decimal("0")
    win_count: int = 0
    loss_count: int = 0
    draw_count: int = 0
    calculable_count: int = 0
    uncalculable_count: int = 0
    avg_win: Decimal = Decimal("0")
    avg_loss: Decimal = Decimal("0")
    profit_factor: Decimal | None = Field(default=None, allow_inf_nan=True)  # Infinity when there are no losses
    max_drawdown: Decimal = Decimal("0")
    total_profit: Decimal = Decimal("0")
    total_loss: Decimal = Decimal("0")
    win_rate: Decimal = Decimal("0")


class SymbolSummary(BaseModel):
    symbol_code: str
    symbol_name: str
    total_pnl: Decimal
    win_count: int
    loss_count: int
    trade_count: int
    uncalculable_count: int
    avg_pnl: Decimal
    win_rate: Decimal


class CumulativePoint(BaseModel):
    trade_date: IsoDate
    cumulative_pnl: Decimal


class DistributionBucket(BaseModel):
    label: str
    lower: Decimal
    upper: Decimal
    count: int


class FilterState(BaseModel):
    """View filter over fills and realized trades."""

    date_from: IsoDate | None = None
    date_to: IsoDate | None = None
    account_type: str = ""
    symbol_search: str = ""
    include_uncalculable: bool = True
