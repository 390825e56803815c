"""Matching engine output models."""

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from tradepnl.models.enums import Side, UnknownReason
from tradepnl.models.fills import IsoDate


class RealizedPnl(BaseModel):
    """P&L could be computed. Unknown fees/tax only mark it as an estimate."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["realized"] = "realized"
    pnl: Decimal
    fees_estimated: bool = False


class UnresolvedPnl(BaseModel):
    """P&L could not be computed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unresolved"] = "unresolved"
    reason: UnknownReason = UnknownReason.UNKNOWN_COST


PnlOutcome = Annotated[RealizedPnl | UnresolvedPnl, Field(discriminator="kind")]


class RealizedTrade(BaseModel):
    """Outcome of one SELL fill."""

    model_config = ConfigDict(frozen=True)

    trade_date: IsoDate
    symbol_code: str
    symbol_name: str
    account_type: str | None = None
    side: Literal[Side.SELL] = Side.SELL
    quantity: Decimal
    sell_price: Decimal
    buy_price_avg: Decimal | None = None
    fees: Decimal | None = None
    tax: Decimal | None = None
    outcome: PnlOutcome

    @computed_field
    @property
    def realized_pnl(self) -> Decimal | None:
        if isinstance(self.outcome, RealizedPnl):
            return self.outcome.pnl
        return None

    @computed_field
    @property
    def reason_if_null(self) -> UnknownReason | None:
        if isinstance(self.outcome, UnresolvedPnl):
            return self.outcome.reason
        return None

    @computed_field
    @property
    def fees_estimated(self) -> bool:
        if isinstance(self.outcome, RealizedPnl):
            return self.outcome.fees_estimated
        return self.fees is None or self.tax is None

    @property
    def is_calculable(self) -> bool:
        return isinstance(self.outcome, RealizedPnl)


class MissingCostEntry(BaseModel):
    """Sell quantity per (symbol, account type) that matched no known lot."""

    symbol_code: str
    symbol_name: str
    account_type: str = ""
    short_quantity: Decimal


class PnlResult(BaseModel):
    trades: list[RealizedTrade] = Field(default_factory=list)
    missing_cost_symbols: list[MissingCostEntry] = Field(default_factory=list)
