"""Parsed fill, opening position, and parse result models."""

from datetime import date
from decimal import Decimal
from typing import Annotated
from uuid import uuid4

from pydantic import BaseModel, BeforeValidator, Field

from tradepnl.models.enums import Side


def _to_iso_text(value: object) -> object:
    if isinstance(value, date):
        return value.isoformat()
    return value


# Zero-padded YYYY-MM-DD text. Exports may carry a day past the end of its
# month (2024-02-31), which datetime.date cannot hold; ordering is by text.
IsoDate = Annotated[str, BeforeValidator(_to_iso_text), Field(pattern=r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")]


def new_position_id() -> str:
    return uuid4().hex


class NormalizedFill(BaseModel):
    """One accepted execution row."""

    trade_date: IsoDate
    symbol_code: str = Field(min_length=1)
    symbol_name: str = ""
    market: str | None = None
    side: Side
    quantity: Decimal = Field(gt=0)
    price: Decimal = Field(ge=0)
    fees: Decimal | None = None  # None = unknown, not zero
    tax: Decimal | None = None  # None = unknown, not zero
    account_type: str | None = None
    delivery_date: IsoDate | None = None
    delivery_amount: Decimal | None = None
    raw: dict[str, str] = Field(default_factory=dict)

    @property
    def partition_key(self) -> tuple[str, str]:
        return (self.symbol_code, self.account_type or "")


class OpeningPosition(BaseModel):
    """A user-declared lot held before the exported date range."""

    id: str = Field(default_factory=new_position_id)
    symbol_code: str = Field(min_length=1)
    symbol_name: str = ""
    quantity: Decimal = Field(gt=0)
    avg_cost: Decimal = Field(gt=0)
    account_type: str = ""

    @property
    def partition_key(self) -> tuple[str, str]:
        return (self.symbol_code, self.account_type or "")


class ParseResult(BaseModel):
    fills: list[NormalizedFill] = Field(default_factory=list)
    total_rows: int = 0
    success_rows: int = 0
    failed_rows: int = 0
    unknown_field_count: int = 0
    errors: list[str] = Field(default_factory=list)
    source: str | None = None
    encoding: str | None = None


class ParseSummary(BaseModel):
    """Counters and errors totalled over several parse results."""

    file_count: int = 0
    total_rows: int = 0
    success_rows: int = 0
    failed_rows: int = 0
    unknown_field_count: int = 0
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def from_results(cls, results: list[ParseResult]) -> "ParseSummary":
        return cls(
            file_count=len(results),
            total_rows=sum(r.total_rows for r in results),
            success_rows=sum(r.success_rows for r in results),
            failed_rows=sum(r.failed_rows for r in results),
            unknown_field_count=sum(r.unknown_field_count for r in results),
            errors=[err for r in results for err in r.errors],
        )
