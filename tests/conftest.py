"""Shared test fixtures for tradepnl."""

from datetime import date
from decimal import Decimal

import pytest

from tradepnl.models.enums import Side
from tradepnl.models.fills import NormalizedFill, OpeningPosition

HEADER = (
    "約定日,銘柄,銘柄コード,市場,取引,期限,預り,課税,約定数量,約定単価,"
    "手数料/諸経費等,税額,受渡日,受渡金額/決済損益"
)

_UNSET = object()


@pytest.fixture
def csv_header() -> str:
    return HEADER


@pytest.fixture
def sample_export_text() -> str:
    """A small export with a preamble, a round trip and a same-day trade."""
    return "\n".join(
        [
            "約定履歴照会",
            "期間指定,2024/01/01～2024/03/31",
            "",
            HEADER,
            "2024/01/10,テスト銘柄,1234,東証,現物買,当日,特定,課税,100,1000,100,10,2024/01/12,100110",
            "2024/01/20,テスト銘柄,1234,東証,現物売,当日,特定,課税,100,1200,100,20,2024/01/24,119880",
            "2024/02/01,別銘柄,5678,東証,現物買,当日,NISA,非課税,50,2000,0,0,2024/02/05,100000",
            "2024/02/01,別銘柄,5678,東証,現物売,当日,NISA,非課税,50,2100,--,--,2024/02/05,105000",
        ]
    )


@pytest.fixture
def make_fill():
    """Factory for fills; fees and tax default to zero, pass None for unknown."""

    def _make(
        symbol_code: str = "1234",
        side: Side = Side.BUY,
        quantity: str | int = 100,
        price: str | int = 1000,
        trade_date: date | str = date(2024, 1, 15),
        fees=_UNSET,
        tax=_UNSET,
        account_type: str | None = "特定",
        symbol_name: str = "テスト銘柄",
    ) -> NormalizedFill:
        return NormalizedFill(
            trade_date=trade_date,
            symbol_code=symbol_code,
            symbol_name=symbol_name,
            side=side,
            quantity=Decimal(str(quantity)),
            price=Decimal(str(price)),
            fees=Decimal("0") if fees is _UNSET else fees,
            tax=Decimal("0") if tax is _UNSET else tax,
            account_type=account_type,
        )

    return _make


@pytest.fixture
def sample_position() -> OpeningPosition:
    return OpeningPosition(
        id="op1",
        symbol_code="1234",
        symbol_name="テスト銘柄",
        quantity=Decimal("100"),
        avg_cost=Decimal("1000"),
        account_type="特定",
    )
