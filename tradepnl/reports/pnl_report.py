"""Realized P&L text report generator."""

from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from tradepnl.models.fills import ParseSummary
from tradepnl.models.reports import PnlSummary, SymbolSummary
from tradepnl.models.trades import MissingCostEntry, RealizedTrade

TEMPLATE_DIR = Path(__file__).parent / "templates"


def format_yen(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return f"¥{value:,.0f}"


def format_ratio(value: Decimal | None) -> str:
    if value is None:
        return "-"
    if value.is_infinite():
        return "∞"
    return f"{value:.2f}"


def format_percent(value: Decimal) -> str:
    return f"{value * 100:.1f}%"


class PnlReportGenerator:
    """Renders the summary, per-symbol table, trades and shortfalls as text."""

    def __init__(self) -> None:
        self.env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)), trim_blocks=True)
        self.env.filters["yen"] = format_yen
        self.env.filters["ratio"] = format_ratio
        self.env.filters["percent"] = format_percent

    def render(
        self,
        summary: PnlSummary,
        symbols: list[SymbolSummary],
        trades: list[RealizedTrade],
        missing: list[MissingCostEntry],
        parse_summary: ParseSummary | None = None,
    ) -> str:
        template = self.env.get_template("pnl_report.txt")
        return template.render(
            summary=summary,
            symbols=symbols,
            trades=trades,
            missing=missing,
            parse_summary=parse_summary,
        )
