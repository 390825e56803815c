"""Data models for tradepnl."""

from tradepnl.models.enums import OutputFormat, Side, UnknownReason
from tradepnl.models.fills import IsoDate, NormalizedFill, OpeningPosition, ParseResult, ParseSummary
from tradepnl.models.reports import (
    CumulativePoint,
    DistributionBucket,
    FilterState,
    PnlSummary,
    SymbolSummary,
)
from tradepnl.models.trades import (
    MissingCostEntry,
    PnlOutcome,
    PnlResult,
    RealizedPnl,
    RealizedTrade,
    UnresolvedPnl,
)

__all__ = [
    "CumulativePoint",
    "DistributionBucket",
    "FilterState",
    "IsoDate",
    "MissingCostEntry",
    "NormalizedFill",
    "OpeningPosition",
    "OutputFormat",
    "ParseResult",
    "ParseSummary",
    "PnlOutcome",
    "PnlResult",
    "PnlSummary",
    "RealizedPnl",
    "RealizedTrade",
    "Side",
    "SymbolSummary",
    "UnknownReason",
    "UnresolvedPnl",
]
