"""Enumerations for tradepnl."""

from enum import StrEnum


class Side(StrEnum):
    BUY = "BUY"
    SELL = "SELL"
    OTHER = "OTHER"


class UnknownReason(StrEnum):
    """Why a realized trade has no P&L."""

    UNKNOWN_COST = "UNKNOWN_COST"


class OutputFormat(StrEnum):
    TABLE = "table"
    JSON = "json"
