"""tradepnl: realized P&L from brokerage execution-history exports."""

__version__ = "0.1.0"
