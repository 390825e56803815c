"""Report generation for tradepnl."""

from tradepnl.reports.pnl_report import PnlReportGenerator

__all__ = ["PnlReportGenerator"]
