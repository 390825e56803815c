"""Ingestion of brokerage execution-history exports."""

from tradepnl.ingestion.base import BaseAdapter
from tradepnl.ingestion.decoder import DecodedText, decode_bytes, decode_text
from tradepnl.ingestion.execution_history import ExecutionHistoryAdapter, parse_csv
from tradepnl.ingestion.loader import LoadResult, load_files, merge_fills

__all__ = [
    "BaseAdapter",
    "DecodedText",
    "ExecutionHistoryAdapter",
    "LoadResult",
    "decode_bytes",
    "decode_text",
    "load_files",
    "merge_fills",
    "parse_csv",
]
