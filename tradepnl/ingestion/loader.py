"""Multi-file loading: read, decode and parse exports in order, then merge."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from tradepnl.config import Settings
from tradepnl.ingestion.execution_history import ExecutionHistoryAdapter
from tradepnl.models.fills import NormalizedFill, ParseResult, ParseSummary

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Per-file parse results plus the merged, date-ordered fill list."""

    parse_results: list[ParseResult] = field(default_factory=list)
    fills: list[NormalizedFill] = field(default_factory=list)

    @property
    def summary(self) -> ParseSummary:
        return ParseSummary.from_results(self.parse_results)


def merge_fills(*fill_lists: list[NormalizedFill]) -> list[NormalizedFill]:
    """Concatenate fill lists and stable-sort them by trade date."""
    merged = [fill for fills in fill_lists for fill in fills]
    merged.sort(key=lambda fill: fill.trade_date)
    return merged


def load_files(paths: list[Path], settings: Settings | None = None) -> LoadResult:
    """Parse each export file in turn and merge the fills.

    Files are read one after another; the merged list is re-sorted by trade
    date, so the order of ``paths`` only affects same-date ties.
    """
    settings = settings or Settings()
    adapter = ExecutionHistoryAdapter(
        legacy_encoding=settings.legacy_encoding,
        fallback_encoding=settings.fallback_encoding,
    )

    result = LoadResult()
    for path in paths:
        parsed = adapter.parse(path)
        logger.info("%s decoded as %s", path.name, parsed.encoding)
        result.parse_results.append(parsed)

    result.fills = merge_fills(*(parsed.fills for parsed in result.parse_results))
    return result
