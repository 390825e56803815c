"""Base adapter interface for execution-history ingestion."""

from abc import ABC, abstractmethod
from pathlib import Path

from tradepnl.models.fills import ParseResult


class BaseAdapter(ABC):
    """Abstract base class for all ingestion adapters."""

    @abstractmethod
    def parse(self, file_path: Path) -> ParseResult:
        """Parse a file and return a ParseResult with normalized fills."""
        ...

    @abstractmethod
    def parse_text(self, text: str, source: str | None = None) -> ParseResult:
        """Parse already-decoded text."""
        ...

    @abstractmethod
    def validate(self, data: ParseResult) -> list[str]:
        """Validate parsed data. Returns a list of validation messages."""
        ...
