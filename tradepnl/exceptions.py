"""Custom exceptions for tradepnl."""


class TradePnlError(Exception):
    """Base exception for tradepnl errors."""


class ConfigError(TradePnlError):
    """Raised when an environment setting cannot be interpreted."""

    def __init__(self, name: str, value: str, message: str):
        self.name = name
        self.value = value
        super().__init__(f"Invalid setting {name}={value!r}: {message}")


class IngestionError(TradePnlError):
    """Raised when an execution-history export cannot be ingested."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Ingestion error from {source}: {message}")


class HeaderNotFoundError(IngestionError):
    """Raised when no line carries the required column signature."""

    def __init__(self, source: str, required: tuple[str, ...]):
        self.required = required
        quoted = "".join(f"「{name}」" for name in required)
        super().__init__(source, f"header row not found; a line containing {quoted} is required")


class RowRejectedError(TradePnlError):
    """Raised when a single data row fails validation."""

    def __init__(self, line_number: int, message: str):
        self.line_number = line_number
        self.reason = message
        super().__init__(f"line {line_number}: {message}")


class PositionValidationError(TradePnlError):
    """Raised when a user-declared opening position is invalid."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.reason = message
        super().__init__(f"Validation error on '{field}': {message}")
