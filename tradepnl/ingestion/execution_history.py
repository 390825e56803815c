"""Adapter for brokerage execution-history (約定履歴) CSV exports.

The export starts with a few free-text preamble lines, followed by a header
row and one data row per execution. The header row is located by its column
signature rather than by position, and every data row is keyed by the
header's column order.
"""

import logging
import re
from decimal import Decimal
from pathlib import Path

from tradepnl.exceptions import HeaderNotFoundError, RowRejectedError
from tradepnl.ingestion.base import BaseAdapter
from tradepnl.ingestion.decoder import decode_bytes
from tradepnl.models.enums import Side
from tradepnl.models.fills import NormalizedFill, ParseResult

logger = logging.getLogger(__name__)

COL_TRADE_DATE = "約定日"
COL_SYMBOL_NAME = "銘柄"
COL_SYMBOL_CODE = "銘柄コード"
COL_MARKET = "市場"
COL_SIDE = "取引"
COL_ACCOUNT_TYPE = "預り"
COL_QUANTITY = "約定数量"
COL_PRICE = "約定単価"
COL_FEES = "手数料/諸経費等"
COL_TAX = "税額"
COL_DELIVERY_DATE = "受渡日"
COL_DELIVERY_AMOUNT = "受渡金額/決済損益"

REQUIRED_COLUMNS: tuple[str, ...] = (COL_TRADE_DATE, COL_SYMBOL_CODE, COL_QUANTITY, COL_PRICE)

# Placeholders brokers print for "no value": hyphen, double hyphen, and the
# dash-like characters used in Japanese exports (U+2015, U+2014, U+FF0D).
UNKNOWN_MARKERS = frozenset({"", "-", "--", "―", "—", "－"})

_BUY_MARKER = "買"
_SELL_MARKER = "売"

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_DATE_RE = re.compile(r"([0-9]{2,4})[/\-.]([0-9]{1,2})[/\-.]([0-9]{1,2})")
# Plain ASCII decimal or exponent notation; no digit separators or other scripts.
_NUMBER_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def split_csv_line(line: str) -> list[str]:
    """Split one CSV line on commas, honoring double-quoted fields.

    A doubled quote inside a quoted field is a literal quote. Every field is
    stripped of surrounding whitespace.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        ch = line[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < len(line) and line[i + 1] == '"':
                    current.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                current.append(ch)
        elif ch == '"':
            in_quotes = True
        elif ch == ",":
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
        i += 1
    fields.append("".join(current).strip())
    return fields


def is_header_row(fields: list[str]) -> bool:
    return set(REQUIRED_COLUMNS).issubset(fields)


def parse_japanese_date(value: str) -> str | None:
    """Parse ``2024/01/15``, ``24-1-5``, ``2024.01.15`` or ``2024年1月15日``.

    Returns zero-padded ``YYYY-MM-DD`` text. Two-digit years are 20xx. Month
    must be 1-12 and day 1-31; the day is not checked against the month, so
    ``2024/02/31`` yields ``2024-02-31``.
    """
    cleaned = re.sub("[年月]", "/", value).replace("日", "", 1).strip()
    match = _DATE_RE.fullmatch(cleaned)
    if not match:
        return None

    year, month, day = (int(part) for part in match.groups())
    if year < 100:
        year += 2000
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return None

    return f"{year:04d}-{month:02d}-{day:02d}"


def parse_number(value: str) -> Decimal | None:
    """Parse a locale-formatted amount; None means unknown or malformed."""
    stripped = value.strip()
    if stripped in UNKNOWN_MARKERS:
        return None
    cleaned = stripped.replace(",", "").replace("円", "").strip()
    if not _NUMBER_RE.fullmatch(cleaned):
        return None
    return Decimal(cleaned)


def determine_side(trade_type: str) -> Side:
    """Map the transaction-type column (e.g. 現物買, 信用新規売) to a side."""
    if _BUY_MARKER in trade_type:
        return Side.BUY
    if _SELL_MARKER in trade_type:
        return Side.SELL
    return Side.OTHER


class ExecutionHistoryAdapter(BaseAdapter):
    """Parses execution-history exports into normalized fills."""

    def __init__(self, legacy_encoding: str = "cp932", fallback_encoding: str = "utf-8"):
        self.legacy_encoding = legacy_encoding
        self.fallback_encoding = fallback_encoding

    def parse(self, file_path: Path) -> ParseResult:
        """Read, decode and parse one export file."""
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        decoded = decode_bytes(
            file_path.read_bytes(),
            legacy_encoding=self.legacy_encoding,
            fallback_encoding=self.fallback_encoding,
        )
        result = self.parse_text(decoded.text, source=file_path.name)
        return result.model_copy(update={"encoding": decoded.encoding})

    def parse_text(self, text: str, source: str | None = None) -> ParseResult:
        """Parse decoded export text.

        Row-level problems never abort the batch: each rejected row adds one
        error string and the remaining rows are still processed. Only a
        missing header row ends parsing early.
        """
        lines = _LINE_SPLIT_RE.split(text)

        try:
            header_index, headers = self._find_header(lines, source or "<text>")
        except HeaderNotFoundError as exc:
            logger.warning("%s", exc)
            return ParseResult(errors=[str(exc)], source=source)

        fills: list[NormalizedFill] = []
        errors: list[str] = []
        total_rows = 0
        failed_rows = 0
        unknown_field_count = 0

        for index in range(header_index + 1, len(lines)):
            line = lines[index].strip()
            if not line:
                continue
            total_rows += 1
            line_number = index + 1
            try:
                fill, unknown = self._parse_row(split_csv_line(line), headers, line_number)
            except RowRejectedError as exc:
                logger.debug("Rejected %s", exc)
                errors.append(str(exc))
                failed_rows += 1
                continue
            fills.append(fill)
            unknown_field_count += unknown

        # list.sort is stable: same-date rows keep their file order.
        fills.sort(key=lambda fill: fill.trade_date)

        logger.info(
            "Parsed %s: %d rows, %d ok, %d failed, %d unknown fields",
            source or "<text>", total_rows, len(fills), failed_rows, unknown_field_count,
        )
        return ParseResult(
            fills=fills,
            total_rows=total_rows,
            success_rows=len(fills),
            failed_rows=failed_rows,
            unknown_field_count=unknown_field_count,
            errors=errors,
            source=source,
        )

    def validate(self, data: ParseResult) -> list[str]:
        """Check a parse result for internal consistency."""
        messages: list[str] = []
        label = data.source or "export"

        if not data.fills and not data.errors:
            messages.append(f"{label}: no data rows found")
        if data.total_rows != data.success_rows + data.failed_rows:
            messages.append(
                f"{label}: row counters disagree "
                f"({data.total_rows} != {data.success_rows} + {data.failed_rows})"
            )
        if len(data.fills) != data.success_rows:
            messages.append(f"{label}: {len(data.fills)} fills but {data.success_rows} successful rows")
        dates = [fill.trade_date for fill in data.fills]
        if dates != sorted(dates):
            messages.append(f"{label}: fills are not ordered by trade date")

        return messages

    # --- Row handling ---

    @staticmethod
    def _find_header(lines: list[str], source: str) -> tuple[int, list[str]]:
        for index, line in enumerate(lines):
            fields = split_csv_line(line)
            if is_header_row(fields):
                return index, fields
        raise HeaderNotFoundError(source, REQUIRED_COLUMNS)

    @staticmethod
    def _parse_row(
        fields: list[str], headers: list[str], line_number: int
    ) -> tuple[NormalizedFill, int]:
        """Validate one data row. Returns the fill and its unknown-field count."""
        if len(fields) < len(headers):
            raise RowRejectedError(
                line_number, f"insufficient columns ({len(fields)}/{len(headers)})"
            )

        raw = {name: fields[idx] for idx, name in enumerate(headers)}
        get = raw.get

        raw_date = get(COL_TRADE_DATE, "")
        trade_date = parse_japanese_date(raw_date)
        if trade_date is None:
            raise RowRejectedError(line_number, f'unparseable trade date: "{raw_date}"')

        symbol_code = get(COL_SYMBOL_CODE, "")
        if not symbol_code:
            raise RowRejectedError(line_number, "empty symbol code")

        raw_quantity = get(COL_QUANTITY, "")
        quantity = parse_number(raw_quantity)
        if quantity is None or quantity <= 0:
            raise RowRejectedError(line_number, f'invalid quantity: "{raw_quantity}"')

        raw_price = get(COL_PRICE, "")
        price = parse_number(raw_price)
        if price is None or price < 0:
            raise RowRejectedError(line_number, f'invalid price: "{raw_price}"')

        fees = parse_number(get(COL_FEES, ""))
        tax = parse_number(get(COL_TAX, ""))
        unknown = (fees is None) + (tax is None)

        fill = NormalizedFill(
            trade_date=trade_date,
            symbol_code=symbol_code,
            symbol_name=get(COL_SYMBOL_NAME, ""),
            market=get(COL_MARKET),
            side=determine_side(get(COL_SIDE, "")),
            quantity=quantity,
            price=price,
            fees=fees,
            tax=tax,
            account_type=get(COL_ACCOUNT_TYPE),
            delivery_date=parse_japanese_date(get(COL_DELIVERY_DATE, "")),
            delivery_amount=parse_number(get(COL_DELIVERY_AMOUNT, "")),
            raw=raw,
        )
        return fill, unknown


def parse_csv(text: str) -> ParseResult:
    """Parse decoded export text with the default adapter."""
    return ExecutionHistoryAdapter().parse_text(text)
