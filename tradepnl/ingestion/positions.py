"""Opening positions: construction, shortfall pre-fill, and JSON import.

Positions are plain values owned by the caller. Editing means building a new
list; nothing here keeps state between calls.
"""

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path

from tradepnl.exceptions import PositionValidationError
from tradepnl.models.fills import OpeningPosition
from tradepnl.models.trades import MissingCostEntry


def _positive_decimal(field: str, value: object) -> Decimal:
    if value is None or isinstance(value, bool):
        raise PositionValidationError(field, "a positive number is required")
    try:
        number = Decimal(str(value))
    except InvalidOperation as exc:
        raise PositionValidationError(field, f"not a number: {value!r}") from exc
    if not number.is_finite() or number <= 0:
        raise PositionValidationError(field, f"must be > 0, got {value!r}")
    return number


def new_opening_position(
    symbol_code: str,
    quantity: object,
    avg_cost: object,
    symbol_name: str = "",
    account_type: str = "",
) -> OpeningPosition:
    """Validate user input and create a position with a fresh id."""
    code = (symbol_code or "").strip()
    if not code:
        raise PositionValidationError("symbol_code", "symbol code is required")

    return OpeningPosition(
        symbol_code=code,
        symbol_name=(symbol_name or "").strip() or code,
        quantity=_positive_decimal("quantity", quantity),
        avg_cost=_positive_decimal("avg_cost", avg_cost),
        account_type=(account_type or "").strip(),
    )


def position_from_shortfall(entry: MissingCostEntry, avg_cost: object) -> OpeningPosition:
    """Pre-fill a position covering a missing-cost shortfall."""
    return new_opening_position(
        symbol_code=entry.symbol_code,
        quantity=entry.short_quantity,
        avg_cost=avg_cost,
        symbol_name=entry.symbol_name,
        account_type=entry.account_type,
    )


def remove_position(positions: list[OpeningPosition], position_id: str) -> list[OpeningPosition]:
    return [position for position in positions if position.id != position_id]


def load_opening_positions(file_path: Path) -> list[OpeningPosition]:
    """Load positions from a JSON list of objects.

    Each object needs ``symbol_code``, ``quantity`` and ``avg_cost``;
    ``symbol_name``, ``account_type`` and ``id`` are optional.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    raw = json.loads(file_path.read_text(encoding="utf-8"))
    records = raw if isinstance(raw, list) else [raw]

    positions: list[OpeningPosition] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise PositionValidationError(f"[{index}]", "each position must be a JSON object")
        try:
            position = new_opening_position(
                symbol_code=str(record.get("symbol_code") or ""),
                quantity=record.get("quantity"),
                avg_cost=record.get("avg_cost"),
                symbol_name=str(record.get("symbol_name") or ""),
                account_type=str(record.get("account_type") or ""),
            )
        except PositionValidationError as exc:
            raise PositionValidationError(f"[{index}].{exc.field}", exc.reason) from exc
        if record.get("id"):
            position = position.model_copy(update={"id": str(record["id"])})
        positions.append(position)
    return positions


def positions_template(entries: list[MissingCostEntry]) -> list[dict]:
    """JSON-ready skeleton for the shortfalls; ``avg_cost`` is left for the user."""
    return [
        {
            "symbol_code": entry.symbol_code,
            "symbol_name": entry.symbol_name,
            "account_type": entry.account_type,
            "quantity": str(entry.short_quantity),
            "avg_cost": None,
        }
        for entry in entries
    ]
