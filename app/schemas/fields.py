"""
Lenient field types for form-style JSON bodies.

HR forms post empty strings for cleared inputs and numeric ids as strings;
these annotated types normalise both before pydantic's own validation runs.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import BeforeValidator


def parse_optional_date(value: Any) -> date | None:
    """'' / None -> None; ISO date or datetime strings -> date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if len(s) > 10:
            # Full timestamps from JS clients, e.g. 2024-05-01T00:00:00.000Z
            return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
        return date.fromisoformat(s)
    raise ValueError("Expected an ISO date string")


def parse_optional_int(value: Any) -> int | None:
    """Foreign-key style ints: '' / None / 0 -> None, '12' -> 12."""
    if value is None or value == "" or value is False:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value or None
    if isinstance(value, float):
        return int(value) or None
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            return int(s) or None
        except ValueError:
            raise ValueError("Expected an integer id")
    raise ValueError("Expected an integer id")


def parse_flag(value: Any) -> bool:
    """Active/Inactive style flags: None / '' -> False; 'true'/'1'/'yes' -> True."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        s = value.strip().lower()
        if s in ("", "0", "false", "no", "off", "inactive"):
            return False
        if s in ("1", "true", "yes", "on", "active"):
            return True
    raise ValueError("Expected a boolean")


def parse_amount(value: Any) -> Decimal:
    """Money amounts: blank -> 0."""
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError("Expected a numeric amount")


OptionalDate = Annotated[date | None, BeforeValidator(parse_optional_date)]
OptionalId = Annotated[int | None, BeforeValidator(parse_optional_int)]
Flag = Annotated[bool, BeforeValidator(parse_flag)]
Amount = Annotated[Decimal, BeforeValidator(parse_amount)]
