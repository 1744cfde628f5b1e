"""Field rules shared by the user, category and expense routers.

Everything here raises :class:`~accounting_app.core.errors.ValidationError`
on bad input, which the app turns into a ``400`` response.
"""
import re
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from .errors import ValidationError


_INT_RE = re.compile(r"^\s*[+-]?\d+\s*$")

# Integer columns are signed 64-bit
MIN_INT = -(2 ** 63)
MAX_INT = 2 ** 63 - 1

EXPENSE_REQUIRED_FIELDS = ("user_id", "spent_at", "title")
EXPENSE_NOT_NULL_FIELDS = ("spent_at", "title", "amount")


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Timestamps are stored as naive UTC."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_int(raw: Any) -> Optional[int]:
    """Return ``raw`` as an int, or ``None`` when it is not a whole number
    that fits an integer column."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str) and _INT_RE.match(raw) and len(raw.strip()) <= 20:
        raw = int(raw)
    if isinstance(raw, int) and MIN_INT <= raw <= MAX_INT:
        return raw
    return None


def parse_id(raw: Any) -> int:
    value = parse_int(raw)
    if value is None:
        raise ValidationError()
    return value


def parse_timestamp(raw: str) -> Optional[datetime]:
    """Parse an ISO 8601 date or datetime; ``None`` when unparseable."""
    try:
        return to_naive_utc(datetime.fromisoformat(raw.strip()))
    except (AttributeError, ValueError):
        return None


def is_blank(value: Any) -> bool:
    return not isinstance(value, str) or value.strip() == ""


def require_name(value: Any) -> str:
    if is_blank(value):
        raise ValidationError()
    return value


def require_expense_fields(data: Mapping[str, Any]) -> None:
    """Check a new expense's payload.

    ``user_id``, ``spent_at`` and ``title`` must be truthy, while ``amount``
    only has to be there: an amount of ``0`` is a valid expense.
    """
    for field in EXPENSE_REQUIRED_FIELDS:
        if not data.get(field):
            raise ValidationError()
    if data.get("amount") is None:
        raise ValidationError()


def reject_nulls(data: Mapping[str, Any], fields: Iterable[str]) -> None:
    for field in fields:
        if field in data and data[field] is None:
            raise ValidationError()


def apply_updates(record: Any, updates: Mapping[str, Any]) -> Any:
    """Merge the fields present in ``updates`` into ``record``.

    Fields missing from ``updates`` keep their stored value; ``updated_at``
    is refreshed either way.
    """
    for field, value in updates.items():
        setattr(record, field, value)
    record.updated_at = utcnow()
    return record
