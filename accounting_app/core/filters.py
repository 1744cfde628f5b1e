"""Query-string filtering for ``GET /expenses``."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Union

from sqlmodel import select
from sqlmodel.sql.expression import SelectOfScalar

from ..models.expense import Expense
from .errors import ValidationError
from .validation import parse_int, parse_timestamp


INVALID_DATE_MESSAGE = "Invalid date in from/to"


@dataclass
class ExpenseFilter:
    user_id: Optional[int] = None
    categories: List[str] = field(default_factory=list)
    spent_from: Optional[datetime] = None
    spent_to: Optional[datetime] = None
    limit: Optional[int] = None
    offset: Optional[int] = None

    def statement(self) -> SelectOfScalar:
        stmt = select(Expense)
        if self.user_id is not None:
            stmt = stmt.where(Expense.user_id == self.user_id)
        if self.categories:
            stmt = stmt.where(Expense.category.in_(self.categories))
        if self.spent_from is not None:
            stmt = stmt.where(Expense.spent_at >= self.spent_from)
        if self.spent_to is not None:
            stmt = stmt.where(Expense.spent_at <= self.spent_to)

        # Pages are always taken in id order
        stmt = stmt.order_by(Expense.id.asc())

        if self.limit is not None:
            stmt = stmt.limit(self.limit)
        if self.offset is not None:
            stmt = stmt.offset(self.offset)
        return stmt


def parse_categories(raw: Union[str, Sequence[str], None]) -> List[str]:
    """Accept ``food,travel`` or a repeated ``categories`` parameter.

    Repeated values are taken as they are; a single comma separated value is
    split, trimmed and stripped of empty pieces.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        return [piece.strip() for piece in raw.split(",") if piece.strip()]
    return list(raw)


def _page_value(raw: Optional[str]) -> Optional[int]:
    # Bad paging values are ignored rather than rejected
    if not raw:
        return None
    value = parse_int(raw)
    if value is None or value < 0:
        return None
    return value


def build_expense_filter(
    user_id: Optional[str] = None,
    categories: Union[str, Sequence[str], None] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
) -> ExpenseFilter:
    expense_filter = ExpenseFilter()

    if user_id is not None and user_id != "":
        expense_filter.user_id = parse_int(user_id)
        if expense_filter.user_id is None:
            raise ValidationError()

    expense_filter.categories = parse_categories(categories)

    if date_from:
        expense_filter.spent_from = parse_timestamp(date_from)
        if expense_filter.spent_from is None:
            raise ValidationError(INVALID_DATE_MESSAGE)
    if date_to:
        expense_filter.spent_to = parse_timestamp(date_to)
        if expense_filter.spent_to is None:
            raise ValidationError(INVALID_DATE_MESSAGE)

    expense_filter.limit = _page_value(limit)
    expense_filter.offset = _page_value(offset)
    return expense_filter
