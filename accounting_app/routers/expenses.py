import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field, StrictStr
from pydantic.alias_generators import to_camel
from sqlmodel import Session

from ..core.errors import NotFound, ValidationError, datastore_errors
from ..core.filters import build_expense_filter
from ..core.validation import (
    EXPENSE_NOT_NULL_FIELDS,
    MAX_INT,
    MIN_INT,
    apply_updates,
    parse_id,
    reject_nulls,
    require_expense_fields,
    to_naive_utc,
)
from ..database import get_session
from ..models.expense import Expense
from ..models.user import User


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/expenses",
    tags=["expenses"],
)

# ─────────────────────────────
#   SCHEMAS
# ─────────────────────────────

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExpenseCreate(CamelModel):
    user_id: Optional[int] = Field(default=None, ge=MIN_INT, le=MAX_INT)
    spent_at: Optional[datetime] = None
    title: Optional[StrictStr] = None
    amount: Optional[float] = None
    category: Optional[StrictStr] = None
    note: Optional[StrictStr] = None


class ExpenseUpdate(CamelModel):
    # user_id cannot be changed once recorded
    spent_at: Optional[datetime] = None
    title: Optional[StrictStr] = None
    amount: Optional[float] = None
    category: Optional[StrictStr] = None
    note: Optional[StrictStr] = None


class ExpenseRead(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    spent_at: datetime
    title: str
    amount: float
    category: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime
    updated_at: datetime


def _get_expense(session: Session, expense_id: int) -> Expense:
    expense = session.get(Expense, expense_id)
    if expense is None:
        raise NotFound("Expense not found")
    return expense


# ─────────────────────────────
#   ENDPOINTS
# ─────────────────────────────

@router.get(
    "",
    response_model=List[ExpenseRead],
)
def list_expenses(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    categories: Optional[List[str]] = Query(default=None),
    date_from: Optional[str] = Query(default=None, alias="from"),
    date_to: Optional[str] = Query(default=None, alias="to"),
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    session: Session = Depends(get_session),
):
    """
    List expenses, optionally filtered.

    - ``categories`` is either comma separated or repeated.
    - ``from``/``to`` bound ``spentAt`` inclusively.
    - Always ordered by id; bad ``limit``/``offset`` values are ignored.
    """
    if categories is not None and len(categories) == 1:
        categories = categories[0]

    expense_filter = build_expense_filter(
        user_id=user_id,
        categories=categories,
        date_from=date_from,
        date_to=date_to,
        limit=limit,
        offset=offset,
    )

    with datastore_errors("Error fetching expenses"):
        return list(session.exec(expense_filter.statement()).all())


@router.post(
    "",
    response_model=ExpenseRead,
    status_code=status.HTTP_201_CREATED,
)
def create_expense(
    expense_in: ExpenseCreate,
    session: Session = Depends(get_session),
):
    """Record an expense for an existing user."""
    data = expense_in.model_dump(exclude_unset=True)
    require_expense_fields(data)

    with datastore_errors("Error creating expense"):
        if session.get(User, data["user_id"]) is None:
            raise ValidationError()

        expense = Expense(
            user_id=data["user_id"],
            spent_at=to_naive_utc(data["spent_at"]),
            title=data["title"],
            amount=data["amount"],
            category=data.get("category"),
            note=data.get("note") or None,
        )
        session.add(expense)
        session.commit()
        session.refresh(expense)

    logger.info("Created expense %s for user %s", expense.id, expense.user_id)
    return expense


@router.get(
    "/{expense_id}",
    response_model=ExpenseRead,
)
def get_expense(expense_id: str, session: Session = Depends(get_session)):
    id_ = parse_id(expense_id)
    with datastore_errors("Error fetching expense"):
        return _get_expense(session, id_)


@router.patch(
    "/{expense_id}",
    response_model=ExpenseRead,
)
def update_expense(
    expense_id: str,
    expense_in: ExpenseUpdate,
    session: Session = Depends(get_session),
):
    """Partially update an expense; fields left out keep their value."""
    id_ = parse_id(expense_id)
    updates = expense_in.model_dump(exclude_unset=True)
    reject_nulls(updates, EXPENSE_NOT_NULL_FIELDS)
    if "spent_at" in updates:
        updates["spent_at"] = to_naive_utc(updates["spent_at"])

    with datastore_errors("Error updating expense"):
        expense = _get_expense(session, id_)
        apply_updates(expense, updates)
        session.add(expense)
        session.commit()
        session.refresh(expense)
    return expense


@router.delete(
    "/{expense_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_expense(expense_id: str, session: Session = Depends(get_session)):
    id_ = parse_id(expense_id)
    with datastore_errors("Error deleting expense"):
        expense = _get_expense(session, id_)
        session.delete(expense)
        session.commit()

    logger.info("Deleted expense %s", id_)
    return None
