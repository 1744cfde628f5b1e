from datetime import datetime
from typing import Optional
from sqlmodel import Field

from .common import Timestamped


class Expense(Timestamped, table=True):
    __tablename__ = "expenses"

    id: Optional[int] = Field(default=None, primary_key=True, index=True)

    # Plain column: expenses outlive the user they were recorded for
    user_id: int = Field(index=True)

    spent_at: datetime = Field(index=True)
    title: str
    amount: float
    # Free text, not tied to the categories table
    category: Optional[str] = Field(default=None, index=True)
    note: Optional[str] = Field(default=None)
