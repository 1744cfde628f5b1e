from typing import Optional
from sqlmodel import Field

from .common import Timestamped


class Category(Timestamped, table=True):
    __tablename__ = "categories"

    id: Optional[int] = Field(default=None, primary_key=True, index=True)

    # Enforced by the database, duplicates surface as IntegrityError
    name: str = Field(unique=True, nullable=False)
