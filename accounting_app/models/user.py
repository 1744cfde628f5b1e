from typing import Optional
from sqlmodel import Field

from .common import Timestamped


class User(Timestamped, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True, index=True)

    name: str = Field(nullable=False)
