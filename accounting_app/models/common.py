from datetime import datetime

from sqlmodel import SQLModel, Field

from ..core.validation import utcnow


class Timestamped(SQLModel):
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
