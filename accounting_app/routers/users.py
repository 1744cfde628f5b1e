import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, StrictStr
from pydantic.alias_generators import to_camel
from sqlmodel import Session, select

from ..core.errors import NotFound, datastore_errors
from ..core.validation import apply_updates, parse_id, require_name
from ..database import get_session
from ..models.user import User


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)

# ─────────────────────────────
#   SCHEMAS
# ─────────────────────────────

class UserCreate(BaseModel):
    name: Optional[StrictStr] = None


class UserUpdate(BaseModel):
    name: Optional[StrictStr] = None


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    created_at: datetime
    updated_at: datetime


def _get_user(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


# ─────────────────────────────
#   ENDPOINTS
# ─────────────────────────────

@router.get(
    "",
    response_model=List[UserRead],
)
def list_users(session: Session = Depends(get_session)):
    with datastore_errors("Error fetching users"):
        return list(session.exec(select(User).order_by(User.id.asc())).all())


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    user_in: UserCreate,
    session: Session = Depends(get_session),
):
    """Create a user. The name is stored exactly as sent."""
    name = require_name(user_in.name)

    with datastore_errors("Error creating user"):
        user = User(name=name)
        session.add(user)
        session.commit()
        session.refresh(user)

    logger.info("Created user %s", user.id)
    return user


@router.get(
    "/{user_id}",
    response_model=UserRead,
)
def get_user(user_id: str, session: Session = Depends(get_session)):
    id_ = parse_id(user_id)
    with datastore_errors("Error fetching user"):
        return _get_user(session, id_)


@router.patch(
    "/{user_id}",
    response_model=UserRead,
)
def update_user(
    user_id: str,
    user_in: UserUpdate,
    session: Session = Depends(get_session),
):
    id_ = parse_id(user_id)
    updates = user_in.model_dump(exclude_unset=True)
    if "name" in updates:
        require_name(updates["name"])

    with datastore_errors("Error updating user"):
        user = _get_user(session, id_)
        apply_updates(user, updates)
        session.add(user)
        session.commit()
        session.refresh(user)
    return user


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_user(user_id: str, session: Session = Depends(get_session)):
    """Delete a user. Their expenses are left in place."""
    id_ = parse_id(user_id)
    with datastore_errors("Error deleting user"):
        user = _get_user(session, id_)
        session.delete(user)
        session.commit()

    logger.info("Deleted user %s", id_)
    return None
