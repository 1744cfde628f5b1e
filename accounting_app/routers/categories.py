import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict, StrictStr
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.errors import DuplicateNameError, NotFound, datastore_errors
from ..core.validation import apply_updates, parse_id, require_name
from ..database import get_session
from ..models.category import Category


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
)

# ─────────────────────────────
#   SCHEMAS
# ─────────────────────────────

class CategoryCreate(BaseModel):
    name: Optional[StrictStr] = None


class CategoryUpdate(BaseModel):
    name: Optional[StrictStr] = None


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    created_at: datetime
    updated_at: datetime


def _get_category(session: Session, category_id: int) -> Category:
    category = session.get(Category, category_id)
    if category is None:
        raise NotFound("Category not found")
    return category


def _save(session: Session, category: Category) -> Category:
    session.add(category)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateNameError() from exc
    session.refresh(category)
    return category


# ─────────────────────────────
#   ENDPOINTS
# ─────────────────────────────

@router.get(
    "",
    response_model=List[CategoryRead],
)
def list_categories(session: Session = Depends(get_session)):
    with datastore_errors("Error fetching categories"):
        return list(session.exec(select(Category).order_by(Category.id.asc())).all())


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
)
def create_category(
    category_in: CategoryCreate,
    session: Session = Depends(get_session),
):
    """
    Create a category.

    - The name is trimmed before it is stored.
    - A name already in use is rejected by the unique constraint, not by a
      lookup, so two concurrent creates cannot both succeed.
    """
    name = require_name(category_in.name).strip()

    with datastore_errors("Error creating category"):
        category = _save(session, Category(name=name))

    logger.info("Created category %s (%s)", category.id, category.name)
    return category


@router.get(
    "/{category_id}",
    response_model=CategoryRead,
)
def get_category(category_id: str, session: Session = Depends(get_session)):
    id_ = parse_id(category_id)
    with datastore_errors("Error fetching category"):
        return _get_category(session, id_)


@router.patch(
    "/{category_id}",
    response_model=CategoryRead,
)
def update_category(
    category_id: str,
    category_in: CategoryUpdate,
    session: Session = Depends(get_session),
):
    """Rename a category. Omitting ``name`` leaves it unchanged."""
    id_ = parse_id(category_id)
    updates = category_in.model_dump(exclude_unset=True)
    if "name" in updates:
        updates["name"] = require_name(updates["name"]).strip()

    with datastore_errors("Error updating category"):
        category = _get_category(session, id_)
        apply_updates(category, updates)
        return _save(session, category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_category(category_id: str, session: Session = Depends(get_session)):
    id_ = parse_id(category_id)
    with datastore_errors("Error deleting category"):
        category = _get_category(session, id_)
        session.delete(category)
        session.commit()

    logger.info("Deleted category %s", id_)
    return None
