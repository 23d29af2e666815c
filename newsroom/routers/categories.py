# newsroom/routers/categories.py
import logging

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import func
from sqlmodel import Session, select

from newsroom.db.session import get_session
from newsroom.db.models import Article, Category, Role, User
from newsroom.schemas import CategoryRequest, CategoryUpdateRequest
from newsroom.services.articles import category_dict, published_count_by_category
from newsroom.utils.auth import require_roles
from newsroom.utils.errors import NotFound

logger = logging.getLogger(__name__)

router = APIRouter()

admin_only = require_roles(Role.ADMIN)


def _get_category_or_404(session: Session, category_id: int) -> Category:
    category = session.get(Category, category_id)
    if not category:
        raise NotFound("Category not found")
    return category


# ------------------------------
# Public
# ------------------------------
@router.get("")
def get_categories(
    include_count: bool = Query(False, alias="includeCount"),
    session: Session = Depends(get_session),
):
    """Categories by name; `includeCount` adds the PUBLISHED article count."""
    categories = session.exec(select(Category).order_by(Category.name)).all()
    items = [category_dict(category) for category in categories]

    if include_count:
        counts = {row["id"]: row["articleCount"] for row in published_count_by_category(session)}
        for item in items:
            item["articleCount"] = counts.get(item["id"], 0)

    return items


@router.get("/all")
def get_all_categories(session: Session = Depends(get_session)):
    """Every category with its total article count, whatever the status."""
    statement = (
        select(Category, func.count(Article.id))
        .outerjoin(Article, Article.category_id == Category.id)
        .group_by(Category.id)
        .order_by(Category.name)
    )
    return [
        {**category_dict(category), "articleCount": count}
        for category, count in session.exec(statement).all()
    ]


# ------------------------------
# Admin
# ------------------------------
@router.post("", status_code=201)
def create_category(
    data: CategoryRequest,
    user: User = Depends(admin_only),
    session: Session = Depends(get_session),
):
    category = Category(name=data.name, description=data.description)
    session.add(category)
    session.commit()
    session.refresh(category)
    return category_dict(category)


@router.put("/{category_id}")
def update_category(
    category_id: int,
    data: CategoryUpdateRequest,
    user: User = Depends(admin_only),
    session: Session = Depends(get_session),
):
    category = _get_category_or_404(session, category_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(category, key, value)

    session.add(category)
    session.commit()
    session.refresh(category)
    return category_dict(category)


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: int,
    user: User = Depends(admin_only),
    session: Session = Depends(get_session),
):
    category = _get_category_or_404(session, category_id)

    # Categories that still hold articles fail on the foreign key (400)
    session.delete(category)
    session.commit()

    logger.info("Category %s deleted by user %s", category_id, user.id)
    return Response(status_code=204)
