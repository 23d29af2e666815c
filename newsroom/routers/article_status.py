# newsroom/routers/article_status.py

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlmodel import Session, select

from newsroom.db.session import get_session
from newsroom.db.models import Article, ArticleStatus, Role, User
from newsroom.schemas import StatusUpdateRequest
from newsroom.services.articles import article_dict, fetch_page, pagination, text_search
from newsroom.services.workflow import status_counts, transition
from newsroom.utils.auth import require_roles

router = APIRouter()

editor_only = require_roles(Role.EDITOR)
admin_only = require_roles(Role.ADMIN)
editor_or_admin = require_roles(Role.EDITOR, Role.ADMIN)


def _grouped_counts(session: Session, *conditions) -> dict:
    statement = select(Article.status, func.count()).where(*conditions).group_by(Article.status)
    return status_counts(session.exec(statement).all())


# ------------------------------
# Transitions
# ------------------------------
@router.patch("/editor/{article_id}/status")
def update_status_by_editor(
    article_id: int,
    data: StatusUpdateRequest,
    user: User = Depends(editor_only),
    session: Session = Depends(get_session),
):
    article = transition(session, article_id, user, data.status)
    return article_dict(article)


@router.patch("/admin/{article_id}/status")
def update_status_by_admin(
    article_id: int,
    data: StatusUpdateRequest,
    user: User = Depends(admin_only),
    session: Session = Depends(get_session),
):
    article = transition(session, article_id, user, data.status, data.rejection_reason)
    return article_dict(article)


# ------------------------------
# Review queue and listings
# ------------------------------
@router.get("/pending")
def get_pending_articles(
    page: int = 1,
    limit: int = 10,
    user: User = Depends(admin_only),
    session: Session = Depends(get_session),
):
    conditions = [Article.status == ArticleStatus.PENDING]
    articles, total = fetch_page(session, conditions, [Article.updated_at.desc()], page, limit)

    return {
        "articles": [article_dict(article) for article in articles],
        "pagination": pagination(total, page, limit),
    }


@router.get("/status")
def get_articles_by_status(
    status: Optional[ArticleStatus] = None,
    page: int = 1,
    limit: int = 10,
    user: User = Depends(admin_only),
    session: Session = Depends(get_session),
):
    conditions = [Article.status == status] if status else []
    articles, total = fetch_page(session, conditions, [Article.updated_at.desc()], page, limit)

    return {
        "articles": [article_dict(article) for article in articles],
        "pagination": pagination(total, page, limit),
    }


@router.get("/my")
def get_my_articles_by_status(
    status: Optional[ArticleStatus] = None,
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    user: User = Depends(editor_or_admin),
    session: Session = Depends(get_session),
):
    conditions = [Article.author_id == user.id]
    if status:
        conditions.append(Article.status == status)
    if search:
        conditions.append(text_search(search))

    articles, total = fetch_page(session, conditions, [Article.updated_at.desc()], page, limit)

    return {
        "articles": [article_dict(article) for article in articles],
        "pagination": pagination(total, page, limit),
        "statusCounts": _grouped_counts(session, Article.author_id == user.id),
    }


@router.get("/all")
def get_all_articles_by_status(
    status: Optional[ArticleStatus] = None,
    page: int = 1,
    limit: int = 10,
    search: Optional[str] = None,
    category_id: Optional[int] = Query(None, alias="categoryId"),
    user: User = Depends(admin_only),
    session: Session = Depends(get_session),
):
    conditions = []
    if status:
        conditions.append(Article.status == status)
    if category_id is not None:
        conditions.append(Article.category_id == category_id)
    if search:
        conditions.append(text_search(search))

    articles, total = fetch_page(session, conditions, [Article.updated_at.desc()], page, limit)

    return {
        "articles": [article_dict(article) for article in articles],
        "pagination": pagination(total, page, limit),
        "statusCounts": _grouped_counts(session),
    }
