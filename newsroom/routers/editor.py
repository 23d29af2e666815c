# newsroom/routers/editor.py
"""Editor desk: an author's own articles and how they perform."""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlmodel import Session, select

from newsroom.db.session import get_session
from newsroom.db.models import Article, ArticleStatus, Like, Role, User
from newsroom.schemas import StatusUpdateRequest
from newsroom.services.articles import (
    article_dict,
    fetch_page,
    like_count,
    pagination,
    text_search,
    user_brief,
)
from newsroom.services.workflow import status_counts, transition
from newsroom.utils.auth import require_roles
from newsroom.utils.errors import NotFound

router = APIRouter()

editor_or_admin = require_roles(Role.EDITOR, Role.ADMIN)


def _own_article_or_404(session: Session, article_id: int, user: User) -> Article:
    article = session.get(Article, article_id)
    if not article or article.author_id != user.id:
        raise NotFound("Article not found")
    return article


@router.get("/stats")
def get_editor_stats(user: User = Depends(editor_or_admin), session: Session = Depends(get_session)):
    grouped = session.exec(
        select(Article.status, func.count())
        .where(Article.author_id == user.id)
        .group_by(Article.status)
    ).all()
    total_views = session.exec(
        select(func.coalesce(func.sum(Article.views), 0))
        .where(Article.author_id == user.id, Article.status == ArticleStatus.PUBLISHED)
    ).one()
    total_likes = session.exec(
        select(func.count())
        .select_from(Like)
        .join(Article, Article.id == Like.article_id)
        .where(Article.author_id == user.id)
    ).one()

    return {
        "articleStats": status_counts(grouped),
        "totalViews": total_views,
        "totalLikes": total_likes,
    }


@router.get("/articles")
def get_editor_articles(
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

    articles, total = fetch_page(session, conditions, [Article.created_at.desc()], page, limit)

    items = []
    for article in articles:
        item = article_dict(article)
        item["likes"] = [{"userId": like.user_id, "createdAt": like.created_at} for like in article.likes]
        items.append(item)

    return {"articles": items, "pagination": pagination(total, page, limit)}


@router.get("/articles/top")
def get_top_articles(user: User = Depends(editor_or_admin), session: Session = Depends(get_session)):
    statement = (
        select(Article)
        .where(Article.author_id == user.id, Article.status == ArticleStatus.PUBLISHED)
        .order_by(Article.views.desc(), like_count().desc())
        .limit(5)
    )
    return [article_dict(article) for article in session.exec(statement).all()]


@router.get("/articles/{article_id}")
def get_article_details(
    article_id: int,
    user: User = Depends(editor_or_admin),
    session: Session = Depends(get_session),
):
    article = _own_article_or_404(session, article_id, user)

    item = article_dict(article)
    item["likes"] = [
        {"user": user_brief(like.user), "createdAt": like.created_at} for like in article.likes
    ]
    item["savedBy"] = [
        {"user": user_brief(saved.user), "savedAt": saved.saved_at} for saved in article.saved_by
    ]
    return item


@router.patch("/articles/{article_id}/status")
def update_article_status(
    article_id: int,
    data: StatusUpdateRequest,
    user: User = Depends(editor_or_admin),
    session: Session = Depends(get_session),
):
    article = transition(
        session, article_id, user, data.status, data.rejection_reason, require_ownership=True
    )
    return article_dict(article)
