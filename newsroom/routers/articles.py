# newsroom/routers/articles.py

import os
from typing import Optional

from dotenv import load_dotenv
from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy import update
from sqlmodel import Session

from newsroom.db.session import get_session
from newsroom.db.models import Article, ArticleStatus, Like, Role, SavedArticle, User, utcnow
from newsroom.schemas import ArticleCreateRequest, ArticleUpdateRequest
from newsroom.services.articles import (
    article_dict,
    fetch_page,
    get_article_or_404,
    get_category_or_400,
    like_count,
    pagination,
    set_tags,
)
from newsroom.services.ranking import engagement_score, trending_window_start
from newsroom.services.workflow import can_edit
from newsroom.utils.auth import get_current_user, require_roles
from newsroom.utils.errors import AuthorizationDenied, RequestFailed

load_dotenv()

TRENDING_DAYS = int(os.getenv("TRENDING_DAYS", 7))

router = APIRouter()

editor_or_admin = require_roles(Role.EDITOR, Role.ADMIN)


# ------------------------------
# Trending Articles
# Ordered by views, then likes; engagement score attached per item
# ------------------------------
@router.get("/trending")
def get_trending_articles(
    page: int = 1,
    limit: int = 10,
    days: int = TRENDING_DAYS,
    category_id: Optional[int] = Query(None, alias="categoryId"),
    session: Session = Depends(get_session),
):
    conditions = [
        Article.status == ArticleStatus.PUBLISHED,
        Article.created_at >= trending_window_start(days),
    ]
    if category_id is not None:
        conditions.append(Article.category_id == category_id)

    articles, total = fetch_page(
        session, conditions, [Article.views.desc(), like_count().desc()], page, limit
    )

    items = []
    for article in articles:
        item = article_dict(article)
        counts = item["counts"]
        item["engagementScore"] = engagement_score(article.views, counts["likes"], counts["savedBy"])
        items.append(item)

    return {
        "articles": items,
        "pagination": pagination(total, page, limit),
        "filters": {"days": days, "categoryId": category_id},
    }


# ------------------------------
# Published articles of one category
# ------------------------------
@router.get("/category/{category_id}")
def get_articles_by_category(
    category_id: int,
    page: int = 1,
    limit: int = 10,
    session: Session = Depends(get_session),
):
    conditions = [
        Article.category_id == category_id,
        Article.status == ArticleStatus.PUBLISHED,
    ]
    articles, total = fetch_page(session, conditions, [Article.created_at.desc()], page, limit)

    return {
        "articles": [article_dict(article) for article in articles],
        "pagination": pagination(total, page, limit),
    }


# ------------------------------
# Fetch single article + increment views
# ------------------------------
@router.get("/{article_id}")
def view_article(article_id: int, session: Session = Depends(get_session)):
    article = get_article_or_404(session, article_id)

    # Single UPDATE so concurrent reads never lose an increment
    session.execute(
        update(Article).where(Article.id == article_id).values(views=Article.views + 1)
    )
    session.commit()
    session.refresh(article)

    return article_dict(article)


# ------------------------------
# Create new article
# ------------------------------
@router.post("", status_code=201)
def create_article(
    data: ArticleCreateRequest,
    user: User = Depends(editor_or_admin),
    session: Session = Depends(get_session),
):
    get_category_or_400(session, data.category_id)

    article = Article(
        title=data.title,
        content=data.content,
        summary=data.summary,
        image_url=data.image_url,
        category_id=data.category_id,
        author_id=user.id,
    )
    session.add(article)
    set_tags(session, article, data.tags)
    session.commit()
    session.refresh(article)

    return article_dict(article)


# ------------------------------
# Update Article
# ------------------------------
@router.put("/{article_id}")
def update_article(
    article_id: int,
    data: ArticleUpdateRequest,
    user: User = Depends(editor_or_admin),
    session: Session = Depends(get_session),
):
    article = get_article_or_404(session, article_id)

    # Editors cannot update others' articles
    if not can_edit(user.role, article.author_id == user.id):
        raise AuthorizationDenied("Not allowed")

    fields = data.model_dump(exclude_unset=True, exclude={"tags"})
    if fields.get("category_id") is not None:
        get_category_or_400(session, fields["category_id"])

    for key, value in fields.items():
        setattr(article, key, value)
    if data.tags is not None:
        set_tags(session, article, data.tags)
    article.updated_at = utcnow()

    session.add(article)
    session.commit()
    session.refresh(article)

    return article_dict(article)


# ------------------------------
# Like / Unlike
# ------------------------------
@router.post("/{article_id}/like", status_code=201)
def like_article(
    article_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    get_article_or_404(session, article_id)

    # A second like violates the (user, article) key and surfaces as a 400
    session.add(Like(user_id=user.id, article_id=article_id))
    session.commit()

    return {"success": True}


@router.delete("/{article_id}/like", status_code=204)
def unlike_article(
    article_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    like = session.get(Like, (user.id, article_id))
    if not like:
        raise RequestFailed("Like not found")

    session.delete(like)
    session.commit()
    return Response(status_code=204)


# ------------------------------
# Save / Unsave (bookmarks)
# ------------------------------
@router.post("/{article_id}/save", status_code=201)
def save_article(
    article_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    get_article_or_404(session, article_id)

    session.add(SavedArticle(user_id=user.id, article_id=article_id))
    session.commit()

    return {"success": True}


@router.delete("/{article_id}/save", status_code=204)
def unsave_article(
    article_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    saved = session.get(SavedArticle, (user.id, article_id))
    if not saved:
        raise RequestFailed("Saved article not found")

    session.delete(saved)
    session.commit()
    return Response(status_code=204)
