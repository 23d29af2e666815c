# newsroom/routers/search.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select

from newsroom.db.session import get_session
from newsroom.db.models import Article, ArticleStatus, Category, Tag
from newsroom.services.articles import (
    article_dict,
    fetch_page,
    like_count,
    pagination,
    popular_tags,
    published_count_by_category,
    text_search,
)
from newsroom.services.ranking import date_range_start, rank_by_relevance, relevance_score

logger = logging.getLogger(__name__)

router = APIRouter()

SORT_ORDERS = {
    "date": lambda: [Article.created_at.desc()],
    "views": lambda: [Article.views.desc()],
    "likes": lambda: [like_count().desc()],
    "relevance": lambda: [Article.views.desc(), Article.created_at.desc()],
}


# ------------------------------
# Full-text search over articles
# ------------------------------
@router.get("")
def search_articles(
    query: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
    sort_by: str = Query("relevance", alias="sortBy"),
    category_id: Optional[int] = Query(None, alias="categoryId"),
    tags: Optional[List[str]] = Query(None),
    date_range: Optional[str] = Query(None, alias="dateRange"),
    status: ArticleStatus = ArticleStatus.PUBLISHED,
    session: Session = Depends(get_session),
):
    conditions = [Article.status == status]
    if query:
        conditions.append(text_search(query, include_summary=True, include_tags=True))
    if category_id is not None:
        conditions.append(Article.category_id == category_id)
    if tags:
        conditions.append(Article.tags.any(Tag.name.in_(tags)))

    since = date_range_start(date_range)
    if since is not None:
        conditions.append(Article.created_at >= since)

    order_by = SORT_ORDERS.get(sort_by, SORT_ORDERS["relevance"])()
    articles, total = fetch_page(session, conditions, order_by, page, limit)

    items = [article_dict(article) for article in articles]
    if query:
        for item in items:
            item["relevanceScore"] = relevance_score(
                query,
                title=item["title"],
                content=item["content"],
                summary=item["summary"],
                tag_names=[tag["name"] for tag in item["tags"]],
                views=item["views"],
                likes=item["counts"]["likes"],
            )
        # Reorders this page only; rows beyond it are never pulled in
        if sort_by == "relevance":
            items = rank_by_relevance(items)

    logger.debug("Search %r matched %s articles", query, total)

    return {
        "articles": items,
        "pagination": pagination(total, page, limit),
        "filters": {
            "query": query,
            "sortBy": sort_by,
            "categoryId": category_id,
            "tags": tags,
            "dateRange": date_range,
        },
        "categories": published_count_by_category(session),
        "popularTags": popular_tags(session),
    }


# ------------------------------
# Autocomplete
# ------------------------------
@router.get("/suggestions")
def get_search_suggestions(query: Optional[str] = None, session: Session = Depends(get_session)):
    if not query or len(query) < 2:
        return {"suggestions": []}

    titles = session.exec(
        select(Article.title)
        .where(Article.status == ArticleStatus.PUBLISHED, Article.title.icontains(query, autoescape=True))
        .limit(5)
    ).all()
    tag_names = session.exec(select(Tag.name).where(Tag.name.icontains(query, autoescape=True)).limit(3)).all()
    category_names = session.exec(
        select(Category.name).where(Category.name.icontains(query, autoescape=True)).limit(3)
    ).all()

    return {
        "suggestions": {
            "articles": list(titles),
            "tags": list(tag_names),
            "categories": list(category_names),
        }
    }
