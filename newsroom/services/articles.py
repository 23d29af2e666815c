# newsroom/services/articles.py
"""
Shared article queries and the JSON shape of articles, users and categories.
"""
import math
from typing import Dict, Iterable, List, Optional

from sqlalchemy import and_, func, or_
from sqlmodel import Session, select

from newsroom.db.models import Article, ArticleStatus, ArticleTag, Category, Like, Tag, User
from newsroom.utils.errors import NotFound, RequestFailed


# ------------------------------
# Query pieces
# ------------------------------
def like_count():
    """Correlated like count, usable in ORDER BY."""
    return (
        select(func.count(Like.user_id))
        .where(Like.article_id == Article.id)
        .correlate(Article)
        .scalar_subquery()
    )


def text_search(term: str, include_summary: bool = False, include_tags: bool = False):
    """Case-insensitive substring match over title/content (and optionally summary/tags)."""
    clauses = [
        Article.title.icontains(term, autoescape=True),
        Article.content.icontains(term, autoescape=True),
    ]
    if include_summary:
        clauses.append(Article.summary.icontains(term, autoescape=True))
    if include_tags:
        clauses.append(Article.tags.any(Tag.name.icontains(term, autoescape=True)))
    return or_(*clauses)


def count_where(session: Session, conditions: list) -> int:
    return session.exec(select(func.count()).select_from(Article).where(*conditions)).one()


def page_offset(page: int, limit: int) -> int:
    return max(page - 1, 0) * limit


def pagination(total: int, page: int, limit: int) -> Dict:
    return {
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
        "currentPage": page,
    }


def fetch_page(session: Session, conditions: list, order_by: list, page: int, limit: int):
    """One page of articles plus the total for the same conditions."""
    statement = (
        select(Article)
        .where(*conditions)
        .order_by(*order_by)
        .offset(page_offset(page, limit))
        .limit(limit)
    )
    articles = session.exec(statement).all()
    return articles, count_where(session, conditions)


def published_count_by_category(session: Session) -> List[Dict]:
    """Every category with its number of PUBLISHED articles."""
    published = func.count(Article.id)
    statement = (
        select(Category.id, Category.name, published)
        .select_from(Category)
        .outerjoin(
            Article,
            and_(Article.category_id == Category.id, Article.status == ArticleStatus.PUBLISHED),
        )
        .group_by(Category.id, Category.name)
        .order_by(Category.name)
    )
    return [
        {"id": cid, "name": name, "articleCount": count}
        for cid, name, count in session.exec(statement).all()
    ]


def popular_tags(session: Session, limit: int = 10) -> List[Dict]:
    """Tags ordered by their number of PUBLISHED articles."""
    published = func.count(Article.id)
    statement = (
        select(Tag.id, Tag.name, published)
        .select_from(Tag)
        .outerjoin(ArticleTag, ArticleTag.tag_id == Tag.id)
        .outerjoin(
            Article,
            and_(Article.id == ArticleTag.article_id, Article.status == ArticleStatus.PUBLISHED),
        )
        .group_by(Tag.id, Tag.name)
        .order_by(published.desc(), Tag.name)
        .limit(limit)
    )
    return [
        {"id": tid, "name": name, "articleCount": count}
        for tid, name, count in session.exec(statement).all()
    ]


# ------------------------------
# Lookups
# ------------------------------
def get_article_or_404(session: Session, article_id: int) -> Article:
    article = session.get(Article, article_id)
    if not article:
        raise NotFound("Article not found")
    return article


def get_category_or_400(session: Session, category_id: int) -> Category:
    category = session.get(Category, category_id)
    if not category:
        raise RequestFailed(f"Category {category_id} does not exist")
    return category


def set_tags(session: Session, article: Article, names: Iterable[str]) -> None:
    """
    Replace the article's tags, creating missing tags by name.
    Unlinked tags stay in the tag table.
    """
    tags = []
    seen = set()
    for name in names:
        name = name.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        tag = session.exec(select(Tag).where(Tag.name == name)).first()
        if not tag:
            tag = Tag(name=name)
            session.add(tag)
        tags.append(tag)
    article.tags = tags


# ------------------------------
# Serialization
# ------------------------------
def user_brief(user: Optional[User]) -> Optional[Dict]:
    if not user:
        return None
    return {"id": user.id, "name": user.name, "profilePicture": user.profile_picture}


def user_public(user: User) -> Dict:
    # never includes the password hash
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "profilePicture": user.profile_picture,
        "createdAt": user.created_at,
    }


def category_dict(category: Optional[Category]) -> Optional[Dict]:
    if not category:
        return None
    return {"id": category.id, "name": category.name, "description": category.description}


def article_dict(article: Article) -> Dict:
    return {
        "id": article.id,
        "title": article.title,
        "content": article.content,
        "summary": article.summary,
        "imageUrl": article.image_url,
        "status": article.status,
        "rejectionReason": article.rejection_reason,
        "views": article.views,
        "categoryId": article.category_id,
        "authorId": article.author_id,
        "createdAt": article.created_at,
        "updatedAt": article.updated_at,
        "author": user_brief(article.author),
        "category": category_dict(article.category),
        "tags": [{"id": tag.id, "name": tag.name} for tag in article.tags],
        "counts": {"likes": len(article.likes), "savedBy": len(article.saved_by)},
    }
