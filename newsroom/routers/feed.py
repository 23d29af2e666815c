from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from newsroom.db.session import get_session
from newsroom.db.models import Article, ArticleStatus, User
from newsroom.services.articles import article_dict
from newsroom.utils.auth import get_current_user

router = APIRouter()

FEED_SIZE = 20


@router.get("/my")
def my_feed(user: User = Depends(get_current_user), session: Session = Depends(get_session)):
    category_ids = [category.id for category in user.followed_categories]
    if not category_ids:
        return []

    statement = (
        select(Article)
        .where(Article.status == ArticleStatus.PUBLISHED, Article.category_id.in_(category_ids))
        .order_by(Article.created_at.desc())
        .limit(FEED_SIZE)
    )
    return [article_dict(article) for article in session.exec(statement).all()]
