# newsroom/routers/admin.py
import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy import func
from sqlmodel import Session, select

from newsroom.db.session import get_session
from newsroom.db.models import Article, Role, User
from newsroom.schemas import AdminUserUpdateRequest
from newsroom.services.articles import user_brief, user_public
from newsroom.utils.auth import require_roles
from newsroom.utils.errors import NotFound

logger = logging.getLogger(__name__)

# All routes require admin role
router = APIRouter(dependencies=[Depends(require_roles(Role.ADMIN))])


def _get_user_or_404(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


@router.get("/dashboard")
def get_dashboard_stats(session: Session = Depends(get_session)):
    total_users = session.exec(select(func.count()).select_from(User)).one()
    total_articles = session.exec(select(func.count()).select_from(Article)).one()
    users_by_role = session.exec(select(User.role, func.count()).group_by(User.role)).all()
    recent = session.exec(select(Article).order_by(Article.created_at.desc()).limit(5)).all()

    return {
        "totalUsers": total_users,
        "totalArticles": total_articles,
        "usersByRole": [{"role": role, "count": count} for role, count in users_by_role],
        "recentArticles": [
            {
                "id": article.id,
                "title": article.title,
                "status": article.status,
                "createdAt": article.created_at,
                "author": user_brief(article.author),
            }
            for article in recent
        ],
    }


@router.get("/users")
def get_all_users(session: Session = Depends(get_session)):
    users = session.exec(select(User).order_by(User.created_at)).all()
    return [
        {
            **user_public(user),
            "counts": {"articles": len(user.articles), "savedArticles": len(user.saved_articles)},
        }
        for user in users
    ]


@router.get("/users/{user_id}")
def get_user_details(user_id: int, session: Session = Depends(get_session)):
    user = _get_user_or_404(session, user_id)
    return {
        **user_public(user),
        "articles": [
            {"id": a.id, "title": a.title, "createdAt": a.created_at} for a in user.articles
        ],
        "savedArticles": [
            {"article": {"id": s.article.id, "title": s.article.title}, "savedAt": s.saved_at}
            for s in user.saved_articles
        ],
    }


@router.put("/users/{user_id}")
def update_user(user_id: int, data: AdminUserUpdateRequest, session: Session = Depends(get_session)):
    user = _get_user_or_404(session, user_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(user, key, value)

    session.add(user)
    session.commit()
    session.refresh(user)
    return user_public(user)


@router.delete("/users/{user_id}", status_code=204)
def delete_user(user_id: int, session: Session = Depends(get_session)):
    user = _get_user_or_404(session, user_id)

    # Likes, bookmarks and follows go with the user; authored articles block it
    session.delete(user)
    session.commit()

    logger.info("User %s deleted", user_id)
    return Response(status_code=204)
