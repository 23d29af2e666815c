# newsroom/routers/users.py

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from newsroom.db.session import get_session
from newsroom.db.models import Category, Role, User
from newsroom.schemas import ProfileUpdateRequest, RoleUpdateRequest
from newsroom.services.articles import article_dict, category_dict, user_public
from newsroom.utils.auth import get_current_user, require_roles
from newsroom.utils.errors import NotFound, RequestFailed

router = APIRouter()


@router.patch("/profile")
def update_profile(
    data: ProfileUpdateRequest,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(user, key, value)

    session.add(user)
    session.commit()
    session.refresh(user)
    return user_public(user)


@router.patch("/{user_id}/role")
def update_role(
    user_id: int,
    data: RoleUpdateRequest,
    admin: User = Depends(require_roles(Role.ADMIN)),
    session: Session = Depends(get_session),
):
    user = session.get(User, user_id)
    if not user:
        raise NotFound("User not found")

    user.role = data.role
    session.add(user)
    session.commit()
    session.refresh(user)
    return user_public(user)


# ------------------------------
# Followed categories (drive /articles/feed/my)
# ------------------------------
@router.get("/categories")
def followed_categories(user: User = Depends(get_current_user)):
    return [category_dict(category) for category in user.followed_categories]


@router.post("/categories/{category_id}/follow", status_code=201)
def follow_category(
    category_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    category = session.get(Category, category_id)
    if not category:
        raise NotFound("Category not found")
    if category in user.followed_categories:
        raise RequestFailed("Category already followed")

    user.followed_categories.append(category)
    session.add(user)
    session.commit()
    return [category_dict(c) for c in user.followed_categories]


@router.delete("/categories/{category_id}/follow", status_code=204)
def unfollow_category(
    category_id: int,
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    category = session.get(Category, category_id)
    if not category or category not in user.followed_categories:
        raise RequestFailed("Category not followed")

    user.followed_categories.remove(category)
    session.add(user)
    session.commit()
    return Response(status_code=204)


# ------------------------------
# Bookmarks
# ------------------------------
@router.get("/saved")
def saved_articles(user: User = Depends(get_current_user)):
    saved = sorted(user.saved_articles, key=lambda link: link.saved_at, reverse=True)
    return [
        {"savedAt": link.saved_at, "article": article_dict(link.article)}
        for link in saved
    ]
