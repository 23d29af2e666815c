"""
Shared fixtures: an in-memory database, an API client bound to it, and
users of every role with bearer tokens.
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from newsroom.db.models import Article, ArticleStatus, Category, Like, Role, SavedArticle, User  # noqa: E402
from newsroom.db.session import build_engine, get_session  # noqa: E402
from newsroom.main import app  # noqa: E402
from newsroom.services.articles import set_tags  # noqa: E402
from newsroom.utils.auth import create_jwt, hash_password  # noqa: E402

PASSWORD = "secret123"


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    """API client whose requests each get their own session on the test database."""
    def get_test_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = get_test_session
    yield TestClient(app)
    app.dependency_overrides.clear()


# ============================================================================
# Users
# ============================================================================

@pytest.fixture(scope="session")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture
def users(session, password_hash):
    """One user per role, plus a second editor."""
    people = {
        "admin": User(email="admin@example.com", password=password_hash, name="Ada Admin", role=Role.ADMIN),
        "editor": User(email="editor@example.com", password=password_hash, name="Ed Editor", role=Role.EDITOR),
        "other_editor": User(email="other@example.com", password=password_hash, name="Otto Other", role=Role.EDITOR),
        "reader": User(email="reader@example.com", password=password_hash, name="Rita Reader", role=Role.USER),
    }
    session.add_all(people.values())
    session.commit()
    for user in people.values():
        session.refresh(user)
    return people


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_jwt({'user_id': user.id})}"}


@pytest.fixture
def headers(users):
    """Authorization headers keyed like `users`."""
    return {key: bearer(user) for key, user in users.items()}


# ============================================================================
# Content
# ============================================================================

@pytest.fixture
def category(session):
    category = Category(name="Technology", description="Software and hardware")
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@pytest.fixture
def make_article(session, users, category):
    """Factory writing an article straight to the database."""
    def make(
        title="Untitled",
        content="Body text",
        summary=None,
        status=ArticleStatus.PUBLISHED,
        author=None,
        category_id=None,
        views=0,
        tags=(),
        created_at=None,
        likes=0,
        saves=0,
    ):
        article = Article(
            title=title,
            content=content,
            summary=summary,
            status=status,
            author_id=(author or users["editor"]).id,
            category_id=category_id or category.id,
            views=views,
            created_at=created_at or datetime.now(timezone.utc),
        )
        session.add(article)
        set_tags(session, article, tags)
        session.commit()
        session.refresh(article)

        likers = list(users.values())
        for user in likers[:likes]:
            session.add(Like(user_id=user.id, article_id=article.id))
        for user in likers[:saves]:
            session.add(SavedArticle(user_id=user.id, article_id=article.id))
        session.commit()
        session.refresh(article)
        return article

    return make


@pytest.fixture
def fresh(session):
    """Re-read a row from the database, bypassing the identity map."""
    def reload(model, key):
        session.expire_all()
        return session.get(model, key)

    return reload
