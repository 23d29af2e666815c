# newsroom/db/models.py
import enum
from typing import Optional, List
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime, timezone


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    USER = "USER"


class ArticleStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PUBLISHED = "PUBLISHED"
    REJECTED = "REJECTED"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ------------------------------
# Link tables (many-to-many)
# ------------------------------
class ArticleTag(SQLModel, table=True):
    __tablename__ = "article_tag"

    article_id: int = Field(foreign_key="article.id", primary_key=True, ondelete="CASCADE")
    tag_id: int = Field(foreign_key="tag.id", primary_key=True, ondelete="CASCADE")


class CategoryFollow(SQLModel, table=True):
    __tablename__ = "category_follow"

    user_id: int = Field(foreign_key="user.id", primary_key=True, ondelete="CASCADE")
    category_id: int = Field(foreign_key="category.id", primary_key=True, ondelete="CASCADE")


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    password: str
    name: Optional[str] = None
    role: Role = Field(default=Role.USER)
    profile_picture: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    articles: List["Article"] = Relationship(back_populates="author")
    likes: List["Like"] = Relationship(back_populates="user", cascade_delete=True)
    saved_articles: List["SavedArticle"] = Relationship(back_populates="user", cascade_delete=True)
    followed_categories: List["Category"] = Relationship(
        back_populates="followers", link_model=CategoryFollow
    )


class Category(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)
    description: Optional[str] = None

    articles: List["Article"] = Relationship(back_populates="category")
    followers: List[User] = Relationship(
        back_populates="followed_categories", link_model=CategoryFollow
    )


class Tag(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)

    articles: List["Article"] = Relationship(back_populates="tags", link_model=ArticleTag)


class Article(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    content: str
    summary: Optional[str] = None
    image_url: Optional[str] = None

    # workflow
    status: ArticleStatus = Field(default=ArticleStatus.DRAFT, index=True)
    rejection_reason: Optional[str] = None

    # trending + search
    views: int = Field(default=0)

    category_id: int = Field(foreign_key="category.id", index=True)
    author_id: int = Field(foreign_key="user.id", index=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    author: Optional[User] = Relationship(back_populates="articles")
    category: Optional[Category] = Relationship(back_populates="articles")
    tags: List[Tag] = Relationship(back_populates="articles", link_model=ArticleTag)
    likes: List["Like"] = Relationship(back_populates="article")
    saved_by: List["SavedArticle"] = Relationship(back_populates="article")


class Like(SQLModel, table=True):
    __tablename__ = "article_like"

    user_id: int = Field(foreign_key="user.id", primary_key=True, ondelete="CASCADE")
    article_id: int = Field(foreign_key="article.id", primary_key=True, ondelete="CASCADE")
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    user: Optional[User] = Relationship(back_populates="likes")
    article: Optional[Article] = Relationship(back_populates="likes")


class SavedArticle(SQLModel, table=True):
    __tablename__ = "saved_article"

    user_id: int = Field(foreign_key="user.id", primary_key=True, ondelete="CASCADE")
    article_id: int = Field(foreign_key="article.id", primary_key=True, ondelete="CASCADE")
    saved_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    user: Optional[User] = Relationship(back_populates="saved_articles")
    article: Optional[Article] = Relationship(back_populates="saved_by")
