"""
Request bodies for the Newsroom API.

Field names follow the JSON wire format (camelCase) through aliases; handlers
read the snake_case attributes.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from newsroom.db.models import ArticleStatus, Role


class RequestBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ------------------------------
# Auth / users
# ------------------------------
class RegisterRequest(RequestBody):
    email: str
    password: str
    name: Optional[str] = None


class LoginRequest(RequestBody):
    email: str
    password: str


class ProfileUpdateRequest(RequestBody):
    name: Optional[str] = None
    profile_picture: Optional[str] = Field(None, alias="profilePicture")


class RoleUpdateRequest(RequestBody):
    role: Role


class AdminUserUpdateRequest(RequestBody):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[Role] = None


# ------------------------------
# Articles
# ------------------------------
class ArticleCreateRequest(RequestBody):
    title: str
    content: str
    summary: Optional[str] = None
    category_id: int = Field(alias="categoryId")
    tags: List[str] = Field(default_factory=list)
    image_url: Optional[str] = Field(None, alias="imageUrl")


class ArticleUpdateRequest(RequestBody):
    title: Optional[str] = None
    content: Optional[str] = None
    summary: Optional[str] = None
    category_id: Optional[int] = Field(None, alias="categoryId")
    tags: Optional[List[str]] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")


class StatusUpdateRequest(RequestBody):
    status: ArticleStatus
    rejection_reason: Optional[str] = Field(None, alias="rejectionReason")


# ------------------------------
# Categories
# ------------------------------
class CategoryRequest(RequestBody):
    name: str
    description: Optional[str] = None


class CategoryUpdateRequest(RequestBody):
    name: Optional[str] = None
    description: Optional[str] = None
