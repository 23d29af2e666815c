# newsroom/utils/auth.py
import os
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict

from fastapi import Depends, Request
from jose import jwt, JWTError
from dotenv import load_dotenv
from sqlmodel import Session
from werkzeug.security import generate_password_hash, check_password_hash

from newsroom.db.models import Role, User
from newsroom.db.session import get_session
from newsroom.utils.errors import AuthorizationDenied, NotAuthenticated

load_dotenv()

# Secret key & algorithm
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-please-change")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7))  # 7 days
TOKEN_COOKIE = "newsroom_token"


# ----------------------------------------------------
# PASSWORDS
# ----------------------------------------------------
def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


# ----------------------------------------------------
# CREATE JWT
# ----------------------------------------------------
def create_jwt(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create and return a signed JWT token.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


# ----------------------------------------------------
# VERIFY TOKEN
# ----------------------------------------------------
def verify_token(token: str) -> Optional[dict]:
    """
    Verify and decode a JWT token.
    Return decoded payload or None if invalid.
    """
    if not token:
        return None

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


# ----------------------------------------------------
# GET CURRENT USER ID FROM HEADER OR COOKIE
# ----------------------------------------------------
def get_current_user_id(request: Request) -> Optional[int]:
    """
    Get user_id from Authorization: Bearer <token>
    If not in headers, fallback to the 'newsroom_token' cookie.
    """
    token = None

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.lower().startswith("bearer "):
        token = auth_header.split(" ", 1)[1].strip()

    if not token:
        token = request.cookies.get(TOKEN_COOKIE)

    if not token:
        return None

    payload = verify_token(token)
    if not payload:
        return None

    return payload.get("user_id")


# ----------------------------------------------------
# DEPENDENCIES
# ----------------------------------------------------
def get_current_user(request: Request, session: Session = Depends(get_session)) -> User:
    user_id = get_current_user_id(request)
    if not user_id:
        raise NotAuthenticated()

    user = session.get(User, user_id)
    if not user:
        raise NotAuthenticated()

    return user


def require_roles(*roles: Role):
    """Dependency factory: the current user, if their role is one of `roles`."""
    allowed = set(roles)

    def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise AuthorizationDenied("Access denied")
        return user

    return checker
