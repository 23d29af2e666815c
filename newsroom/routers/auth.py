# newsroom/routers/auth.py
import logging

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from newsroom.db.session import get_session
from newsroom.db.models import User
from newsroom.schemas import LoginRequest, RegisterRequest
from newsroom.services.articles import user_public
from newsroom.utils.auth import create_jwt, get_current_user, hash_password, verify_password
from newsroom.utils.errors import RequestFailed

logger = logging.getLogger(__name__)

router = APIRouter()


# ------------------------------------------------------
# REGISTER
# ------------------------------------------------------
@router.post("/register", status_code=201)
def register(data: RegisterRequest, session: Session = Depends(get_session)):
    existing = session.exec(select(User).where(User.email == data.email)).first()
    if existing:
        raise RequestFailed("Email already registered")

    user = User(
        email=data.email,
        password=hash_password(data.password),
        name=data.name,
    )
    session.add(user)
    session.commit()
    session.refresh(user)

    logger.info("Registered user %s", user.id)
    token = create_jwt({"user_id": user.id})
    return {"user": user_public(user), "token": token}


# ------------------------------------------------------
# LOGIN
# ------------------------------------------------------
@router.post("/login")
def login(data: LoginRequest, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == data.email)).first()

    if not user or not verify_password(user.password, data.password):
        logger.info("Failed login for %s", data.email)
        raise RequestFailed("Invalid credentials")

    token = create_jwt({"user_id": user.id})
    return {"user": user_public(user), "token": token}


# ------------------------------------------------------
# WHO AM I
# ------------------------------------------------------
@router.get("/me")
def get_me(user: User = Depends(get_current_user)):
    return {"user": user_public(user)}
