# newsroom/main.py
import os
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

from newsroom.db.session import engine
from newsroom.db import models  # noqa: F401  (registers tables on SQLModel.metadata)
from newsroom.routers import admin, article_status, articles, auth, categories, editor, feed, search, users
from newsroom.utils.errors import http_error_handler, store_error_handler, validation_error_handler

load_dotenv()

# ===============================
# CONFIG
# ===============================
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
FRONTEND_URL = os.getenv("FRONTEND_URL", "*")

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ===============================
# FASTAPI INIT
# ===============================
app = FastAPI(title="Newsroom API")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in FRONTEND_URL.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Every error renders as {"error": <message>}
app.add_exception_handler(StarletteHTTPException, http_error_handler)
app.add_exception_handler(RequestValidationError, validation_error_handler)
app.add_exception_handler(SQLAlchemyError, store_error_handler)

# Routers (status/feed before articles so their paths are matched first)
app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(article_status.router, prefix="/articles/status", tags=["Article Status"])
app.include_router(feed.router, prefix="/articles/feed", tags=["Feed"])
app.include_router(articles.router, prefix="/articles", tags=["Articles"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
app.include_router(categories.router, prefix="/categories", tags=["Categories"])
app.include_router(editor.router, prefix="/editor", tags=["Editor"])
app.include_router(search.router, prefix="/search", tags=["Search"])


# Create DB tables at startup
@app.on_event("startup")
def on_startup():
    SQLModel.metadata.create_all(engine)
    logger.info("Newsroom API started")


@app.on_event("shutdown")
def on_shutdown():
    engine.dispose()


@app.get("/health")
def health():
    return {"status": "ok"}
