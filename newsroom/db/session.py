# newsroom/db/session.py
import os
from dotenv import load_dotenv
from sqlalchemy import event
from sqlmodel import create_engine, Session

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL not set in environment (.env)")

SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")


def build_engine(url: str, **kwargs):
    """
    Create an engine for `url`.
    SQLite needs check_same_thread off (FastAPI runs sync handlers in a
    threadpool) and foreign keys switched on per connection.
    """
    connect_args = {}
    if url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}

    engine = create_engine(url, echo=SQL_ECHO, connect_args=connect_args, **kwargs)

    if url.startswith("sqlite"):
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine(DATABASE_URL)


def get_session():
    with Session(engine) as session:
        yield session
