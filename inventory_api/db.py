# inventory_api/db.py

"""
Database configuration and session management for the Inventory API.
"""
import os

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Read DB settings from environment variables, with defaults for local/dev
DB_USER = os.getenv("DB_USER", "postgres")
DB_PASS = os.getenv("DB_PASS", "")
DB_NAME = os.getenv("DB_NAME", "postgres")
DB_HOST = os.getenv("DB_HOST", "127.0.0.1")
DB_PORT = int(os.getenv("DB_PORT", "5432"))

# "require" encrypts the transport but does not verify the server certificate.
DB_SSLMODE = os.getenv("DB_SSLMODE", "require")

DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))

DATABASE_URL = URL.create(
    "postgresql+psycopg2",
    username=DB_USER,
    password=DB_PASS or None,
    host=DB_HOST,
    port=DB_PORT,
    database=DB_NAME,
)

# Base class for ORM models
Base = declarative_base()


def build_engine(url=DATABASE_URL, sslmode: str = DB_SSLMODE) -> Engine:
    """
    Creates the engine backing the connection pool.
    No connection is opened until the first query.
    """
    # pool_pre_ping=True helps maintain healthy connections in a pool
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=DB_POOL_SIZE,
        max_overflow=DB_MAX_OVERFLOW,
        connect_args={"sslmode": sslmode},
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    # autocommit=False ensures transactions must be committed explicitly.
    # autoflush=False means changes aren't flushed to DB until commit or explicit flush.
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """
    Dependency to provide a new database session for FastAPI endpoints.
    The session factory lives on the application state, so every app built
    by create_app talks to its own engine.
    The session is closed after use, returning its connection to the pool.
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
