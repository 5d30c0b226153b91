from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from pharma_ledger.core.config import get_settings


def build_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        if make_url(url).database in (None, "", ":memory:"):
            # single shared connection so in-memory databases survive across sessions
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                future=True,
            )
        return create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": 30},
            future=True,
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        future=True,
    )


settings = get_settings()

DATABASE_URL = settings.database_url  # fail fast if missing

engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    future=True,
)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
