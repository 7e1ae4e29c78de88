"""Database connection and session management."""

from typing import Generator, Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from drillscore.config import get_settings
from drillscore.models import Base


settings = get_settings()

engine = create_engine(
    settings.database_url_sync,
    echo=settings.debug,
    pool_pre_ping=True
)

SessionLocal = sessionmaker(
    engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False
)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create all tables."""
    Base.metadata.create_all(bind=bind or engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session, committing on success."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
