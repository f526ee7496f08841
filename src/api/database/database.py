from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from src.api.errors import ConfigurationError
from src.config import get_settings

Base = declarative_base()

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Create the engine on first use so a missing DATABASE_URL fails per call, not at import."""
    global _engine
    if _engine is None:
        database_url = get_settings().database_url
        if not database_url:
            raise ConfigurationError("Database is not configured (DATABASE_URL is missing)")
        _engine = create_engine(database_url, pool_pre_ping=True)
    return _engine


def SessionLocal() -> Session:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _session_factory()


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
