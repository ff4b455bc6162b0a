"""Generate database sessions"""

from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.core.config import get_settings
from src.db.schema import Base


def build_session_factory(database_url: Optional[str] = None) -> sessionmaker[Session]:
    """Create the engine, make sure all tables exist and hand back a session factory."""
    url = database_url or get_settings().database_url
    engine = create_engine(url)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """One session per request / unit of work."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
