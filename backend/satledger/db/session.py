import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from satledger.core.config import settings

logger = logging.getLogger(__name__)


def create_db_engine(url: str, **kwargs) -> Engine:
    """Create an engine; SQLite connections get foreign key enforcement."""
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, **kwargs)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def init_db(bind: Engine) -> None:
    """Create any missing tables."""
    from satledger.db.base import Base

    Base.metadata.create_all(bind=bind)
    logger.info(f"Database schema ready on {bind.url.render_as_string(hide_password=True)}")


engine = create_db_engine(settings.SQLALCHEMY_DATABASE_URI)
SessionLocal = sessionmaker(autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
