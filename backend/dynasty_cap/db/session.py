from typing import Optional

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from dynasty_cap.core.config import settings

Base = declarative_base()


def build_engine(database_url: Optional[str] = None) -> Engine:
    """Create an engine; SQLite connections get foreign keys switched on."""
    url = database_url or settings.database_url
    kwargs = {"echo": False, "future": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
    built = create_engine(url, **kwargs)

    if url.startswith("sqlite"):

        @event.listens_for(built, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return built


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def init_db(bind: Optional[Engine] = None) -> None:
    """Create missing tables (no migrations for the SQLite workflow)."""
    from dynasty_cap import models  # noqa: F401  # register tables on Base.metadata

    Base.metadata.create_all(bind=bind or engine)


def get_db():
    """Provide a SQLAlchemy session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
