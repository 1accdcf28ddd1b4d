"""Database configuration and base setup for the Work Suite API."""

from typing import Generator, Optional

from fastapi import Request
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.engine.url import URL, make_url
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def _ensure_sync_driver(url: URL) -> URL:
    """Force a synchronous driver for Alembic and the ORM engine."""

    if url.drivername.startswith("postgresql+"):
        # Normalize any async driver variants to psycopg (sync)
        if any(token in url.drivername for token in ("async", "aiopg")):
            url = url.set(drivername="postgresql+psycopg")
    elif url.drivername.startswith("sqlite+"):
        if "aiosqlite" in url.drivername:
            url = url.set(drivername="sqlite")

    return url


def get_database_url(raw_url: str) -> str:
    """Return a database URL with a guaranteed synchronous driver."""

    url = make_url(raw_url)
    # render_as_string keeps the password; str(url) would mask it
    return _ensure_sync_driver(url).render_as_string(hide_password=False)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """Storage engine handle with an explicit init/close lifecycle.

    Usage:
        database = Database("sqlite:///./data/worksuite.db")
        database.init()
        with database.session() as db:
            ...
        database.close()
    """

    def __init__(self, url: str):
        self.url = get_database_url(url)
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database.init() has not been called")
        return self._engine

    def init(self) -> None:
        """Create the engine and all tables."""
        if self._engine is not None:
            return

        if self.url.startswith("sqlite"):
            # In-memory databases must share one connection
            pool_args = {"poolclass": StaticPool} if ":memory:" in self.url else {}
            engine = create_engine(
                self.url,
                connect_args={"check_same_thread": False},
                **pool_args,
            )
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        else:
            engine = create_engine(
                self.url,
                pool_size=20,
                max_overflow=30,
                pool_pre_ping=True,
                pool_recycle=3600,
            )

        # Import all models to ensure they're registered with Base
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=engine)

        self._engine = engine
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )

    def session(self) -> Session:
        """Open a new session. Caller must close it."""
        if self._session_factory is None:
            raise RuntimeError("Database.init() has not been called")
        return self._session_factory()

    def close(self) -> None:
        """Dispose of the engine and its connections."""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency to get database session."""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
