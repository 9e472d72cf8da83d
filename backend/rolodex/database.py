from typing import Any
from typing import Iterator

from sqlalchemy import Engine
from sqlalchemy import create_engine
from sqlalchemy import event
from sqlalchemy.orm import Session
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

from rolodex.config import get_settings

_settings = get_settings()

# Create Base class
Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record):  # noqa: D401 – event hook
    """Turn on FK enforcement so deleting an address book cascades to its cards."""

    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(db_url: str, **kwargs) -> Engine:
    """Create a SQLAlchemy engine with the given URL and options.

    Args:
        db_url: Database connection URL
        **kwargs: Additional arguments for create_engine

    Returns:
        A SQLAlchemy Engine instance
    """
    connect_args = kwargs.pop("connect_args", {})
    is_sqlite = "sqlite" in db_url
    if is_sqlite:
        if "check_same_thread" not in connect_args:
            connect_args["check_same_thread"] = False
        connect_args.setdefault("timeout", 30)

    engine = create_engine(db_url, connect_args=connect_args, **kwargs)

    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def make_sessionmaker(engine: Engine) -> sessionmaker:
    """Create a sessionmaker bound to the given engine.

    Args:
        engine: SQLAlchemy Engine instance

    Returns:
        A sessionmaker class
    """
    # ``expire_on_commit=False`` keeps attributes readable after a commit so
    # the collaborator implementations can copy rows into value objects once
    # the write has gone through.
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def _resolve_db_url() -> str:
    # ``_validate_required`` already guarantees DATABASE_URL outside tests;
    # the test-suite swaps the engine for its own in-memory one anyway.
    return _settings.database_url or "sqlite:///:memory:"


# Default engine and sessionmaker instances for app usage.  Tests overwrite
# the ``get_db`` dependency instead of patching these.
default_engine = make_engine(_resolve_db_url())
default_session_factory = make_sessionmaker(default_engine)


def get_session_factory() -> sessionmaker:
    """Return the session factory bound to the application's default engine."""

    return default_session_factory


def get_db(session_factory: Any = None) -> Iterator[Session]:
    """Dependency provider for database sessions.

    Args:
        session_factory: Optional custom session factory

    Yields:
        SQLAlchemy Session object
    """
    factory = session_factory or get_session_factory()
    db = factory()
    try:
        yield db
    finally:
        db.close()


def initialize_database(engine: Engine = None) -> None:
    """Initialize database tables using the given engine.

    If no engine is provided, uses the default engine.

    Args:
        engine: Optional engine to use, defaults to default_engine
    """
    # Import models so they are registered with Base
    from rolodex.models.models import AddressBook  # noqa: F401
    from rolodex.models.models import Card  # noqa: F401
    from rolodex.models.models import User  # noqa: F401

    target_engine = engine or default_engine
    Base.metadata.create_all(bind=target_engine)
