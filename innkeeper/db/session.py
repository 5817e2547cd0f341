"""Database session management."""
from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from innkeeper.config.settings import get_settings


def configure_sqlite_savepoints(engine: Engine) -> None:
    """
    Let SQLAlchemy own BEGIN on pysqlite connections so SAVEPOINT
    (session.begin_nested) behaves like on other backends.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; pool and statement timeouts keep calls from blocking."""
    settings = get_settings()

    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": settings.DB_POOL_TIMEOUT},
        )
        configure_sqlite_savepoints(engine)
        return engine

    connect_args = {}
    if database_url.startswith("postgresql"):
        connect_args["options"] = f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"

    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_POOL_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        connect_args=connect_args,
    )


@lru_cache()
def get_engine() -> Engine:
    settings = get_settings()
    return build_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)


@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autocommit=False, autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function that yields a database session.

    Usage in FastAPI endpoints:
        @router.get("/items/")
        def read_items(db: Session = Depends(get_db)):
            ...
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
