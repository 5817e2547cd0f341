"""Schema bootstrap for development and tests; production uses migrations."""
from typing import Optional

from sqlalchemy.engine import Engine

from innkeeper.core.logging import get_logger
from innkeeper.db.session import get_engine
from innkeeper.models import Base

logger = get_logger(__name__)


def init_db(engine: Optional[Engine] = None) -> None:
    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ensured", extra={"dialect": engine.dialect.name})
