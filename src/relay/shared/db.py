from sqlalchemy import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from relay.models.schema import *  # noqa: F403 # SQLModel subclasses need to be in memory
from relay.shared import Logger

logger = Logger(__name__).get_logger()


def create_db_engine(url: str) -> Engine:
    """Create the engine and make sure every table exists."""
    kw = {}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # Share the single in-memory database across threads
        kw = {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}

    engine = create_engine(url, **kw)
    SQLModel.metadata.create_all(engine)
    logger.debug("Database ready at %s", engine.url)
    return engine
