"""Generate database sessions"""

from sqlalchemy import Engine, StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.schema import Base


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Engine for the given URL, with all tables created.

    SQLite connections get shared with the engine worker thread, so the same-thread check is switched off
    (the service serialises repository access itself). An in-memory database lives in one shared connection.
    """
    engine_kwargs: dict = {"echo": echo}
    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url:
            engine_kwargs["poolclass"] = StaticPool

    engine = create_engine(database_url, **engine_kwargs)
    # Ensure all tables are created
    Base.metadata.create_all(bind=engine)
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False)

