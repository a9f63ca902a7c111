"""
Composition root: wires settings, logging, persistence and the service together.

A UI layer (desktop shell, web framework, ...) calls `create_chess_service()` once and then talks to the
returned ChessService only.
"""

import logging
from typing import Optional

from src.core.config import Settings, configure_logging
from src.db.database import build_engine, build_session_factory
from src.db.sql_repository import SQLGameRepository
from src.services.chess_service import ChessService, NotifierFn

logger = logging.getLogger(__name__)


def create_chess_service(
    settings: Optional[Settings] = None, notifier: Optional[NotifierFn] = None
) -> ChessService:
    """Build a ChessService backed by the SQL repository described in the settings (env vars by default)."""
    settings = settings or Settings.from_env()
    configure_logging(settings)

    engine = build_engine(settings.database_url)
    session_factory = build_session_factory(engine)
    repository = SQLGameRepository(session_factory())

    logger.info("Chess service ready (database: %s)", engine.url.render_as_string())
    return ChessService(repository, settings=settings, notifier=notifier)
