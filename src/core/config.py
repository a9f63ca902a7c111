"""
Application settings.

Defaults match the behaviour of the desktop app the engine was built for, every field can be
overridden through an environment variable named CHESS_<FIELD NAME IN CAPITALS>.
"""

import logging
import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional, Self

ENV_PREFIX = "CHESS_"


@dataclass(frozen=True)
class Settings:
    """Configuration of the service layer and its collaborators."""

    # Persistence
    database_url: str = "sqlite:///chess.db"
    """SQLAlchemy URL of the database that stores the current state of every session"""

    # Automated opponent
    ai_move_delay: float = 0.5
    """Seconds to wait before the engine starts thinking, so the UI can render the human move first"""

    search_depth: int = 3
    """Number of plies the HARD difficulty searches"""

    # Sessions
    history_limit: int = 50
    """Maximum number of undo snapshots kept per session (oldest dropped first)"""

    lock_timeout: float = 5.0
    """Seconds a command waits for a session lock before giving up"""

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Self:
        """Build settings from (CHESS_ prefixed) environment variables. Missing variables keep their default."""
        environ = os.environ if environ is None else environ
        overrides = {}
        for setting in fields(cls):
            raw_value = environ.get(f"{ENV_PREFIX}{setting.name.upper()}")
            if raw_value is None:
                continue
            # field types are plain builtins, so the default tells us how to cast
            cast = type(setting.default)
            overrides[setting.name] = cast(raw_value)
        return cls(**overrides)


def configure_logging(settings: Settings) -> None:
    """Single place where the root logger gets configured (call once from the composition root)."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
