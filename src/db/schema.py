"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    """Latest state of one game session. (Undo history is not persisted.)"""

    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    board_fen: Mapped[str]
    captured: Mapped[str] = mapped_column(default="")
    current_player: Mapped[str]
    game_over: Mapped[bool] = mapped_column(default=False)
    winner: Mapped[Optional[str]]
    is_check: Mapped[bool] = mapped_column(default=False)
    selected_square: Mapped[Optional[str]]
    possible_moves: Mapped[list[str]] = mapped_column(JSON, default=list)
    move_history: Mapped[list[str]] = mapped_column(JSON, default=list)
    config: Mapped[dict[str, Optional[str]]] = mapped_column(JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
