"""
Type definitions used across layers
"""

from __future__ import annotations

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    def opposite(self) -> Color:
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    ROOK = "rook"
    KNIGHT = "knight"
    BISHOP = "bishop"
    QUEEN = "queen"
    KING = "king"


class GameMode(StrEnum):
    """Who plays the second side: another local human, the engine, or a remote player."""

    LOCAL = "local"
    AI = "ai"
    MULTIPLAYER = "multiplayer"


class Difficulty(StrEnum):
    """Selects the search strategy the engine uses for automated turns."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
