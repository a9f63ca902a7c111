"""Requests and Response models"""

from typing import Optional, Self
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.chess.game import GameConfig
from src.chess.pieces import Piece
from src.chess.position import BOARD_SIZE, Position
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Difficulty, GameMode, PieceType


# --- SHARED MODELS ---
class SquareModel(BaseModel):
    """Grid coordinates: x is the column (a-file = 0), y the row (8th rank = 0)."""

    x: int
    y: int

    @field_validator(*["x", "y"])
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if not 0 <= value < BOARD_SIZE:
            raise InvalidRequestError(
                f"Coordinate {value} is not on the board (expected 0 - {BOARD_SIZE - 1})."
            )
        return value

    @classmethod
    def from_position(cls, position: Position) -> Self:
        return cls(x=position.x, y=position.y)

    def to_position(self) -> Position:
        return Position(self.x, self.y)


class PieceModel(BaseModel):
    piece_type: PieceType
    color: Color

    @classmethod
    def from_piece(cls, piece: Piece) -> Self:
        return cls(piece_type=piece.piece_type, color=piece.color)


class GameConfigModel(BaseModel):
    mode: GameMode = GameMode.LOCAL
    difficulty: Optional[Difficulty] = None
    player_color: Optional[Color] = None
    game_id: Optional[str] = None

    @field_validator("game_id")
    @classmethod
    def validate_game_id(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise InvalidRequestError("game_id cannot be blank.")
        return value

    @classmethod
    def from_config(cls, config: GameConfig) -> Self:
        return cls(
            mode=config.mode,
            difficulty=config.difficulty,
            player_color=config.player_color,
            game_id=config.game_id,
        )

    def to_config(self) -> GameConfig:
        return GameConfig(
            mode=self.mode,
            difficulty=self.difficulty,
            player_color=self.player_color,
            game_id=self.game_id,
        )


# --- REQUEST MODELS ---
class CreateSessionRequest(BaseModel):
    config: GameConfigModel = Field(default_factory=GameConfigModel)


class SessionRequest(BaseModel):
    """Commands that only need to know which game they are about (get state, undo, reset, end)."""

    session_id: UUID


class StartNewGameRequest(BaseModel):
    session_id: UUID
    config: GameConfigModel = Field(default_factory=GameConfigModel)


class SelectSquareRequest(BaseModel):
    session_id: UUID
    square: SquareModel


class MoveRequest(BaseModel):
    session_id: UUID
    from_square: SquareModel
    to_square: SquareModel


class MoveSelectedRequest(BaseModel):
    """Move the piece that was selected earlier."""

    session_id: UUID
    to_square: SquareModel


# --- RESPONSE MODELS ---
class GameStateResponse(BaseModel):
    session_id: UUID
    board: list[list[Optional[PieceModel]]]
    captured_pieces: list[PieceModel]
    current_player: Color
    selected_square: Optional[SquareModel]
    possible_moves: list[SquareModel]
    game_over: bool
    winner: Optional[Color]
    is_check: bool
    move_history: list[str]
    config: GameConfigModel


class SessionSummary(BaseModel):
    session_id: UUID
    mode: GameMode
    current_player: Color
    game_over: bool
    moves_played: int
