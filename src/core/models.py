"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the domain layer (lower) and the db layer (lower) will use the model defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
PieceColor = str
SquareName = str
ConfigField = str


@dataclass
class GameModel:
    """Transport-safe representation of a game state used between Service, DB, and Game layers."""

    board_fen: str
    captured: str  # FEN characters of the captured pieces, oldest capture first
    current_player: PieceColor
    game_over: bool = False
    winner: Optional[PieceColor] = None
    is_check: bool = False
    selected_square: Optional[SquareName] = None
    possible_moves: list[SquareName] = field(default_factory=list)
    move_history: list[str] = field(default_factory=list)
    config: dict[ConfigField, Optional[str]] = field(default_factory=dict)
