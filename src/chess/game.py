"""
The GameState is the entrypoint into the domain layer for the service layer (and for the engine).
It is responsible for orchestrating all the business logic required to play a turn of the board game.

A turn is a small state machine:
* idle: nothing selected
* selected: a piece of the player to move is pinned, together with the squares it can go to
Executing a move always brings the game back to idle (with the other player to move).
The game is over once a king gets captured.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.board import Board, MovePair
from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import Position
from src.core.exceptions import (
    BoardError,
    GameStateError,
    IllegalMoveError,
    NoSelectionError,
    NotYourTurnError,
)
from src.core.models import GameModel
from src.core.shared_types import Difficulty, GameMode


@dataclass(frozen=True)
class GameConfig:
    """How the game is played. Fixed for the lifetime of a game."""

    mode: GameMode = GameMode.LOCAL
    difficulty: Optional[Difficulty] = None
    player_color: Optional[Color] = None
    game_id: Optional[str] = None

    @property
    def engine_color(self) -> Optional[Color]:
        """Side played by the engine (only in AI mode). The human plays white unless stated otherwise."""
        if self.mode != GameMode.AI:
            return None
        human_color = self.player_color or Color.WHITE
        return human_color.opposite()

    def to_dict(self) -> dict[str, Optional[str]]:
        return {
            "mode": self.mode.value,
            "difficulty": self.difficulty.value if self.difficulty else None,
            "player_color": self.player_color.value if self.player_color else None,
            "game_id": self.game_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Optional[str]]) -> Self:
        mode = data.get("mode")
        difficulty = data.get("difficulty")
        player_color = data.get("player_color")
        return cls(
            mode=GameMode(mode) if mode else GameMode.LOCAL,
            difficulty=Difficulty(difficulty) if difficulty else None,
            player_color=Color(player_color) if player_color else None,
            game_id=data.get("game_id"),
        )


def move_notation(
    piece: Piece, from_pos: Position, to_pos: Position, is_capture: bool
) -> str:
    """
    Long algebraic notation of a move
    ---

    <piece letter><from square><'x' for a capture, '-' otherwise><to square>
    ex) "e2-e4", "Ng1-f3", "Qd1xd7". Pawns have no letter.
    """
    separator = "x" if is_capture else "-"
    return f"{piece.letter}{from_pos.to_algebraic()}{separator}{to_pos.to_algebraic()}"


@dataclass
class GameState:
    # --- DOMAIN LAYER API CALLED BY SERVICE AND ENGINE ---

    board: Board = field(default_factory=Board.new)
    current_player: Color = Color.WHITE
    selected_square: Optional[Position] = None
    possible_moves: list[Position] = field(default_factory=list)
    game_over: bool = False
    winner: Optional[Color] = None
    is_check: bool = False
    config: GameConfig = field(default_factory=GameConfig)
    move_history: list[str] = field(default_factory=list)

    @classmethod
    def new(cls, config: Optional[GameConfig] = None) -> Self:
        """Standard setup, white to move."""
        return cls(config=config or GameConfig())

    def clone(self) -> Self:
        """
        Independent copy of the state. Used for undo snapshots and for what-if moves during search.

        NOTE: Positions, pieces and the config are immutable, so only the containers need copying.
        """
        return type(self)(
            board=self.board.copy(),
            current_player=self.current_player,
            selected_square=self.selected_square,
            possible_moves=list(self.possible_moves),
            game_over=self.game_over,
            winner=self.winner,
            is_check=self.is_check,
            config=self.config,
            move_history=list(self.move_history),
        )

    def legal_moves(self) -> list[MovePair]:
        """Every (from, to) pair the player to move can play (pseudo-legal: own king may be left in check)."""
        return self.board.generate_candidate_moves(self.current_player)

    def select_square(self, pos: Position) -> list[Position]:
        """
        Pin a piece of the player to move and list where it can go.
        Anything else (empty square, opponent's piece, off the board) clears the selection.
        The board is never touched.
        """
        piece = self.board.get_piece(pos)
        if piece is None or piece.color != self.current_player:
            self._clear_selection()
            return []

        self.selected_square = pos
        self.possible_moves = self.board.calculate_moves_for(pos)
        return list(self.possible_moves)

    def move_piece(self, to_pos: Position) -> Optional[Piece]:
        """Move the selected piece. Requires a prior `select_square()`."""
        if self.selected_square is None:
            raise NoSelectionError("No square selected.")
        return self.move_piece_from(self.selected_square, to_pos)

    def move_piece_from(self, from_pos: Position, to_pos: Position) -> Optional[Piece]:
        """
        Attempt to make a move
        -----

        1. validate (nothing gets changed when any of the checks fail)
        2. update the board (captured piece goes to the board's capture list)
        3. update the move history
        4. game over if a king got taken
        5. is the opponent now in check?
        6. hand the turn over and clear the selection

        Returns the captured piece (if any).
        """
        if self.game_over:
            raise GameStateError("Game is over. No more moves can be made.")

        piece = self._assert_movable_piece(from_pos, to_pos)

        # Store move info before update
        is_capture = self.board.get_piece(to_pos) is not None
        notation = move_notation(piece, from_pos, to_pos, is_capture)

        # update the board
        captured_piece = self.board.move_piece(from_pos, to_pos)

        # update the list of moves in this game
        self.move_history.append(notation)

        # update the game status / check for end condition
        if captured_piece is not None and captured_piece.piece_type == PieceType.KING:
            self.game_over = True
            self.winner = self.current_player

        # NOTE compute the check BEFORE handing over the turn: it is about the player who moves next.
        opponent_color = self.current_player.opposite()
        self.is_check = self.board.is_king_in_check(opponent_color)
        self.current_player = opponent_color
        self._clear_selection()
        return captured_piece

    # -- TRANSPORT ---
    def to_model(self) -> GameModel:
        """Encode into a format the Service layer uses"""
        return GameModel(
            board_fen=self.board.to_fen(),
            captured="".join(piece.to_fen() for piece in self.board.captured),
            current_player=self.current_player.value,
            game_over=self.game_over,
            winner=self.winner.value if self.winner else None,
            is_check=self.is_check,
            selected_square=(
                self.selected_square.to_algebraic() if self.selected_square else None
            ),
            possible_moves=[square.to_algebraic() for square in self.possible_moves],
            move_history=list(self.move_history),
            config=self.config.to_dict(),
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a GameState from the information the Service layer actually has"""
        try:
            board = Board.from_fen(model.board_fen)
            board.captured = [Piece.from_fen(character) for character in model.captured]
            return cls(
                board=board,
                current_player=Color(model.current_player),
                selected_square=(
                    Position.from_algebraic(model.selected_square)
                    if model.selected_square
                    else None
                ),
                possible_moves=[
                    Position.from_algebraic(square) for square in model.possible_moves
                ],
                game_over=model.game_over,
                winner=Color(model.winner) if model.winner else None,
                is_check=model.is_check,
                config=GameConfig.from_dict(model.config),
                move_history=list(model.move_history),
            )
        except (BoardError, KeyError, ValueError) as error:
            raise GameStateError(f"Cannot restore game state: {error}") from error

    # -- PRIVATE HELPERS ---
    def _assert_movable_piece(self, from_pos: Position, to_pos: Position) -> Piece:
        """Check that the move could be played at all, and return the piece that is about to move."""
        if not (from_pos.is_within_bounds() and to_pos.is_within_bounds()):
            raise BoardError(
                f"Move ({from_pos.x}, {from_pos.y}) -> ({to_pos.x}, {to_pos.y}) leaves the board."
            )

        piece = self.board.get_piece(from_pos)
        if piece is None:
            raise BoardError(f"No piece to move on {from_pos.to_algebraic()}.")

        if piece.color != self.current_player:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.current_player.value} to make a move first."
            )

        if to_pos not in self.board.calculate_moves_for(from_pos):
            raise IllegalMoveError(
                f"Move not allowed: {from_pos.to_algebraic()} -> {to_pos.to_algebraic()}"
            )
        return piece

    def _clear_selection(self) -> None:
        self.selected_square = None
        self.possible_moves = []
