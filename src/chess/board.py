"""The Game board implements all rules that effect the `position` (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.moves import candidate_moves
from src.chess.pieces import FEN_TO_PIECE, Color, Piece, PieceType
from src.chess.position import BOARD_SIZE, Position
from src.core.exceptions import BoardError

STARTING_POSITION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
EMPTY_POSITION = "/".join(["8"] * BOARD_SIZE)

Grid = list[list[Optional[Piece]]]
MovePair = tuple[Position, Position]


@dataclass
class Board:
    grid: Grid
    captured: list[Piece] = field(default_factory=list)

    @classmethod
    def new(cls) -> Self:
        """Standard starting setup: black on rows 0-1, white on rows 6-7."""
        return cls.from_fen(STARTING_POSITION)

    @classmethod
    def empty(cls) -> Self:
        return cls.from_fen(EMPTY_POSITION)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0 of the grid), starting with the rook on a8
        * pawns cover the 7th rank (row 1) entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces.
        """
        grid: Grid = []
        for fen_one_rank in fen_str.split("/"):
            row: list[Optional[Piece]] = []
            for character in fen_one_rank:
                if character.isalpha():
                    # simple case: a letter directly denotes the piece that should be created
                    if character.lower() not in FEN_TO_PIECE:
                        raise BoardError(f"Unknown piece {character!r} in {fen_str!r}.")
                    row.append(Piece.from_fen(character))
                elif character.isdigit():
                    # A number denotes the amount of empty squares after each other
                    row.extend([None] * int(character))
                else:
                    raise BoardError(f"Unexpected character {character!r} in {fen_str!r}.")
            grid.append(row)

        if len(grid) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in grid):
            raise BoardError(f"Piece placement {fen_str!r} does not describe an 8x8 board.")
        return cls(grid)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in self.grid)

    def _row_to_fen(self, row: list[Optional[Piece]]) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for piece in row:
            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> Self:
        """Independent copy. Pieces are immutable, so copying the rows is enough."""
        return type(self)([list(row) for row in self.grid], list(self.captured))

    # --- PLACEMENT ---
    def get_piece(self, pos: Position) -> Optional[Piece]:
        """Squares off the board hold nothing."""
        if not pos.is_within_bounds():
            return None
        return self.grid[pos.y][pos.x]

    def place_piece(self, piece: Piece, pos: Position) -> None:
        self._assert_on_board(pos)
        self.grid[pos.y][pos.x] = piece

    def remove_piece(self, pos: Position) -> Optional[Piece]:
        self._assert_on_board(pos)
        piece = self.grid[pos.y][pos.x]
        self.grid[pos.y][pos.x] = None
        return piece

    def locate_color(self, color: Color) -> list[Position]:
        """Squares holding a piece of the given color, row by row."""
        return [
            Position(x, y)
            for y, row in enumerate(self.grid)
            for x, piece in enumerate(row)
            if piece is not None and piece.color == color
        ]

    def find_king(self, color: Color) -> Optional[Position]:
        king = Piece(PieceType.KING, color)
        return next(
            (square for square in self.locate_color(color) if self.get_piece(square) == king),
            None,
        )

    # --- MOVES ---
    def calculate_moves_for(self, pos: Position) -> list[Position]:
        """Pseudo-legal targets of the piece on the square (empty list for an empty square)."""
        return candidate_moves(pos, self)

    def generate_candidate_moves(self, color: Color) -> list[MovePair]:
        """All (from, to) pairs for the pieces of one color. Row-major over the board, then move-generation order."""
        return [
            (starting_square, target)
            for starting_square in self.locate_color(color)
            for target in self.calculate_moves_for(starting_square)
        ]

    def move_piece(self, from_pos: Position, to_pos: Position) -> Optional[Piece]:
        """
        Update the position on the board. Returns the captured piece, if any.

        NOTE: No legality check here. That is the responsibility of the GameState.
        """
        self._assert_on_board(from_pos)
        self._assert_on_board(to_pos)
        piece_that_moved = self.get_piece(from_pos)
        if piece_that_moved is None:
            raise BoardError(f"No piece to move on {from_pos.to_algebraic()}.")

        captured_piece = self.get_piece(to_pos)
        if captured_piece is not None:
            self.captured.append(captured_piece)
        self.grid[from_pos.y][from_pos.x] = None
        self.grid[to_pos.y][to_pos.x] = piece_that_moved
        return captured_piece

    # --- CHECK ---
    def is_king_in_check(self, color: Color) -> bool:
        """Can any opponent piece reach the king? (A board without that king is never in check.)"""
        king_square = self.find_king(color)
        if king_square is None:
            return False
        return any(
            target == king_square
            for _, target in self.generate_candidate_moves(color.opposite())
        )

    def _assert_on_board(self, pos: Position) -> None:
        if not pos.is_within_bounds():
            raise BoardError(f"Position ({pos.x}, {pos.y}) is not on the board.")
