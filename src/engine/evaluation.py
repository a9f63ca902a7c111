"""
Static evaluation of a position
-----

Material + piece-square tables, scored from one player's point of view (positive is good for that player).
This is a leaf evaluator only: there is no quiescence search behind it.

The tables are written from white's side of the board: row 0 is the far end (where white pawns are heading).
Black pieces read the same tables with the row mirrored.
"""

from src.chess.game import GameState
from src.chess.pieces import Color, PieceType
from src.chess.position import BOARD_SIZE, Position

MATERIAL_VALUES: dict[PieceType, int] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 300,
    PieceType.BISHOP: 300,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 10000,
}

CHECK_PENALTY = 50

BonusTable = tuple[tuple[int, ...], ...]

# Pawns: push towards the center and towards promotion
PAWN_BONUS: BonusTable = (
    (0, 0, 0, 0, 0, 0, 0, 0),
    (50, 50, 50, 50, 50, 50, 50, 50),
    (10, 10, 20, 30, 30, 20, 10, 10),
    (5, 5, 10, 25, 25, 10, 5, 5),
    (0, 0, 0, 20, 20, 0, 0, 0),
    (5, -5, -10, 0, 0, -10, -5, 5),
    (5, 10, 10, -20, -20, 10, 10, 5),
    (0, 0, 0, 0, 0, 0, 0, 0),
)

# Knights: a knight on the rim is dim
KNIGHT_BONUS: BonusTable = (
    (-50, -40, -30, -30, -30, -30, -40, -50),
    (-40, -20, 0, 0, 0, 0, -20, -40),
    (-30, 0, 10, 15, 15, 10, 0, -30),
    (-30, 5, 15, 20, 20, 15, 5, -30),
    (-30, 0, 15, 20, 20, 15, 0, -30),
    (-30, 5, 10, 15, 15, 10, 5, -30),
    (-40, -20, 0, 5, 5, 0, -20, -40),
    (-50, -40, -30, -30, -30, -30, -40, -50),
)

# Bishops: long diagonals, stay away from corners
BISHOP_BONUS: BonusTable = (
    (-20, -10, -10, -10, -10, -10, -10, -20),
    (-10, 0, 0, 0, 0, 0, 0, -10),
    (-10, 0, 10, 10, 10, 10, 0, -10),
    (-10, 5, 5, 10, 10, 5, 5, -10),
    (-10, 0, 5, 10, 10, 5, 0, -10),
    (-10, 10, 10, 10, 10, 10, 10, -10),
    (-10, 5, 0, 0, 0, 0, 5, -10),
    (-20, -10, -10, -10, -10, -10, -10, -20),
)

# Rooks, queens and kings get no positional bonus
POSITION_BONUS: dict[PieceType, BonusTable] = {
    PieceType.PAWN: PAWN_BONUS,
    PieceType.KNIGHT: KNIGHT_BONUS,
    PieceType.BISHOP: BISHOP_BONUS,
}


def material_value(piece_type: PieceType) -> int:
    return MATERIAL_VALUES[piece_type]


def position_bonus(piece_type: PieceType, color: Color, square: Position) -> int:
    table = POSITION_BONUS.get(piece_type)
    if table is None:
        return 0
    row = square.y if color == Color.WHITE else BOARD_SIZE - 1 - square.y
    return table[row][square.x]


def evaluate_position(state: GameState, perspective: Color) -> int:
    """Sum of (material + positional bonus) of the own pieces minus that of the opponent's pieces."""
    score = 0
    for y, row in enumerate(state.board.grid):
        for x, piece in enumerate(row):
            if piece is None:
                continue
            value = material_value(piece.piece_type) + position_bonus(
                piece.piece_type, piece.color, Position(x, y)
            )
            score += value if piece.color == perspective else -value

    # being in check is a liability for the player that has to get out of it
    if state.is_check and state.current_player == perspective:
        score -= CHECK_PENALTY
    return score
