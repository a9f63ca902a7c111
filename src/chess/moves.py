"""
Geometry/Base movement and capturing rules

Key idea: one table, keyed by piece type, tells how a piece moves.
* stepping pieces (knight, king) jump by a fixed set of deltas
* sliding pieces (rook, bishop, queen) raycast along a fixed set of directions
* the pawn is the odd one out and gets its own rule

The rules produce pseudo-legal targets: they do not care whether the mover's own king is left in check.
"""

from functools import partial
from typing import Callable, Optional, Protocol

from src.chess.pieces import Color, Piece, PieceType
from src.chess.position import Position


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def get_piece(self, pos: Position) -> Optional[Piece]: ...


Vector = tuple[int, int]

# NOTE: the order of the vectors is the order in which targets get generated (search breaks ties on it).
KNIGHT_DELTAS: tuple[Vector, ...] = (
    (1, 2),
    (2, 1),
    (2, -1),
    (1, -2),
    (-1, -2),
    (-2, -1),
    (-2, 1),
    (-1, 2),
)
KING_DELTAS: tuple[Vector, ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)
STRAIGHTS: tuple[Vector, ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))
DIAGONALS: tuple[Vector, ...] = ((1, 1), (1, -1), (-1, 1), (-1, -1))

# White marches towards row 0, black towards row 7
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_STARTING_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}


# --- MOVEMENT RULES ---
def raycasting_moves(
    square: Position, board: Board, directions: tuple[Vector, ...]
) -> list[Position]:
    """
    Raycasting algorithm
    -----

    We move along each direction until we hit another piece or the edge of the board.
    The first occupied square is only a target if it holds an opponent's piece (then it can be captured).
    """
    player_color = _color_on(square, board)
    moves: list[Position] = []
    for dx, dy in directions:
        target = square.apply_delta(dx, dy)
        while target is not None:
            piece_found = board.get_piece(target)
            if piece_found is not None:
                if piece_found.color != player_color:
                    moves.append(target)
                break
            moves.append(target)
            target = target.apply_delta(dx, dy)
    return moves


def single_step_moves(
    square: Position, board: Board, deltas: tuple[Vector, ...]
) -> list[Position]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that make a single jump along a delta"""
    player_color = _color_on(square, board)
    moves: list[Position] = []
    for dx, dy in deltas:
        target = square.apply_delta(dx, dy)
        if target is None:
            continue
        piece_found = board.get_piece(target)
        if piece_found is None or piece_found.color != player_color:
            moves.append(target)
    return moves


def candidate_pawn_moves(square: Position, board: Board) -> list[Position]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square only.
    - can move by two from its starting row, if both squares are empty.
    - takes diagonally (and only when there is something to take).

    NOTE: no en passant, no promotion.
    """
    player_color = _color_on(square, board)
    direction = PAWN_DIRECTION[player_color]
    moves: list[Position] = []

    one_step = square.apply_delta(0, direction)
    if one_step is not None and board.get_piece(one_step) is None:
        moves.append(one_step)

        two_steps = one_step.apply_delta(0, direction)
        on_starting_row = square.y == PAWN_STARTING_ROW[player_color]
        if (
            on_starting_row
            and two_steps is not None
            and board.get_piece(two_steps) is None
        ):
            moves.append(two_steps)

    for dx in (-1, 1):
        target = square.apply_delta(dx, direction)
        if target is None:
            continue
        piece_found = board.get_piece(target)
        if piece_found is not None and piece_found.color != player_color:
            moves.append(target)
    return moves


def _color_on(square: Position, board: Board) -> Color:
    piece = board.get_piece(square)
    # for the type checker: rules are only looked up for occupied squares
    assert piece is not None
    return piece.color


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Position, Board], list[Position]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: partial(single_step_moves, deltas=KNIGHT_DELTAS),
    PieceType.KING: partial(single_step_moves, deltas=KING_DELTAS),
    PieceType.ROOK: partial(raycasting_moves, directions=STRAIGHTS),
    PieceType.BISHOP: partial(raycasting_moves, directions=DIAGONALS),
    PieceType.QUEEN: partial(raycasting_moves, directions=STRAIGHTS + DIAGONALS),
}


def candidate_moves(square: Position, board: Board) -> list[Position]:
    """Targets of whatever piece stands on the square (nothing for an empty square)."""
    piece = board.get_piece(square)
    if piece is None:
        return []
    movement_rule = MOVEMENT_RULES[piece.piece_type]
    return movement_rule(square, board)
