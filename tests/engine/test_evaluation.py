"""Unit tests for /src/engine/evaluation.py"""

from typing import Callable

import pytest

from src.chess.board import Board
from src.chess.game import GameState
from src.chess.pieces import Color, PieceType
from src.chess.position import Position
from src.engine.evaluation import (
    CHECK_PENALTY,
    MATERIAL_VALUES,
    evaluate_position,
    material_value,
    position_bonus,
)

BoardFactory = Callable[[dict[str, str]], Board]


@pytest.mark.parametrize("color", list(Color))
def test_starting_position_is_balanced(color: Color) -> None:
    assert evaluate_position(GameState.new(), color) == 0


def test_king_outweighs_everything_else() -> None:
    others = sum(
        value for piece_type, value in MATERIAL_VALUES.items() if piece_type != PieceType.KING
    )
    assert material_value(PieceType.KING) > 8 * material_value(PieceType.PAWN) + 2 * others


@pytest.mark.parametrize("piece_type", [PieceType.ROOK, PieceType.QUEEN, PieceType.KING])
def test_no_positional_bonus(piece_type: PieceType) -> None:
    for x in range(8):
        for y in range(8):
            assert position_bonus(piece_type, Color.WHITE, Position(x, y)) == 0


def test_bonus_tables_are_mirrored_for_black() -> None:
    """e4 for white is worth the same as e5 for black"""
    assert position_bonus(PieceType.PAWN, Color.WHITE, Position.from_algebraic("e4")) == 20
    assert position_bonus(PieceType.PAWN, Color.BLACK, Position.from_algebraic("e5")) == 20
    assert position_bonus(PieceType.PAWN, Color.WHITE, Position.from_algebraic("e7")) == 50
    assert position_bonus(PieceType.PAWN, Color.BLACK, Position.from_algebraic("e2")) == 50


def test_knight_on_the_rim_is_dim() -> None:
    rim = position_bonus(PieceType.KNIGHT, Color.WHITE, Position.from_algebraic("a4"))
    center = position_bonus(PieceType.KNIGHT, Color.WHITE, Position.from_algebraic("d4"))
    assert rim < 0 < center


def test_material_advantage(make_board: BoardFactory) -> None:
    board = make_board({"e1": "K", "e8": "k", "d1": "Q"})
    state = GameState(board=board)
    assert evaluate_position(state, Color.WHITE) == MATERIAL_VALUES[PieceType.QUEEN]
    assert evaluate_position(state, Color.BLACK) == -MATERIAL_VALUES[PieceType.QUEEN]


def test_positional_advantage(make_board: BoardFactory) -> None:
    """Same material, the centralized knight scores better"""
    centered = GameState(board=make_board({"d4": "N", "a5": "n"}))
    assert evaluate_position(centered, Color.WHITE) == 20 - (-30)


def test_check_is_penalized_for_the_player_in_check() -> None:
    state = GameState(board=Board.new(), is_check=True, current_player=Color.WHITE)
    assert evaluate_position(state, Color.WHITE) == -CHECK_PENALTY
    assert evaluate_position(state, Color.BLACK) == 0


def test_evaluation_reads_only() -> None:
    state = GameState.new()
    before = state.to_model()
    evaluate_position(state, Color.WHITE)
    assert state.to_model() == before
