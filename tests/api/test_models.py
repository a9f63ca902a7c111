from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from src.api.models import (
    CreateSessionRequest,
    GameConfigModel,
    MoveRequest,
    PieceModel,
    SelectSquareRequest,
    SquareModel,
    StartNewGameRequest,
)
from src.chess.game import GameConfig
from src.chess.pieces import Piece
from src.chess.position import Position
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Difficulty, GameMode, PieceType


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - SquareModel --
@pytest.mark.parametrize("x, y", [(0, 0), (7, 7), (4, 6)])
def test_valid_square(x: int, y: int) -> None:
    square = SquareModel(x=x, y=y)
    assert square.to_position() == Position(x, y)


@pytest.mark.parametrize("x, y", [(-1, 0), (0, 8), (8, 3), (3, -5)])
def test_square_off_the_board(x: int, y: int) -> None:
    """Custom error is raised as is (not wrapped into a pydantic ValidationError)."""
    with pytest.raises(InvalidRequestError):
        SquareModel(x=x, y=y)


def test_square_needs_integers() -> None:
    with pytest.raises(ValidationError):
        SquareModel(x="e", y=2)  # type: ignore[arg-type]


def test_square_from_position() -> None:
    assert SquareModel.from_position(Position(4, 6)) == SquareModel(x=4, y=6)


# -- Validation - MoveRequest / SelectSquareRequest --
def test_valid_move_request(mock_id: UUID) -> None:
    request = MoveRequest(
        session_id=mock_id,
        from_square=SquareModel(x=4, y=6),
        to_square={"x": 4, "y": 4},  # type: ignore[arg-type]
    )
    assert request.from_square.to_position() == Position(4, 6)
    assert request.to_square.to_position() == Position(4, 4)


def test_move_request_off_the_board(mock_id: UUID) -> None:
    with pytest.raises(InvalidRequestError):
        MoveRequest(
            session_id=mock_id,
            from_square={"x": 4, "y": 6},  # type: ignore[arg-type]
            to_square={"x": 4, "y": 9},  # type: ignore[arg-type]
        )


def test_session_id_must_be_uuid() -> None:
    with pytest.raises(ValidationError):
        SelectSquareRequest(session_id="not-a-uuid", square=SquareModel(x=0, y=0))  # type: ignore[arg-type]


# -- Validation - GameConfigModel --
def test_default_config() -> None:
    request = CreateSessionRequest()
    assert request.config.mode == GameMode.LOCAL
    assert request.config.to_config() == GameConfig()


def test_config_from_plain_values(mock_id: UUID) -> None:
    request = StartNewGameRequest(
        session_id=mock_id,
        config={"mode": "ai", "difficulty": "hard", "player_color": "black"},  # type: ignore[arg-type]
    )
    assert request.config.to_config() == GameConfig(
        mode=GameMode.AI, difficulty=Difficulty.HARD, player_color=Color.BLACK
    )


def test_unknown_difficulty() -> None:
    with pytest.raises(ValidationError):
        GameConfigModel(mode=GameMode.AI, difficulty="grandmaster")  # type: ignore[arg-type]


@pytest.mark.parametrize("game_id", ["", "   "])
def test_blank_game_id(game_id: str) -> None:
    with pytest.raises(InvalidRequestError):
        GameConfigModel(mode=GameMode.MULTIPLAYER, game_id=game_id)


def test_config_round_trip() -> None:
    config = GameConfig(mode=GameMode.MULTIPLAYER, game_id="room-5")
    assert GameConfigModel.from_config(config).to_config() == config


# -- Conversion - PieceModel --
def test_piece_model_from_piece() -> None:
    model = PieceModel.from_piece(Piece(PieceType.KNIGHT, Color.BLACK))
    assert model.piece_type == PieceType.KNIGHT
    assert model.color == Color.BLACK
    assert model.model_dump(mode="json") == {"piece_type": "knight", "color": "black"}
