"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy.orm import Session

from src.chess.board import Board
from src.chess.pieces import Piece
from src.chess.position import Position
from src.db.database import build_engine, build_session_factory
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = build_engine(DATABASE_URL)

TestingSessionLocal = build_session_factory(engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_board() -> Callable[[dict[str, str]], Board]:
    """
    Call the inner function with a mapping of algebraic square -> FEN character.
    ex) make_board({"e1": "K", "e8": "k", "d4": "N"})
    """

    def _create_board(pieces: dict[str, str]) -> Board:
        board = Board.empty()
        for square_name, fen_char in pieces.items():
            board.place_piece(Piece.from_fen(fen_char), Position.from_algebraic(square_name))
        return board

    return _create_board
