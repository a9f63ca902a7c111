"""Implementation of (Game)Repository using SQLAlchemy"""

from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel
from src.db.schema import DBGame


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id)
        self._copy_into(game_db, game)
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        self._copy_into(game_db, game)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def list_game_ids(self) -> list[UUID]:
        """IDs of all recorded games, oldest first."""
        query = select(DBGame.id).order_by(DBGame.created_at)
        return list(self.db.scalars(query))

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _copy_into(self, game_db: DBGame, game: GameModel) -> None:
        """Write the data transfer model onto the SQLAlchemy model. (New lists/dicts, so JSON columns register the change.)"""
        game_db.board_fen = game.board_fen
        game_db.captured = game.captured
        game_db.current_player = game.current_player
        game_db.game_over = game.game_over
        game_db.winner = game.winner
        game_db.is_check = game.is_check
        game_db.selected_square = game.selected_square
        game_db.possible_moves = list(game.possible_moves)
        game_db.move_history = list(game.move_history)
        game_db.config = dict(game.config)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            board_fen=game_db.board_fen,
            captured=game_db.captured,
            current_player=game_db.current_player,
            game_over=game_db.game_over,
            winner=game_db.winner,
            is_check=game_db.is_check,
            selected_square=game_db.selected_square,
            possible_moves=list(game_db.possible_moves),
            move_history=list(game_db.move_history),
            config=dict(game_db.config),
        )
