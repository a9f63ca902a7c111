"""
Orchestration of communication from the UI/API layer to business logic and persistence layers (and the reverse direction).

Every command is one state transition of one game session and returns the full, serialised game state.
Errors are raised as GameError subclasses. Their message is meant to be shown to the user as is.
"""

import logging
import random
from datetime import datetime
from threading import Lock, Timer
from typing import Callable, Optional
from uuid import UUID

from src.api.models import (
    CreateSessionRequest,
    GameConfigModel,
    GameStateResponse,
    MoveRequest,
    MoveSelectedRequest,
    PieceModel,
    SelectSquareRequest,
    SessionRequest,
    SessionSummary,
    SquareModel,
    StartNewGameRequest,
)
from src.chess.game import GameState
from src.chess.position import Position
from src.core.config import Settings
from src.core.exceptions import (
    GameError,
    NoSelectionError,
    NotYourTurnError,
    RepositoryError,
)
from src.core.shared_types import Difficulty, GameMode
from src.db.repository import GameRepository
from src.engine.search import make_ai_move
from src.services.session import GameSession

logger = logging.getLogger(__name__)

AI_MOVE_EVENT = "ai-move"
DEFAULT_DIFFICULTY = Difficulty.MEDIUM

# (session id, event name, updated state) -> pushes the update to whoever displays the game
NotifierFn = Callable[[UUID, str, GameStateResponse], None]


class ChessService:
    """Orchestration of layers for chess games."""

    def __init__(
        self,
        repository: GameRepository,
        settings: Optional[Settings] = None,
        notifier: Optional[NotifierFn] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repo = repository
        self.settings = settings or Settings()
        self.notifier = notifier
        self.rng = rng
        self._sessions: dict[UUID, GameSession] = {}
        self._registry_lock = Lock()
        # repositories (SQL sessions in particular) are not thread safe, and the engine worker writes too
        self._repo_lock = Lock()

    # -- Session management ---
    def create_session(self, request: CreateSessionRequest) -> GameStateResponse:
        """Start tracking a new game."""
        state = GameState.new(request.config.to_config())
        with self._repo_lock:
            _, session_id = self.repo.create_game(state.to_model())
        session = self._register(session_id, state)
        logger.info("Created session %s (%s)", session_id, state.config.mode.value)

        with session.locked_state():
            response = self._create_response(session)
            self._schedule_engine_turn_if_due(session)
        return response

    def list_sessions(self) -> list[SessionSummary]:
        """Short overview of all recorded games."""
        with self._repo_lock:
            records = [
                (game_id, self.repo.get_game(game_id))
                for game_id in self.repo.list_game_ids()
            ]
        summaries: list[SessionSummary] = []
        for game_id, model in records:
            if model is None:
                continue
            state = GameState.from_model(model)
            summaries.append(
                SessionSummary(
                    session_id=game_id,
                    mode=state.config.mode,
                    current_player=state.current_player,
                    game_over=state.game_over,
                    moves_played=len(state.move_history),
                )
            )
        return summaries

    def end_session(self, request: SessionRequest) -> None:
        """Stop tracking a game and remove its record. A scheduled engine turn for it will do nothing."""
        session = self._fetch_session(request.session_id)
        with session.locked_state():
            session.generation += 1
        with self._registry_lock:
            self._sessions.pop(request.session_id, None)
        with self._repo_lock:
            self.repo.delete_game(request.session_id)
        logger.info("Ended session %s", request.session_id)

    # -- Commands ---
    def get_game_state(self, request: SessionRequest) -> GameStateResponse:
        session = self._fetch_session(request.session_id)
        with session.locked_state():
            return self._create_response(session)

    def select_square(self, request: SelectSquareRequest) -> GameStateResponse:
        """
        Select a square.
        ----

        In a multiplayer game the board is driven by clicks only: clicking one of the highlighted
        targets of the selected piece plays the move. In the other modes selecting never moves anything.
        """
        session = self._fetch_session(request.session_id)
        pos = request.square.to_position()
        with session.locked_state() as state:
            plays_move = (
                state.config.mode == GameMode.MULTIPLAYER
                and state.selected_square is not None
                and pos in state.possible_moves
            )
            if plays_move:
                # for the type checker: plays_move already made sure there is a selection
                assert state.selected_square is not None
                self._play_human_move(session, state.selected_square, pos)
            else:
                state.select_square(pos)
            return self._commit(session)

    def move_piece(self, request: MoveRequest) -> GameStateResponse:
        """Move by source + destination."""
        session = self._fetch_session(request.session_id)
        with session.locked_state():
            self._play_human_move(
                session,
                request.from_square.to_position(),
                request.to_square.to_position(),
            )
            response = self._commit(session)
            self._schedule_engine_turn_if_due(session)
        return response

    def move_selected(self, request: MoveSelectedRequest) -> GameStateResponse:
        """Move the piece selected by an earlier `select_square()`."""
        session = self._fetch_session(request.session_id)
        with session.locked_state() as state:
            if state.selected_square is None:
                raise NoSelectionError("No square selected.")
            self._play_human_move(
                session, state.selected_square, request.to_square.to_position()
            )
            response = self._commit(session)
            self._schedule_engine_turn_if_due(session)
        return response

    def undo_move(self, request: SessionRequest) -> GameStateResponse:
        """
        Restore the state from before the last human move.

        NOTE: engine moves don't get their own snapshot. In an AI game, undo therefore takes back the
        engine's reply together with the move that provoked it.
        """
        session = self._fetch_session(request.session_id)
        with session.locked_state():
            previous_state = session.pop_snapshot()
            session.replace_state(previous_state, keep_history=True)
            logger.info("Undo in session %s", session.id)
            response = self._commit(session)
            self._schedule_engine_turn_if_due(session)
        return response

    def reset_game(self, request: SessionRequest) -> GameStateResponse:
        """Back to the starting position (same configuration), history cleared."""
        session = self._fetch_session(request.session_id)
        with session.locked_state() as state:
            session.replace_state(GameState.new(state.config))
            response = self._commit(session)
            self._schedule_engine_turn_if_due(session)
        return response

    def start_new_game(self, request: StartNewGameRequest) -> GameStateResponse:
        """Replace the game of a session by a fresh one with a new configuration."""
        session = self._fetch_session(request.session_id)
        with session.locked_state():
            session.replace_state(GameState.new(request.config.to_config()))
            logger.info(
                "New %s game in session %s", request.config.mode.value, session.id
            )
            response = self._commit(session)
            self._schedule_engine_turn_if_due(session)
        return response

    @staticmethod
    def current_time() -> str:
        """Wall-clock time for display purposes."""
        return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    def wait_for_engine(self, session_id: UUID, timeout: Optional[float] = None) -> None:
        """Block until a scheduled engine turn of the session has finished."""
        self._fetch_session(session_id).wait_for_engine(timeout)

    # -- Engine turns ---
    def _is_engine_turn(self, state: GameState) -> bool:
        engine_color = state.config.engine_color
        return (
            engine_color is not None
            and not state.game_over
            and state.current_player == engine_color
        )

    def _schedule_engine_turn_if_due(self, session: GameSession) -> None:
        """
        Hand the engine's turn to a worker thread (caller holds the state lock).
        The worker waits a moment, so the UI can show the human move first, and then queues up for the lock.
        """
        if not self._is_engine_turn(session.state):
            return
        worker = Timer(
            self.settings.ai_move_delay,
            self._run_engine_turn,
            args=(session, session.generation),
        )
        worker.daemon = True
        session.ai_worker = worker
        worker.start()

    def _run_engine_turn(self, session: GameSession, generation: int) -> None:
        try:
            with session.locked_state() as state:
                if session.generation != generation or not self._is_engine_turn(state):
                    logger.debug("Skipping stale engine turn in session %s", session.id)
                    return
                difficulty = state.config.difficulty or DEFAULT_DIFFICULTY
                make_ai_move(state, difficulty, self.rng, self.settings.search_depth)
                session.touch()
                response = self._commit(session)
        except GameError as error:
            # nobody is waiting on this thread: the best we can do is to report it
            logger.warning("AI move error in session %s: %s", session.id, error)
            return

        self._notify(session.id, AI_MOVE_EVENT, response)

    def _notify(self, session_id: UUID, event: str, response: GameStateResponse) -> None:
        if self.notifier is None:
            logger.debug("No listener for %s in session %s", event, session_id)
            return
        self.notifier(session_id, event, response)

    # -- Internal helpers --
    def _play_human_move(
        self, session: GameSession, from_pos: Position, to_pos: Position
    ) -> None:
        """Play the move and keep the state from before it for undo (caller holds the state lock)."""
        state = session.state
        if self._is_engine_turn(state):
            raise NotYourTurnError("It is not your turn. Waiting for the engine to move.")

        snapshot = state.clone()
        state.move_piece_from(from_pos, to_pos)
        # only reached when the move went through: a failed move leaves no snapshot behind
        session.record_snapshot(snapshot)
        session.touch()
        logger.info("Session %s: %s", session.id, state.move_history[-1])

    def _commit(self, session: GameSession) -> GameStateResponse:
        """Persist the current state and convert it into a response (caller holds the state lock)."""
        with self._repo_lock:
            stored = self.repo.update_game(session.id, session.state.to_model())
        if stored is None:
            raise RepositoryError(f"Game with game_id={session.id} not found.")
        return self._create_response(session)

    def _create_response(self, session: GameSession) -> GameStateResponse:
        """Convert the GameState of a session into a GameStateResponse."""
        state = session.state
        return GameStateResponse(
            session_id=session.id,
            board=[
                [PieceModel.from_piece(piece) if piece else None for piece in row]
                for row in state.board.grid
            ],
            captured_pieces=[
                PieceModel.from_piece(piece) for piece in state.board.captured
            ],
            current_player=state.current_player,
            selected_square=(
                SquareModel.from_position(state.selected_square)
                if state.selected_square
                else None
            ),
            possible_moves=[
                SquareModel.from_position(square) for square in state.possible_moves
            ],
            game_over=state.game_over,
            winner=state.winner,
            is_check=state.is_check,
            move_history=list(state.move_history),
            config=GameConfigModel.from_config(state.config),
        )

    def _register(self, session_id: UUID, state: GameState) -> GameSession:
        session = GameSession(
            session_id,
            state,
            history_limit=self.settings.history_limit,
            lock_timeout=self.settings.lock_timeout,
        )
        with self._registry_lock:
            # two commands may revive the same session at once: the first one wins
            return self._sessions.setdefault(session_id, session)

    def _fetch_session(self, session_id: UUID) -> GameSession:
        """Find the live session, or revive it from the repository. Raise error if that fails."""
        with self._registry_lock:
            session = self._sessions.get(session_id)
        if session is not None:
            return session

        with self._repo_lock:
            game_model = self.repo.get_game(session_id)
        if game_model is None:
            raise RepositoryError(f"Game with {session_id=} not found.")
        return self._register(session_id, GameState.from_model(game_model))
