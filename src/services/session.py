"""
A game session: the live game state of one game plus its undo history.

Concurrency
----
* the state is guarded by one lock, the undo history by a second one.
* whenever both are needed, the state lock is taken first.
* an engine turn holds the state lock for the whole search, so other commands queue up behind it.
* undo / reset / new game bump the `generation`, so an engine turn that was scheduled for an older state knows it is stale.
"""

from collections import deque
from contextlib import contextmanager
from datetime import datetime, timezone
from threading import Lock, Thread
from typing import Iterator, Optional
from uuid import UUID

from src.chess.game import GameState
from src.core.exceptions import GameStateError, LockAcquisitionError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GameSession:
    """One game, as the service layer sees it."""

    def __init__(
        self,
        session_id: UUID,
        state: GameState,
        history_limit: int = 50,
        lock_timeout: float = 5.0,
    ) -> None:
        self.id = session_id
        self.state = state
        self.generation = 0
        self.created_at = utc_now()
        self.updated_at = self.created_at
        self.ai_worker: Optional[Thread] = None

        self._history: deque[GameState] = deque(maxlen=history_limit)
        self._state_lock = Lock()
        self._history_lock = Lock()
        self._lock_timeout = lock_timeout

    # -- LOCKS ---
    @contextmanager
    def locked_state(self) -> Iterator[GameState]:
        """Exclusive access to the live game state."""
        with self._acquire(self._state_lock, "game state"):
            yield self.state

    @contextmanager
    def locked_history(self) -> Iterator[deque[GameState]]:
        """Exclusive access to the undo history."""
        with self._acquire(self._history_lock, "move history"):
            yield self._history

    @contextmanager
    def _acquire(self, lock: Lock, name: str) -> Iterator[None]:
        if not lock.acquire(timeout=self._lock_timeout):
            raise LockAcquisitionError(f"Failed to lock {name}.")
        try:
            yield
        finally:
            lock.release()

    # -- TRANSITIONS (caller holds the state lock) ---
    def record_snapshot(self, snapshot: GameState) -> None:
        """Remember the state from right before a move. The oldest snapshot drops out once the cap is reached."""
        with self.locked_history() as history:
            history.append(snapshot)

    def pop_snapshot(self) -> GameState:
        with self.locked_history() as history:
            if not history:
                raise GameStateError("No moves to undo.")
            return history.pop()

    def replace_state(self, new_state: GameState, keep_history: bool = False) -> None:
        """Swap the live state wholesale (undo, reset, new game). Scheduled engine turns become stale."""
        self.state = new_state
        self.generation += 1
        if not keep_history:
            with self.locked_history() as history:
                history.clear()
        self.touch()

    def touch(self) -> None:
        self.updated_at = utc_now()

    @property
    def history_size(self) -> int:
        with self.locked_history() as history:
            return len(history)

    def wait_for_engine(self, timeout: Optional[float] = None) -> None:
        """Block until a scheduled engine turn has finished (used on shutdown and in tests)."""
        worker = self.ai_worker
        if worker is not None:
            worker.join(timeout)
