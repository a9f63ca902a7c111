"""
Computer opponent
-----

Three strategies, picked by the difficulty of the game:
* EASY: any move, uniformly at random.
* MEDIUM: greedy. Prefer a move that gives check, then a capture, then anything (random within the bucket).
* HARD: minimax with alpha-beta pruning over a fixed number of plies.

All strategies only read the state they are given: hypothetical moves are played on clones.
Cloning the whole state for every node is slower than make/unmake, but it can't leave a position half-updated.
(Fine for depth 3. Revisit if the search has to go deeper.)

References:
    - Minimax: https://www.chessprogramming.org/Minimax
    - Alpha-Beta: https://www.chessprogramming.org/Alpha-Beta
"""

import logging
import math
import random
from typing import Callable, Optional

from src.chess.board import MovePair
from src.chess.game import GameState
from src.core.exceptions import NoLegalMovesError
from src.core.shared_types import Difficulty
from src.engine.evaluation import evaluate_position

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_DEPTH = 3

_shared_rng = random.Random()


def _all_moves(state: GameState) -> list[MovePair]:
    """Every move of the player to move. No move at all ends the game (reported as an error, never a pass)."""
    moves = state.legal_moves()
    if not moves:
        raise NoLegalMovesError(f"No valid moves for {state.current_player.value}.")
    return moves


def _simulate(state: GameState, move: MovePair) -> GameState:
    """Play the move on a copy of the state"""
    child = state.clone()
    child.move_piece_from(*move)
    return child


# --- EASY ---
def random_move(state: GameState, rng: Optional[random.Random] = None) -> MovePair:
    rng = rng or _shared_rng
    return rng.choice(_all_moves(state))


# --- MEDIUM ---
def greedy_move(state: GameState, rng: Optional[random.Random] = None) -> MovePair:
    """Checks first, then captures, then anything"""
    rng = rng or _shared_rng
    all_moves = _all_moves(state)
    check_moves = [move for move in all_moves if _simulate(state, move).is_check]
    capture_moves = [
        move for move in all_moves if state.board.get_piece(move[1]) is not None
    ]
    for bucket in (check_moves, capture_moves):
        if bucket:
            return rng.choice(bucket)
    return rng.choice(all_moves)


# --- HARD ---
def best_move(state: GameState, depth: int = DEFAULT_SEARCH_DEPTH) -> MovePair:
    """
    Root of the minimax search.

    Every move of the player to move is tried, the replies are searched `depth - 1` plies deep
    (the first of them by the minimizing opponent), and the move with the highest score wins.
    Ties go to the move found first (row-major board order).
    """
    if depth < 1:
        raise ValueError(f"Search depth must be at least 1, got {depth}.")

    alpha, beta = -math.inf, math.inf
    chosen: Optional[MovePair] = None
    best_score = -math.inf
    for move in _all_moves(state):
        score = minimax(_simulate(state, move), depth - 1, False, alpha, beta)
        if chosen is None or score > best_score:
            chosen, best_score = move, score
        alpha = max(alpha, best_score)

    logger.debug("Best move %s (score %s, depth %d)", chosen, best_score, depth)
    # for the type checker: _all_moves() never returns an empty list
    assert chosen is not None
    return chosen


def minimax(
    state: GameState, depth: int, maximizing: bool, alpha: float, beta: float
) -> float:
    """
    Minimax search with alpha-beta pruning.

    Maximizing and minimizing plies alternate. A leaf (depth 0, or a captured king) is scored statically
    from the point of view of the player to move at that leaf.
    A branch gets cut off as soon as beta <= alpha.
    """
    if depth == 0 or state.game_over:
        return evaluate_position(state, state.current_player)

    best_score = -math.inf if maximizing else math.inf
    for move in state.legal_moves():
        score = minimax(_simulate(state, move), depth - 1, not maximizing, alpha, beta)
        if maximizing:
            best_score = max(best_score, score)
            alpha = max(alpha, best_score)
        else:
            best_score = min(best_score, score)
            beta = min(beta, best_score)

        if beta <= alpha:
            break
    return best_score


# --- STRATEGY PATTERN: DIFFICULTY ---
Strategy = Callable[[GameState, Optional[random.Random], int], MovePair]
STRATEGIES: dict[Difficulty, Strategy] = {
    Difficulty.EASY: lambda state, rng, depth: random_move(state, rng),
    Difficulty.MEDIUM: lambda state, rng, depth: greedy_move(state, rng),
    Difficulty.HARD: lambda state, rng, depth: best_move(state, depth),
}


def choose_move(
    state: GameState,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
    depth: int = DEFAULT_SEARCH_DEPTH,
) -> MovePair:
    """Pick a move for the player to move. The state itself is left untouched."""
    strategy = STRATEGIES[difficulty]
    return strategy(state, rng, depth)


def make_ai_move(
    state: GameState,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
    depth: int = DEFAULT_SEARCH_DEPTH,
) -> MovePair:
    """Pick a move and play it through the same path human moves take."""
    from_pos, to_pos = choose_move(state, difficulty, rng, depth)
    state.move_piece_from(from_pos, to_pos)
    logger.info(
        "Engine (%s, %s) played %s",
        state.current_player.opposite().value,
        difficulty.value,
        state.move_history[-1],
    )
    return from_pos, to_pos
