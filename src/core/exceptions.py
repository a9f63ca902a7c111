"""
Custom exceptions.

Every error raised on purpose by this application derives from GameError, so a caller
(service, API layer) can catch one top-level type and report `str(error)` to the user.
"""


class GameError(Exception):
    """Top-level error of the application."""


# --- DOMAIN ERRORS ---
class BoardError(GameError):
    """Acting on an empty square, or on coordinates outside the board."""


class IllegalMoveError(GameError):
    """The destination is not among the targets the piece can reach."""


class NotYourTurnError(IllegalMoveError):
    """Trying to move a piece of the player that is not to move."""


class NoSelectionError(IllegalMoveError):
    """Moving 'the selected piece' while nothing is selected."""


class GameStateError(GameError):
    """The game is in a state that does not allow the requested action."""


class NoLegalMovesError(GameError):
    """The side to move has no move at all. Callers treat this as the end of the game."""


# --- BOUNDARY ERRORS ---
class LockAcquisitionError(GameError):
    """A session lock could not be acquired in time."""


class RepositoryError(GameError):
    """Persistence layer could not find / store the requested record."""


class InvalidRequestError(GameError):
    """
    Request data does not make sense.

    NOTE: deliberately not a ValueError. Pydantic would otherwise wrap it into a ValidationError.
    """
