"""
Custom exceptions.

Everything raised on purpose by this project derives from GameError, so the layers above can catch one type.
Expected gameplay outcomes (illegal move attempt, bot without a move, double resignation) are NOT exceptions.
"""


class GameError(Exception):
    """Top-level exception of the project."""


class InvalidRequestError(GameError):
    """Request data could not be interpreted."""


class InvalidSquareError(GameError):
    """A square name that does not exist on the board."""


class InvalidFENError(GameError):
    """The rules engine refused to load a FEN string."""


class UnknownPieceError(GameError):
    """Lookup of a piece symbol that is not in the catalog. Always a programming error."""


class DeckValidationError(GameError):
    """A deck change would break one of the deck invariants (home ranks, single king, budget)."""


class GameStateError(GameError):
    """Operation does not fit the current state of a game (or the game does not exist)."""


class RepositoryError(GameError):
    """Something went wrong at the persistence layer (i.e. record not found)."""
