"""
Two decks -> one game.

The rules engine gets a FEN in which every army piece has been replaced by its mapped standard piece. What the pieces
really are is kept in a separate identity table, which only lists the squares holding an army piece.
"""

from typing import Optional

from src.reforged.deck import Deck
from src.reforged.pieces import IdentityTable, Piece
from src.reforged.square import BOARD_DIMENSIONS, Square

# No castling rights, no en passant square, counters reset, White to move
FEN_SUFFIX = "w - - 0 1"


def compose(
    white_deck: Optional[Deck], black_deck: Optional[Deck]
) -> tuple[str, IdentityTable]:
    """
    Build the starting FEN and identity table for a game between the two decks.
    ---

    * Either deck may be missing (that side simply starts with no pieces).
    * Only pieces that have the color of the deck they are placed in are used.
    * Deterministic: the same decks always give the same result.
    """
    position: dict[Square, Piece] = {}
    for deck in (white_deck, black_deck):
        if deck is None:
            continue
        position.update(deck.own_pieces())

    identities: IdentityTable = {
        square: piece for square, piece in position.items() if piece.is_custom
    }
    return f"{position_to_fen(position)} {FEN_SUFFIX}", identities


def position_to_fen(position: dict[Square, Piece]) -> str:
    """Ranks are separated by slashes in FEN string."""
    return "/".join(
        _rank_to_fen(position, rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
    )


def _rank_to_fen(position: dict[Square, Piece], rank: int) -> str:
    """FEN string of a single rank"""
    fen_characters: list[str] = []
    empty_count = 0
    for file in range(1, BOARD_DIMENSIONS[0] + 1):
        piece = position.get(Square(file, rank))

        if piece is not None:
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())
        else:
            empty_count += 1

    # if the entire rank is empty, then we still place this number in the string
    if empty_count > 0:
        fen_characters.append(str(empty_count))
    return "".join(fen_characters)


def identities_to_dict(identities: IdentityTable) -> dict[str, dict[str, str]]:
    """JSON friendly version of the identity table ({"a1": {"type": "stone-sentinel", "color": "white"}})"""
    return {
        square.to_algebraic(): piece.to_dict()
        for square, piece in sorted(
            identities.items(), key=lambda item: (item[0].rank, item[0].file)
        )
    }


def identities_from_dict(data: dict[str, dict[str, str]]) -> IdentityTable:
    return {
        Square.from_algebraic(square): Piece.from_dict(piece)
        for square, piece in data.items()
    }
