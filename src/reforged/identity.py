"""
Keeps the identity table in step with the board.

Has to run for EVERY applied move (player and bot alike). A single skipped move leaves entries on the wrong squares
and from then on the movement filter judges pieces by the wrong rules.
"""

from src.core.shared_types import PieceType
from src.reforged.castling import CastlingDirection, castling_rook_squares
from src.reforged.pieces import IdentityTable, Piece
from src.reforged.rules import VerboseMove
from src.reforged.square import Square


def actual_type(identities: IdentityTable, square: Square, engine_type: PieceType) -> PieceType:
    """What the piece on `square` really is: the identity entry if there is one, else the rules engine's type."""
    entry = identities.get(square)
    return entry.type if entry is not None else engine_type


def en_passant_capture_square(move: VerboseMove) -> Square:
    """The captured pawn stands next to the moving pawn: file of the destination, rank the pawn moved from."""
    return Square(file=move.to_square.file, rank=move.from_square.rank)


def apply_move(identities: IdentityTable, move: VerboseMove) -> IdentityTable:
    """
    Return the identity table after `move` (which the rules engine has just accepted). The input is not mutated.
    ---

    1. en passant: the captured pawn is not on the destination square, drop its entry separately
    2. castling: the rook travels too, carry its entry along
    3. the moving piece leaves `from`, whatever stood on `to` is gone
    4. write the mover at `to`, unless it is (or promoted into) a standard piece
    """
    table = dict(identities)
    moved_type = actual_type(table, move.from_square, move.piece)

    if move.is_en_passant:
        table.pop(en_passant_capture_square(move), None)

    if move.piece == PieceType.KING and move.is_castling:
        direction = CastlingDirection.for_move(move.color, move.is_king_side_castling)
        rook_from, rook_to = castling_rook_squares(direction)
        rook = table.pop(rook_from, None)
        if rook is not None:
            table[rook_to] = rook

    table.pop(move.from_square, None)
    table.pop(move.to_square, None)

    # promotion always wins: a promoted piece is a plain standard piece
    if move.promotion is not None:
        moved_type = move.promotion

    if not moved_type.is_standard:
        table[move.to_square] = Piece(moved_type, move.color)
    return table
