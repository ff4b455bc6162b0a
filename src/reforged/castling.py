"""Castling geometry. The rules engine decides if castling is legal; we only need to know where the rook ends up."""

from enum import Enum, auto
from typing import Self

from src.core.shared_types import Color
from src.reforged.square import Square


class CastlingDirection(Enum):
    WHITE_KING_SIDE = auto()
    WHITE_QUEEN_SIDE = auto()
    BLACK_KING_SIDE = auto()
    BLACK_QUEEN_SIDE = auto()

    @classmethod
    def for_move(cls, color: Color, king_side: bool) -> Self:
        if color == Color.WHITE:
            return cls.WHITE_KING_SIDE if king_side else cls.WHITE_QUEEN_SIDE
        return cls.BLACK_KING_SIDE if king_side else cls.BLACK_QUEEN_SIDE


# (from, to) of the rook taking part in each castling move
ROOK_SQUARES: dict[CastlingDirection, tuple[Square, Square]] = {
    CastlingDirection.WHITE_KING_SIDE: (Square.from_algebraic("h1"), Square.from_algebraic("f1")),
    CastlingDirection.WHITE_QUEEN_SIDE: (Square.from_algebraic("a1"), Square.from_algebraic("d1")),
    CastlingDirection.BLACK_KING_SIDE: (Square.from_algebraic("h8"), Square.from_algebraic("f8")),
    CastlingDirection.BLACK_QUEEN_SIDE: (Square.from_algebraic("a8"), Square.from_algebraic("d8")),
}


def castling_rook_squares(direction: CastlingDirection) -> tuple[Square, Square]:
    return ROOK_SQUARES[direction]
