"""unit tests for src/reforged/castling.py"""

import pytest

from src.core.shared_types import Color
from src.reforged.castling import CastlingDirection, castling_rook_squares
from src.reforged.square import Square


def test_direction_for_move() -> None:
    assert CastlingDirection.for_move(Color.WHITE, True) == CastlingDirection.WHITE_KING_SIDE
    assert CastlingDirection.for_move(Color.WHITE, False) == CastlingDirection.WHITE_QUEEN_SIDE
    assert CastlingDirection.for_move(Color.BLACK, True) == CastlingDirection.BLACK_KING_SIDE
    assert CastlingDirection.for_move(Color.BLACK, False) == CastlingDirection.BLACK_QUEEN_SIDE


@pytest.mark.parametrize(
    "direction, rook_from, rook_to",
    [
        (CastlingDirection.WHITE_KING_SIDE, "h1", "f1"),
        (CastlingDirection.WHITE_QUEEN_SIDE, "a1", "d1"),
        (CastlingDirection.BLACK_KING_SIDE, "h8", "f8"),
        (CastlingDirection.BLACK_QUEEN_SIDE, "a8", "d8"),
    ],
)
def test_rook_squares(direction: CastlingDirection, rook_from: str, rook_to: str) -> None:
    assert castling_rook_squares(direction) == (
        Square.from_algebraic(rook_from),
        Square.from_algebraic(rook_to),
    )
