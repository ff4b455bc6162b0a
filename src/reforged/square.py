"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from src.core.exceptions import InvalidSquareError
from src.core.shared_types import Color

# Chess board is always 8x8. The rules engine does not support anything else anyway.
BOARD_DIMENSIONS = (8, 8)
FILES = "abcdefgh"
RANKS = "12345678"

# Armies may only be set up on the three ranks closest to their own side
HOME_RANKS: dict[Color, tuple[int, ...]] = {
    Color.WHITE: (1, 2, 3),
    Color.BLACK: (6, 7, 8),
}


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if len(sq) != 2:
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square.")
        file, rank = sq[0].lower(), sq[1]
        if file not in FILES or rank not in RANKS:
            raise InvalidSquareError(f"Square {sq!r} is not on the board.")
        return cls(FILES.index(file) + 1, RANKS.index(rank) + 1)

    @classmethod
    def from_index(cls, index: int) -> Square:
        """python-chess numbers the squares 0 (a1) to 63 (h8)"""
        return cls(index % BOARD_DIMENSIONS[0] + 1, index // BOARD_DIMENSIONS[0] + 1)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def to_index(self) -> int:
        return (self.rank - 1) * BOARD_DIMENSIONS[0] + (self.file - 1)

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def __str__(self) -> str:
        return self.to_algebraic()


def as_square(value: Square | str) -> Square:
    """Public methods accept both 'e4' and Square(5, 4)"""
    return value if isinstance(value, Square) else Square.from_algebraic(value)


def is_home_square(color: Color, square: Square) -> bool:
    return square.rank in HOME_RANKS[color]
