"""
The piece catalog: cost, mapped standard type and movement rule of every piece an army can contain.

The rules engine only knows the six standard pieces. Every army piece is handed to it as its `mapped_type`
(the smallest standard piece whose moves are a superset of its own), and the movement filter then prunes the
generated moves back down using `movement`.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self

from src.core.exceptions import UnknownPieceError
from src.core.shared_types import Color, PieceType
from src.reforged.square import Square


class MovementRule(Enum):
    STANDARD = auto()  # trust the rules engine
    EXACTLY_TWO = auto()  # two squares in one of the eight directions
    FOOTMAN = auto()  # forward/sideways step, diagonal forward capture
    UP_TO_FOUR = auto()  # queen-like, at most four squares
    IMMOBILE = auto()
    DIAGONAL_TWO = auto()  # exactly two squares diagonally
    SINGLE_STEP = auto()  # king-like step (the piece is not royal)
    UNRESTRICTED = auto()  # whatever the mapped piece generates
    ORTHOGONAL = auto()  # rook-like
    ONE_OR_TWO = auto()  # queen-like, one or two squares


class Rarity(Enum):
    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"


@dataclass(frozen=True)
class PieceSpec:
    piece_type: PieceType
    name: str
    cost: int
    mapped_type: PieceType
    movement: MovementRule
    description: str
    rarity: Rarity


def _entry(
    piece_type: PieceType,
    name: str,
    cost: int,
    mapped_type: PieceType,
    movement: MovementRule,
    description: str,
    rarity: Rarity,
) -> tuple[PieceType, PieceSpec]:
    """Convenience method: keeps the table below readable"""
    return piece_type, PieceSpec(
        piece_type, name, cost, mapped_type, movement, description, rarity
    )


PIECE_CATALOG: dict[PieceType, PieceSpec] = dict(
    [
        _entry(PieceType.PAWN, "Pawn", 1, PieceType.PAWN, MovementRule.STANDARD, "Moves forward one square, captures diagonally forward", Rarity.COMMON),
        _entry(PieceType.KNIGHT, "Knight", 3, PieceType.KNIGHT, MovementRule.STANDARD, "Moves in an L-shape", Rarity.UNCOMMON),
        _entry(PieceType.BISHOP, "Bishop", 3, PieceType.BISHOP, MovementRule.STANDARD, "Moves diagonally any number of squares", Rarity.UNCOMMON),
        _entry(PieceType.ROOK, "Rook", 5, PieceType.ROOK, MovementRule.STANDARD, "Moves horizontally or vertically any number of squares", Rarity.RARE),
        _entry(PieceType.QUEEN, "Queen", 8, PieceType.QUEEN, MovementRule.STANDARD, "Moves any direction any number of squares", Rarity.EPIC),
        _entry(PieceType.KING, "King", 0, PieceType.KING, MovementRule.STANDARD, "Moves one square in any direction", Rarity.LEGENDARY),
        _entry(PieceType.LION, "Lion", 6, PieceType.QUEEN, MovementRule.EXACTLY_TWO, "Moves exactly 2 squares in any direction (cannot jump over pieces)", Rarity.EPIC),
        _entry(PieceType.FOOTMAN, "Footman", 2, PieceType.QUEEN, MovementRule.FOOTMAN, "Moves 1 square forward or sideways (no capture), captures diagonally forward", Rarity.COMMON),
        _entry(PieceType.DRAGON, "Dragon", 8, PieceType.QUEEN, MovementRule.UP_TO_FOUR, "Moves like a queen, limited to 4 squares", Rarity.LEGENDARY),
        _entry(PieceType.STONEHURLER, "Stonehurler", 5, PieceType.ROOK, MovementRule.IMMOBILE, "Cannot move (ranged attacks not modeled)", Rarity.RARE),
        _entry(PieceType.WAR_ELEPHANT, "War Elephant", 4, PieceType.BISHOP, MovementRule.DIAGONAL_TWO, "Moves exactly 2 squares diagonally", Rarity.UNCOMMON),
        _entry(PieceType.ARCANE_SAGE, "Arcane Sage", 7, PieceType.QUEEN, MovementRule.SINGLE_STEP, "Moves 1 square in any direction (teleport not modeled)", Rarity.EPIC),
        _entry(PieceType.BOWGUARD, "Bowguard", 3, PieceType.PAWN, MovementRule.UNRESTRICTED, "Moves like a pawn (ranged attacks not modeled)", Rarity.UNCOMMON),
        _entry(PieceType.GALLEON, "Galleon", 5, PieceType.ROOK, MovementRule.ORTHOGONAL, "Moves like a rook", Rarity.RARE),
        _entry(PieceType.COMMANDING_STEED, "Commanding Steed", 4, PieceType.KNIGHT, MovementRule.UNRESTRICTED, "Moves like a knight (king steps not modeled)", Rarity.UNCOMMON),
        _entry(PieceType.STONE_SENTINEL, "Stone Sentinel", 7, PieceType.QUEEN, MovementRule.ONE_OR_TWO, "Moves 1 or 2 squares in any direction, cannot be captured by pawns", Rarity.EPIC),
    ]
)

# A new PieceType without a catalog entry should break loudly at import, not somewhere mid-game
_missing = set(PieceType) - set(PIECE_CATALOG)
if _missing:
    raise UnknownPieceError(
        f"Piece catalog is missing: {', '.join(sorted(_missing))}"
    )


FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


def piece_spec(symbol: PieceType | str) -> PieceSpec:
    """Catalog lookup. Unknown symbols are a programming error, so fail fast."""
    try:
        return PIECE_CATALOG[PieceType(symbol)]
    except (KeyError, ValueError) as e:
        raise UnknownPieceError(f"Unknown piece symbol: {symbol!r}") from e


@dataclass(frozen=True)
class Piece:
    """Identity of a piece: what it really is and who owns it."""

    type: PieceType
    color: Color

    @property
    def spec(self) -> PieceSpec:
        return piece_spec(self.type)

    @property
    def cost(self) -> int:
        return self.spec.cost

    @property
    def is_custom(self) -> bool:
        return not self.type.is_standard

    def to_fen(self) -> str:
        """FEN character of the mapped standard piece. Upper case: White, lower case: Black"""
        character = PIECE_TO_FEN[self.spec.mapped_type]
        return character.upper() if self.color == Color.WHITE else character

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type.value, "color": self.color.value}

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> Self:
        return cls(piece_spec(data["type"]).piece_type, Color(data["color"]))


# Square -> actual identity, ONLY for squares holding a non-standard piece.
# Absence of an entry means: trust the piece type the rules engine reports.
IdentityTable = dict[Square, Piece]
