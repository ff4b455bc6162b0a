"""
Army decks: a player's chosen set-up of standard and army pieces on their own three home ranks.

Rules a deck has to follow before it can be played:
* every piece has the deck's color
* exactly one king
* pieces only on the three ranks closest to the deck's own side
* total cost (see the piece catalog, the king is free) within the player's budget
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional, Self
from uuid import UUID, uuid4

from src.core.exceptions import DeckValidationError
from src.core.models import DeckModel
from src.core.shared_types import Color, PieceType
from src.reforged.pieces import Piece
from src.reforged.square import Square, is_home_square

# A classic army totals 38 points with the catalog costs (queen = 8)
DEFAULT_BUDGET = 38
# Levels 2 - 13 each add one point to the budget
MAX_BONUS_LEVELS = 12


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def budget_for_level(level: int, base: int = DEFAULT_BUDGET) -> int:
    return base + min(max(level - 1, 0), MAX_BONUS_LEVELS)


@dataclass
class PlacementValidation:
    ok: bool
    errors: list[str]
    total_cost: int
    remaining: int
    king_count: int


@dataclass
class Deck:
    color: Color
    name: str
    description: str = "A custom army build"
    placement: dict[Square, Piece] = field(default_factory=dict)
    id: UUID = field(default_factory=uuid4)
    owner_id: str = ""
    created_at: datetime = field(default_factory=utc_now)
    last_modified: datetime = field(default_factory=utc_now)
    is_main: bool = False

    # --- CREATION ---
    @classmethod
    def empty(cls, color: Color, name: Optional[str] = None, owner_id: str = "") -> Self:
        name = name or f"{color.value.capitalize()} Army {utc_now():%Y-%m-%d}"
        return cls(color=color, name=name, owner_id=owner_id)

    @classmethod
    def from_template(cls, template: "DeckTemplate", owner_id: str = "") -> Self:
        return cls(
            color=template.color,
            name=template.name,
            description=template.description,
            placement=template.pieces(),
            owner_id=owner_id,
        )

    @classmethod
    def from_model(cls, model: DeckModel) -> Self:
        """Define how to construct a Deck from the information the Service layer actually has"""
        return cls(
            id=model.id,
            owner_id=model.owner_id,
            name=model.name,
            description=model.description,
            color=Color(model.color),
            placement={
                Square.from_algebraic(square): Piece.from_dict(piece)
                for square, piece in model.placement.items()
            },
            created_at=model.created_at,
            last_modified=model.last_modified,
            is_main=model.is_main,
        )

    def to_model(self) -> DeckModel:
        """Encode back into a format the Service layer uses"""
        return DeckModel(
            id=self.id,
            owner_id=self.owner_id,
            name=self.name,
            description=self.description,
            color=self.color.value,
            placement={
                square.to_algebraic(): piece.to_dict()
                for square, piece in self.placement.items()
            },
            created_at=self.created_at,
            last_modified=self.last_modified,
            is_main=self.is_main,
        )

    # --- BOOKKEEPING ---
    def own_pieces(self) -> dict[Square, Piece]:
        """Pieces of another color never count (and never get played)"""
        return {
            square: piece
            for square, piece in self.placement.items()
            if piece.color == self.color
        }

    def total_cost(self) -> int:
        return sum(piece.cost for piece in self.own_pieces().values())

    def king_count(self) -> int:
        return sum(
            1 for piece in self.own_pieces().values() if piece.type == PieceType.KING
        )

    def validate(self, budget: int = DEFAULT_BUDGET) -> PlacementValidation:
        errors: list[str] = []

        for square, piece in self.own_pieces().items():
            if not is_home_square(self.color, square):
                errors.append(
                    f"Piece {piece.type} at {square} is outside the first three ranks for {self.color}."
                )

        total_cost = self.total_cost()
        if total_cost > budget:
            errors.append(f"Total cost {total_cost} exceeds budget {budget}.")

        king_count = self.king_count()
        if king_count == 0:
            errors.append("You must place exactly 1 king.")
        if king_count > 1:
            errors.append(f"You have placed {king_count} kings; only 1 is allowed.")

        return PlacementValidation(
            ok=not errors,
            errors=errors,
            total_cost=total_cost,
            remaining=max(0, budget - total_cost),
            king_count=king_count,
        )

    def is_valid(self, budget: int = DEFAULT_BUDGET) -> bool:
        return self.validate(budget).ok

    # --- EDITING ---
    def can_place(
        self, square: Square, piece_type: PieceType, budget: int = DEFAULT_BUDGET
    ) -> tuple[bool, Optional[str]]:
        """Check a placement before doing it. Returns (ok, reason why not)"""
        if not is_home_square(self.color, square):
            return False, "Must place within your first three ranks."

        # validate against the placement as it would look afterwards
        after = Deck(
            color=self.color,
            name=self.name,
            placement={**self.placement, square: Piece(piece_type, self.color)},
        )
        if piece_type == PieceType.KING and after.king_count() > 1:
            return False, "Only one king is allowed."

        total = after.total_cost()
        if total > budget:
            return False, f"Placing this exceeds budget ({total}/{budget})."
        return True, None

    def place(
        self, square: Square, piece_type: PieceType, budget: int = DEFAULT_BUDGET
    ) -> None:
        ok, reason = self.can_place(square, piece_type, budget)
        if not ok:
            raise DeckValidationError(f"Cannot place {piece_type} on {square}: {reason}")
        self.placement[square] = Piece(piece_type, self.color)
        self._touch()

    def remove(self, square: Square) -> Optional[Piece]:
        removed = self.placement.pop(square, None)
        if removed is not None:
            self._touch()
        return removed

    def rename(self, name: str, description: Optional[str] = None) -> None:
        self.name = name
        if description is not None:
            self.description = description
        self._touch()

    def _touch(self) -> None:
        self.last_modified = utc_now()


# --- TEMPLATES FOR NEW PLAYERS ---
@dataclass(frozen=True)
class DeckTemplate:
    color: Color
    name: str
    description: str
    placement: dict[str, PieceType]

    def pieces(self) -> dict[Square, Piece]:
        return {
            Square.from_algebraic(square): Piece(piece_type, self.color)
            for square, piece_type in self.placement.items()
        }


def _back_rank(rank: int) -> dict[str, PieceType]:
    order = "rnbqkbnr"
    names = {
        "r": PieceType.ROOK,
        "n": PieceType.KNIGHT,
        "b": PieceType.BISHOP,
        "q": PieceType.QUEEN,
        "k": PieceType.KING,
    }
    return {f"{file}{rank}": names[char] for file, char in zip("abcdefgh", order)}


def _pawn_rank(rank: int) -> dict[str, PieceType]:
    return {f"{file}{rank}": PieceType.PAWN for file in "abcdefgh"}


DECK_TEMPLATES: dict[Color, list[DeckTemplate]] = {
    Color.WHITE: [
        DeckTemplate(
            Color.WHITE,
            "Classic Setup",
            "Traditional chess starting position",
            {**_back_rank(1), **_pawn_rank(2)},
        ),
        DeckTemplate(
            Color.WHITE,
            "Aggressive Opening",
            "Forward-focused army with extra knights",
            {
                "d1": PieceType.KING,
                "c1": PieceType.QUEEN,
                "b1": PieceType.KNIGHT,
                "f1": PieceType.KNIGHT,
                "a1": PieceType.ROOK,
                "h1": PieceType.ROOK,
                "e1": PieceType.KNIGHT,
                **_pawn_rank(2),
                "d2": PieceType.KNIGHT,
            },
        ),
    ],
    Color.BLACK: [
        DeckTemplate(
            Color.BLACK,
            "Classic Setup",
            "Traditional chess starting position",
            {**_back_rank(8), **_pawn_rank(7)},
        ),
        DeckTemplate(
            Color.BLACK,
            "Defensive Wall",
            "Strong defensive setup with bishops and rooks",
            {**_back_rank(8), **_pawn_rank(7)},
        ),
    ],
}


def default_decks(color: Color, owner_id: str = "") -> list[Deck]:
    """Decks handed to a new player. Creation times are staggered so the listing order is stable."""
    templates = DECK_TEMPLATES[color]
    decks = [Deck.from_template(template, owner_id) for template in templates]
    now = utc_now()
    for index, deck in enumerate(decks):
        deck.created_at = deck.last_modified = now - timedelta(
            seconds=len(decks) - index
        )
    return decks
