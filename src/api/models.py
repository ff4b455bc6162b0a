"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import (
    Color,
    Difficulty,
    DrawReason,
    GameMode,
    PieceType,
    Status,
)

SquareName = str


def _validate_square(value: str) -> str:
    def _is_algebraic_notation(value: str) -> bool:
        if len(value) != 2:
            return False

        first_character = value[0]
        second_character = value[1]
        if not (first_character in "abcdefgh" and second_character in "12345678"):
            return False
        return True

    if not _is_algebraic_notation(value):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    return value


# --- REQUEST MODELS: DECKS ---
class ListDecksRequest(BaseModel):
    player_id: str
    color: Optional[Color] = None


class CreateDeckRequest(BaseModel):
    player_id: str
    color: Color
    name: Optional[str] = None
    template_name: Optional[str] = None


class PlacePieceRequest(BaseModel):
    player_id: str
    deck_id: UUID
    square: SquareName
    piece_type: PieceType

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class RemovePieceRequest(BaseModel):
    player_id: str
    deck_id: UUID
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class RenameDeckRequest(BaseModel):
    player_id: str
    deck_id: UUID
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("Deck name cannot be empty.")
        return value.strip()


class DeckRequest(BaseModel):
    """Any request that only points at a deck (set as main, delete, validate)."""

    player_id: str
    deck_id: UUID


# --- REQUEST MODELS: GAMES ---
class StartGameRequest(BaseModel):
    player_id: str
    color: Color = Color.WHITE
    mode: GameMode = GameMode.HUMAN_VS_BOT
    difficulty: Difficulty = Difficulty.NORMAL
    # decks to play with. Missing deck -> that side plays the classic set-up
    deck_id: Optional[UUID] = None
    opponent_deck_id: Optional[UUID] = None
    use_decks: bool = False
    # set-up by hand (standard pieces only). Wins over the decks when given
    custom_fen: Optional[str] = None

    @field_validator("custom_fen")
    @classmethod
    def validate_fen(cls, value: Optional[str]) -> Optional[str]:
        """Only the shape is checked here, the rules engine decides whether the position makes sense."""
        if value is None:
            return value
        fields = value.split()
        if len(fields) != 6 or len(fields[0].split("/")) != 8:
            raise InvalidRequestError(f"Cannot interpret {value!r} as a FEN string.")
        return value


class GetGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: SquareName

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: SquareName
    to_square: SquareName

    @field_validator("from_square", "to_square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square(value)


class ResignRequest(BaseModel):
    game_id: UUID
    color: Color


# --- RESPONSE MODELS ---
class DeckResponse(BaseModel):
    deck_id: UUID
    name: str
    description: str
    color: Color
    placement: dict[SquareName, dict[str, str]]
    is_main: bool
    total_cost: int
    budget: int
    is_valid: bool
    errors: list[str]


class BoardSquareResponse(BaseModel):
    square: SquareName
    type: PieceType
    color: Color


class HistoryEntryResponse(BaseModel):
    ply: int
    move_number: int
    color: Color
    san: str
    from_square: SquareName
    to_square: SquareName
    moved_piece: PieceType
    captured_piece: Optional[PieceType]
    promotion: Optional[PieceType]
    fen_after: str


class GameStateResponse(BaseModel):
    game_id: UUID
    fen: str
    turn: Color
    mode: GameMode
    difficulty: Difficulty
    player_color: Color
    status: Status
    status_text: str
    winner: Optional[Color]
    draw_reason: Optional[DrawReason]
    bot_thinking: bool
    reward_granted: bool
    board: list[list[Optional[BoardSquareResponse]]]
    identities: dict[SquareName, dict[str, str]]
    history: list[HistoryEntryResponse]
    captured: dict[Color, list[PieceType]]


class MoveResponse(BaseModel):
    accepted: bool
    state: GameStateResponse


class LegalMoveResponse(BaseModel):
    from_square: SquareName
    to_square: SquareName
    san: str


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: SquareName
    legal_moves: list[LegalMoveResponse]
