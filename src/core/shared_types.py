"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECKMATE = "checkmate"
    DRAW = "draw"
    RESIGNED = "resigned"


class DrawReason(StrEnum):
    STALEMATE = "stalemate"
    THREEFOLD_REPETITION = "threefold repetition"
    INSUFFICIENT_MATERIAL = "insufficient material"
    FIFTY_MOVE_RULE = "fifty-move rule"
    # The rules engine still has moves, but none survive the army movement rules
    NO_CUSTOM_MOVES = "no custom moves"


class GameMode(StrEnum):
    HUMAN_VS_HUMAN = "human-vs-human"
    HUMAN_VS_BOT = "human-vs-bot"


class Difficulty(StrEnum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE

    @property
    def fen_char(self) -> str:
        return "w" if self == Color.WHITE else "b"


class PieceType(StrEnum):
    # --- the six pieces the rules engine knows about
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
    # --- army pieces. The rules engine only ever sees their mapped standard type
    LION = "lion"
    FOOTMAN = "footman"
    DRAGON = "dragon"
    STONEHURLER = "stonehurler"
    WAR_ELEPHANT = "war-elephant"
    ARCANE_SAGE = "arcane-sage"
    BOWGUARD = "bowguard"
    GALLEON = "galleon"
    COMMANDING_STEED = "commanding-steed"
    STONE_SENTINEL = "stone-sentinel"

    @property
    def is_standard(self) -> bool:
        return self in STANDARD_PIECE_TYPES


STANDARD_PIECE_TYPES: frozenset[PieceType] = frozenset(
    {
        PieceType.PAWN,
        PieceType.KNIGHT,
        PieceType.BISHOP,
        PieceType.ROOK,
        PieceType.QUEEN,
        PieceType.KING,
    }
)
