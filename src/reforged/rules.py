"""
Adapter around the standard chess rules engine (python-chess).

The engine is the legality oracle: it generates legal moves for the six standard piece types, applies them, and
detects check / checkmate / draws. It knows nothing about army pieces; those are handed to it as their mapped
standard type (see pieces.py), and the rest of the domain layer works on the VerboseMove objects produced here.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional, Self

import chess

from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color, DrawReason, PieceType
from src.reforged.square import Square

STARTING_FEN = chess.STARTING_FEN

ENGINE_TO_PIECE: dict[chess.PieceType, PieceType] = {
    chess.PAWN: PieceType.PAWN,
    chess.KNIGHT: PieceType.KNIGHT,
    chess.BISHOP: PieceType.BISHOP,
    chess.ROOK: PieceType.ROOK,
    chess.QUEEN: PieceType.QUEEN,
    chess.KING: PieceType.KING,
}

PIECE_TO_ENGINE: dict[PieceType, chess.PieceType] = {
    value: key for key, value in ENGINE_TO_PIECE.items()
}


class MoveFlag(Enum):
    CAPTURE = auto()
    EN_PASSANT = auto()
    KING_SIDE_CASTLE = auto()
    QUEEN_SIDE_CASTLE = auto()
    PROMOTION = auto()
    DOUBLE_PAWN_PUSH = auto()


# the only ranks a pawn may advance two squares from
DOUBLE_PUSH_RANKS: dict[chess.Color, int] = {chess.WHITE: 1, chess.BLACK: 6}


def engine_color(color: Color) -> chess.Color:
    return chess.WHITE if color == Color.WHITE else chess.BLACK


def domain_color(color: chess.Color) -> Color:
    return Color.WHITE if color == chess.WHITE else Color.BLACK


@dataclass(frozen=True)
class VerboseMove:
    """
    A legal move, described the way the rules engine sees it.
    ---

    NOTE `piece`, `captured` and `promotion` are engine (standard) piece types. The actual identity of an army
    piece lives in the identity table, never here.
    """

    from_square: Square
    to_square: Square
    color: Color
    piece: PieceType
    captured: Optional[PieceType]
    promotion: Optional[PieceType]
    flags: frozenset[MoveFlag]
    san: str

    @classmethod
    def from_engine(cls, board: chess.Board, move: chess.Move) -> Self:
        """Describe `move` in the position BEFORE it is pushed onto `board`."""
        piece = board.piece_at(move.from_square)
        # for the type checker: a legal move always starts on an occupied square
        assert piece is not None

        flags: set[MoveFlag] = set()
        captured: Optional[PieceType] = None
        if board.is_en_passant(move):
            flags.update({MoveFlag.CAPTURE, MoveFlag.EN_PASSANT})
            captured = PieceType.PAWN
        elif board.is_capture(move):
            flags.add(MoveFlag.CAPTURE)
            captured_type = board.piece_type_at(move.to_square)
            captured = ENGINE_TO_PIECE[captured_type] if captured_type else None
        if board.is_kingside_castling(move):
            flags.add(MoveFlag.KING_SIDE_CASTLE)
        elif board.is_queenside_castling(move):
            flags.add(MoveFlag.QUEEN_SIDE_CASTLE)
        if move.promotion:
            flags.add(MoveFlag.PROMOTION)
        if piece.piece_type == chess.PAWN and abs(
            chess.square_rank(move.from_square) - chess.square_rank(move.to_square)
        ) == 2:
            flags.add(MoveFlag.DOUBLE_PAWN_PUSH)

        return cls(
            from_square=Square.from_index(move.from_square),
            to_square=Square.from_index(move.to_square),
            color=domain_color(piece.color),
            piece=ENGINE_TO_PIECE[piece.piece_type],
            captured=captured,
            promotion=ENGINE_TO_PIECE[move.promotion] if move.promotion else None,
            flags=frozenset(flags),
            san=board.san(move),
        )

    @property
    def is_capture(self) -> bool:
        return MoveFlag.CAPTURE in self.flags

    @property
    def is_en_passant(self) -> bool:
        return MoveFlag.EN_PASSANT in self.flags

    @property
    def is_castling(self) -> bool:
        return bool(
            self.flags & {MoveFlag.KING_SIDE_CASTLE, MoveFlag.QUEEN_SIDE_CASTLE}
        )

    @property
    def is_king_side_castling(self) -> bool:
        return MoveFlag.KING_SIDE_CASTLE in self.flags

    def to_uci(self) -> str:
        promotion = chess.piece_symbol(PIECE_TO_ENGINE[self.promotion]) if self.promotion else ""
        return f"{self.from_square}{self.to_square}{promotion}"


class RulesEngine:
    """Everything the game session needs from the standard rules, and nothing more."""

    def __init__(self, fen: Optional[str] = None) -> None:
        self._board = chess.Board()
        if fen is not None:
            self.load_position(fen)

    def load_position(self, fen: str) -> None:
        """Replace the position (and drop the move stack). The old position is kept if the FEN is rejected."""
        try:
            board = chess.Board(fen)
        except ValueError as e:
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen!r}") from e
        self._board = board

    def current_fen(self) -> str:
        return self._board.fen()

    def turn_color(self) -> Color:
        return domain_color(self._board.turn)

    def fullmove_number(self) -> int:
        return self._board.fullmove_number

    def piece_at(self, square: Square) -> Optional[tuple[PieceType, Color]]:
        piece = self._board.piece_at(square.to_index())
        if piece is None:
            return None
        return ENGINE_TO_PIECE[piece.piece_type], domain_color(piece.color)

    def legal_moves(self, from_square: Optional[Square] = None) -> list[VerboseMove]:
        """All legal moves for the side to move, or only those starting on `from_square`."""
        return [
            VerboseMove.from_engine(self._board, move)
            for move in self._playable_moves()
            if from_square is None or move.from_square == from_square.to_index()
        ]

    def apply_move(
        self,
        from_square: Square,
        to_square: Square,
        promotion: Optional[PieceType] = None,
    ) -> Optional[VerboseMove]:
        """
        Apply a move if it is legal, return its description (None if it is not legal).
        ---

        The promotion piece is only used to pick between the promotion variants of a pawn push (queen if not
        given). Requesting a promotion for a move that does not promote is not an error, it is simply ignored.
        """
        candidates = [
            move
            for move in self._playable_moves()
            if move.from_square == from_square.to_index()
            and move.to_square == to_square.to_index()
        ]
        if not candidates:
            return None

        wanted = PIECE_TO_ENGINE[promotion or PieceType.QUEEN]
        move = next(
            (m for m in candidates if m.promotion in (None, wanted)), candidates[0]
        )
        applied = VerboseMove.from_engine(self._board, move)
        self._board.push(move)
        return applied

    def _playable_moves(self) -> Iterator[chess.Move]:
        """
        python-chess legal moves, minus two-square pawn pushes that do not start from the pawn's second rank.
        ---

        Decks may put pawns on the back rank. Those pawns only get to step forward one square.
        """
        for move in self._board.legal_moves:
            from_rank = chess.square_rank(move.from_square)
            double_push = (
                self._board.piece_type_at(move.from_square) == chess.PAWN
                and abs(chess.square_rank(move.to_square) - from_rank) == 2
            )
            if double_push and from_rank != DOUBLE_PUSH_RANKS[self._board.turn]:
                continue
            yield move

    def undo_last_move(self) -> bool:
        if not self._board.move_stack:
            return False
        self._board.pop()
        return True

    # --- TERMINAL STATE DETECTION ---
    def is_check(self) -> bool:
        return self._board.is_check()

    def is_checkmate(self) -> bool:
        return self._board.is_checkmate()

    def is_stalemate(self) -> bool:
        return self._board.is_stalemate()

    def draw_reason(self) -> Optional[DrawReason]:
        if self._board.is_stalemate():
            return DrawReason.STALEMATE
        if self._board.is_insufficient_material():
            return DrawReason.INSUFFICIENT_MATERIAL
        if self._board.is_repetition(3):
            return DrawReason.THREEFOLD_REPETITION
        if self._board.is_fifty_moves():
            return DrawReason.FIFTY_MOVE_RULE
        return None

    def is_draw(self) -> bool:
        return self.draw_reason() is not None

    def is_game_over(self) -> bool:
        return self.is_checkmate() or self.is_draw()
