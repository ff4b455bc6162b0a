"""
Simple bot opponent.

Works on a scratch python-chess board built from the FEN, so it only knows the standard rules: whatever it suggests
still has to pass the army movement filter (the game session takes care of that).

* easy: random legal move
* normal: best move after one ply, judged by the evaluation below
* hard: negamax + alpha-beta to a fixed depth, same evaluation
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Optional, Self

import chess

from src.core.exceptions import InvalidFENError
from src.core.shared_types import Difficulty, PieceType
from src.reforged.rules import ENGINE_TO_PIECE, PIECE_TO_ENGINE
from src.reforged.square import Square

logger = logging.getLogger(__name__)

PIECE_VALUES: dict[chess.PieceType, int] = {
    chess.PAWN: 1,
    chess.KNIGHT: 3,
    chess.BISHOP: 3,
    chess.ROOK: 5,
    chess.QUEEN: 9,
    chess.KING: 0,
}
CENTER_SQUARES: frozenset[chess.Square] = frozenset({chess.D4, chess.D5, chess.E4, chess.E5})
CENTER_BONUS = 0.1
# keeps the bot from replaying the exact same game every time
JITTER = 0.05
MATE_SCORE = 10_000.0
DEFAULT_SEARCH_DEPTH = 3


@dataclass(frozen=True)
class BotMove:
    from_square: Square
    to_square: Square
    promotion: Optional[PieceType] = None

    @classmethod
    def from_engine(cls, move: chess.Move) -> Self:
        return cls(
            from_square=Square.from_index(move.from_square),
            to_square=Square.from_index(move.to_square),
            promotion=ENGINE_TO_PIECE[move.promotion] if move.promotion else None,
        )

    def to_uci(self) -> str:
        promotion = chess.piece_symbol(PIECE_TO_ENGINE[self.promotion]) if self.promotion else ""
        return f"{self.from_square}{self.to_square}{promotion}"


class BotOpponent:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        search_depth: int = DEFAULT_SEARCH_DEPTH,
    ) -> None:
        self._rng = rng or random.Random()
        self.search_depth = search_depth

    def select_move(self, fen: str, difficulty: Difficulty) -> Optional[BotMove]:
        """Suggest a move for the side to move. None when there is no legal move at all (mate / stalemate)."""
        try:
            board = chess.Board(fen)
        except ValueError as e:
            raise InvalidFENError(f"Bot cannot read position: {fen!r}") from e

        moves = list(board.legal_moves)
        if not moves:
            return None

        if difficulty == Difficulty.EASY:
            choice = self._rng.choice(moves)
        elif difficulty == Difficulty.NORMAL:
            choice = self._best_after_one_ply(board, moves)
        else:
            choice = self._best_by_search(board, moves)

        logger.debug("Bot (%s) suggests %s", difficulty, choice.uci())
        return BotMove.from_engine(choice)

    # --- EVALUATION ---
    def evaluate(self, board: chess.Board, color: chess.Color) -> float:
        """
        Score of the position for `color` (positive is good for `color`)
        ----

        material (king = 0) + a small bonus per piece on the four center squares + a little noise.
        Checkmate outweighs any material, draws are neutral.
        """
        if board.is_checkmate():
            return -MATE_SCORE if board.turn == color else MATE_SCORE
        if board.is_stalemate() or board.is_insufficient_material():
            return 0.0

        score = 0.0
        for square, piece in board.piece_map().items():
            value = PIECE_VALUES[piece.piece_type]
            if square in CENTER_SQUARES:
                value += CENTER_BONUS
            score += value if piece.color == color else -value
        return score + self._rng.uniform(-JITTER, JITTER)

    # --- MOVE SELECTION ---
    def _best_after_one_ply(self, board: chess.Board, moves: list[chess.Move]) -> chess.Move:
        color = board.turn
        best_move, best_score = moves[0], -math.inf
        for move in moves:
            board.push(move)
            score = self.evaluate(board, color)
            board.pop()
            if score > best_score:
                best_move, best_score = move, score
        return best_move

    def _best_by_search(self, board: chess.Board, moves: list[chess.Move]) -> chess.Move:
        alpha, beta = -math.inf, math.inf
        best_move, best_score = moves[0], -math.inf
        for move in self._ordered(board, moves):
            board.push(move)
            score = -self._negamax(board, self.search_depth - 1, -beta, -alpha)
            board.pop()
            if score > best_score:
                best_move, best_score = move, score
            alpha = max(alpha, score)
        return best_move

    def _negamax(self, board: chess.Board, depth: int, alpha: float, beta: float) -> float:
        """Score from the point of view of the side to move on `board`."""
        if board.is_checkmate():
            # prefer the quicker mate (and the slower defeat)
            return -(MATE_SCORE + depth)
        if depth <= 0 or board.is_game_over():
            return self.evaluate(board, board.turn)

        best = -math.inf
        for move in self._ordered(board, list(board.legal_moves)):
            board.push(move)
            score = -self._negamax(board, depth - 1, -beta, -alpha)
            board.pop()
            best = max(best, score)
            alpha = max(alpha, score)
            if alpha >= beta:
                break
        return best

    def _ordered(self, board: chess.Board, moves: list[chess.Move]) -> list[chess.Move]:
        """Captures first: alpha-beta cuts off more when good moves come early"""
        return sorted(moves, key=lambda move: not board.is_capture(move))
