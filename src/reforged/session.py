"""
The GameSession is the entrypoint into the domain layer for the service layer (or any UI).

It orchestrates one game: whose turn it is, legality under the army rules, the identity table, the bot's replies,
the end of the game and the one-time reward.

Pipeline for every move (player or bot):
1. rules engine generates the legal moves
2. movement filter keeps the ones the army pieces are allowed to make
3. rules engine applies the move (pawns always promote to a queen)
4. history, captured pieces and identity table get updated
5. end of game? -> settle the reward
6. bot's turn? -> schedule its reply
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Optional

from src.core.config import Settings, get_settings
from src.core.exceptions import InvalidFENError, InvalidSquareError
from src.core.shared_types import (
    Color,
    Difficulty,
    DrawReason,
    GameMode,
    PieceType,
    Status,
)
from src.reforged import identity
from src.reforged.bot import BotOpponent
from src.reforged.movement import filter_moves
from src.reforged.pieces import IdentityTable
from src.reforged.rules import RulesEngine, VerboseMove
from src.reforged.scheduling import ScheduledTask, Scheduler, TimerScheduler
from src.reforged.square import BOARD_DIMENSIONS, Square, as_square

logger = logging.getLogger(__name__)

# (amount, winner) -> None. winner is None for a draw
RewardCallback = Callable[[int, Optional[Color]], None]

DRAW_MESSAGES: dict[DrawReason, str] = {
    DrawReason.STALEMATE: "Draw by stalemate",
    DrawReason.THREEFOLD_REPETITION: "Draw by threefold repetition",
    DrawReason.INSUFFICIENT_MATERIAL: "Draw by insufficient material",
    DrawReason.FIFTY_MOVE_RULE: "Draw by fifty-move rule",
    DrawReason.NO_CUSTOM_MOVES: "Draw: no moves available under army rules",
}


@dataclass(frozen=True)
class HistoryEntry:
    """One applied half-move. Never changed after it has been recorded."""

    ply: int
    move_number: int
    color: Color
    san: str
    from_square: Square
    to_square: Square
    moved_piece: PieceType
    captured_piece: Optional[PieceType]
    promotion: Optional[PieceType]
    fen_after: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "ply": self.ply,
            "move_number": self.move_number,
            "color": self.color.value,
            "san": self.san,
            "from_square": self.from_square.to_algebraic(),
            "to_square": self.to_square.to_algebraic(),
            "moved_piece": self.moved_piece.value,
            "captured_piece": self.captured_piece.value if self.captured_piece else None,
            "promotion": self.promotion.value if self.promotion else None,
            "fen_after": self.fen_after,
        }


@dataclass(frozen=True)
class BoardSquare:
    square: Square
    type: PieceType
    color: Color


@dataclass(frozen=True)
class LegalMove:
    from_square: Square
    to_square: Square
    san: str


class GameSession:
    """One game. Owned by the caller: nothing in here is global."""

    def __init__(
        self,
        mode: GameMode = GameMode.HUMAN_VS_BOT,
        difficulty: Difficulty = Difficulty.NORMAL,
        bot: Optional[BotOpponent] = None,
        scheduler: Optional[Scheduler] = None,
        on_reward: Optional[RewardCallback] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        settings = settings or get_settings()
        self.mode = mode
        self.difficulty = difficulty
        self._bot = bot or BotOpponent()
        self._scheduler = scheduler or TimerScheduler()
        self._on_reward = on_reward
        self._bot_move_delay = settings.bot_move_delay
        self._win_reward = settings.win_reward
        self._consolation_reward = settings.consolation_reward
        self._strict_fen = settings.strict_fen

        # one writer at a time: scheduled bot moves may fire from another thread
        self._lock = threading.RLock()
        # bumped on every reset, so bot moves scheduled for an earlier game can recognise themselves
        self._generation = 0
        self._pending: Optional[ScheduledTask] = None

        self._engine = RulesEngine()
        self.identities: IdentityTable = {}
        self.player_color = Color.WHITE
        self.bot_color = Color.BLACK
        self.history: list[HistoryEntry] = []
        self.captured: dict[Color, list[PieceType]] = {Color.WHITE: [], Color.BLACK: []}
        self.resigned_by: Optional[Color] = None
        self.reward_granted = False
        self.bot_thinking = False
        self.reset(Color.WHITE)

    # --- LIFECYCLE ---
    def reset(
        self,
        player_color: Color = Color.WHITE,
        custom_fen: Optional[str] = None,
        custom_mapping: Optional[IdentityTable] = None,
    ) -> None:
        """
        Start a new game
        ----

        The custom FEN (and identity table) normally comes from composing two decks. A FEN the rules engine refuses
        means that composition is broken: log it loudly and start from the standard position instead
        (or raise, with strict_fen).
        """
        with self._lock:
            self._abandon_pending()

            engine = RulesEngine()
            identities = dict(custom_mapping or {})
            if custom_fen:
                try:
                    engine.load_position(custom_fen)
                except InvalidFENError:
                    if self._strict_fen:
                        raise
                    logger.error(
                        "Invalid custom FEN %r, falling back to the standard starting position",
                        custom_fen,
                    )
                    identities = {}

            self._engine = engine
            self.identities = identities
            self.player_color = player_color
            self.bot_color = player_color.opponent
            self.history = []
            self.captured = {Color.WHITE: [], Color.BLACK: []}
            self.resigned_by = None
            self.reward_granted = False
            self.bot_thinking = False
            logger.info(
                "New %s game, player plays %s, %d army pieces on the board",
                self.mode,
                player_color,
                len(identities),
            )

            # the bot opens when it holds White
            if self.mode == GameMode.HUMAN_VS_BOT and self.turn == self.bot_color:
                self._schedule_bot_move()

    def close(self) -> None:
        """The session is being thrown away: make sure no scheduled bot move still fires."""
        with self._lock:
            self._abandon_pending()

    def set_mode(self, mode: GameMode) -> None:
        with self._lock:
            self.mode = mode
            if mode == GameMode.HUMAN_VS_BOT:
                self.reset(Color.WHITE)

    def set_difficulty(self, difficulty: Difficulty) -> None:
        with self._lock:
            self.difficulty = difficulty

    # --- QUERIES ---
    # all of them take the lock: a bot move may be half applied on the scheduler's thread
    @property
    def fen(self) -> str:
        with self._lock:
            return self._engine.current_fen()

    @property
    def turn(self) -> Color:
        with self._lock:
            return self._engine.turn_color()

    @property
    def is_player_turn(self) -> bool:
        with self._lock:
            return self.mode == GameMode.HUMAN_VS_HUMAN or self.turn == self.player_color

    @property
    def status(self) -> Status:
        with self._lock:
            if self.resigned_by is not None:
                return Status.RESIGNED
            if self._engine.is_checkmate():
                return Status.CHECKMATE
            if self.draw_reason is not None:
                return Status.DRAW
            return Status.IN_PROGRESS

    @property
    def draw_reason(self) -> Optional[DrawReason]:
        with self._lock:
            if self._engine.is_checkmate():
                return None
            reason = self._engine.draw_reason()
            if reason is not None:
                return reason
            # not mate, not stalemate: the rules engine has moves, but maybe the army rules forbid all of them
            if not self._allowed_moves():
                return DrawReason.NO_CUSTOM_MOVES
            return None

    @property
    def winner(self) -> Optional[Color]:
        """The opponent of whoever resigned, or (checkmate) the side NOT to move. None otherwise."""
        with self._lock:
            if self.resigned_by is not None:
                return self.resigned_by.opponent
            if self._engine.is_checkmate():
                return self.turn.opponent
            return None

    def is_game_over(self) -> bool:
        return self.status != Status.IN_PROGRESS

    def board(self) -> list[list[Optional[BoardSquare]]]:
        """8x8 grid, rank 8 first, a-file first. Army pieces show up as what they really are."""
        with self._lock:
            grid: list[list[Optional[BoardSquare]]] = []
            for rank in range(BOARD_DIMENSIONS[1], 0, -1):
                row: list[Optional[BoardSquare]] = []
                for file in range(1, BOARD_DIMENSIONS[0] + 1):
                    square = Square(file, rank)
                    occupant = self._engine.piece_at(square)
                    if occupant is None:
                        row.append(None)
                        continue
                    engine_type, color = occupant
                    piece_type = identity.actual_type(self.identities, square, engine_type)
                    row.append(BoardSquare(square, piece_type, color))
                grid.append(row)
            return grid

    def legal_moves(self, from_square: Square | str) -> list[LegalMove]:
        """Moves the piece on `from_square` may make under the army rules. Promotions are always to a queen."""
        try:
            origin = as_square(from_square)
        except InvalidSquareError:
            return []
        with self._lock:
            return [
                LegalMove(move.from_square, move.to_square, move.san)
                for move in self._allowed_moves(origin)
                if move.promotion in (None, PieceType.QUEEN)
            ]

    def get_game_status(self) -> str:
        with self._lock:
            if self.resigned_by is not None:
                winner = self.resigned_by.opponent
                return f"{self.resigned_by.value.capitalize()} resigned. {winner.value.capitalize()} wins!"
            if self._engine.is_checkmate():
                return f"Checkmate! {self.turn.opponent.value.capitalize()} wins!"
            reason = self.draw_reason
            if reason is not None:
                return DRAW_MESSAGES.get(reason, "Draw")
            if self._engine.is_check():
                return f"{self.turn.value.capitalize()} is in check"
            if self.bot_thinking:
                return "Bot is thinking..."
            return f"{self.turn.value.capitalize()} to move"

    # --- ACTIONS ---
    def make_move(self, from_square: Square | str, to_square: Square | str) -> bool:
        """
        Attempt a move for the side to move. False (and nothing changes) when the move is not allowed.
        ---

        Rejected when: the game is over or resigned, it is the bot's turn (human-vs-bot), the squares make no
        sense, or the move is not legal under the standard rules + army rules.
        """
        try:
            origin, target = as_square(from_square), as_square(to_square)
        except InvalidSquareError:
            logger.debug("Rejected move %s-%s: not a square", from_square, to_square)
            return False

        with self._lock:
            if self.resigned_by is not None or self.is_game_over():
                return False
            if self.mode == GameMode.HUMAN_VS_BOT and not self.is_player_turn:
                logger.debug("Rejected move %s-%s: not the player's turn", origin, target)
                return False

            if not any(move.to_square == target for move in self._allowed_moves(origin)):
                logger.debug("Rejected move %s-%s: not allowed", origin, target)
                return False

            if self._apply(origin, target, PieceType.QUEEN) is None:
                return False

            if (
                self.mode == GameMode.HUMAN_VS_BOT
                and self.turn == self.bot_color
                and not self.is_game_over()
            ):
                self._schedule_bot_move()
            return True

    def make_bot_move(self) -> bool:
        """
        Let the bot play one move. No-op (False) when the game is over, it is not the bot's turn, or the bot has
        nothing the army rules allow.
        ---

        The bot only knows the standard rules. If its suggestion is not allowed, the first allowed move is played
        instead.
        """
        with self._lock:
            try:
                if self.is_game_over() or self.turn != self.bot_color:
                    return False

                allowed = self._allowed_moves()
                if not allowed:
                    logger.info("Bot has no move allowed by the army rules")
                    return False

                suggestion = self._bot.select_move(self.fen, self.difficulty)
                chosen = next(
                    (
                        move
                        for move in allowed
                        if suggestion is not None
                        and move.from_square == suggestion.from_square
                        and move.to_square == suggestion.to_square
                    ),
                    None,
                )
                if chosen is None or suggestion is None:
                    chosen = allowed[0]
                    promotion = chosen.promotion
                    logger.warning(
                        "Bot suggestion %s is not allowed by the army rules, playing %s instead",
                        suggestion.to_uci() if suggestion else None,
                        chosen.to_uci(),
                    )
                else:
                    promotion = suggestion.promotion

                applied = self._apply(chosen.from_square, chosen.to_square, promotion)
                if applied is not None:
                    logger.info("Bot played %s", applied.san)
                return applied is not None
            finally:
                self.bot_thinking = False

    def resign(self, by_color: Color) -> bool:
        with self._lock:
            if self.resigned_by is not None or self.is_game_over():
                return False
            self.resigned_by = by_color
            self._abandon_pending()
            self.bot_thinking = False
            logger.info("%s resigned", by_color)
            self.reward_if_game_over()
            return True

    def reward_if_game_over(self) -> Optional[int]:
        """
        Hand out the end-of-game reward to the human player: once per game, whatever calls this.
        Returns the amount granted (None when nothing was granted).
        """
        with self._lock:
            if self.reward_granted or not self.is_game_over():
                return None
            winner = self.winner
            amount = (
                self._win_reward
                if winner == self.player_color
                else self._consolation_reward
            )
            self.reward_granted = True
            logger.info("Game over (%s), rewarding the player %d coins", self.status, amount)
            if self._on_reward is not None:
                self._on_reward(amount, winner)
            return amount

    # -- PRIVATE HELPERS ---
    def _allowed_moves(self, from_square: Optional[Square] = None) -> list[VerboseMove]:
        return filter_moves(self._engine.legal_moves(from_square), self.identities)

    def _apply(
        self,
        from_square: Square,
        to_square: Square,
        promotion: Optional[PieceType],
    ) -> Optional[VerboseMove]:
        """Apply an already validated move and update everything that depends on it."""
        move_number = self._engine.fullmove_number()
        applied = self._engine.apply_move(from_square, to_square, promotion)
        if applied is None:
            return None

        moved_piece = identity.actual_type(self.identities, applied.from_square, applied.piece)
        captured_piece: Optional[PieceType] = None
        if applied.is_capture and applied.captured is not None:
            captured_square = (
                identity.en_passant_capture_square(applied)
                if applied.is_en_passant
                else applied.to_square
            )
            captured_piece = identity.actual_type(
                self.identities, captured_square, applied.captured
            )
            self.captured[applied.color].append(captured_piece)

        self.identities = identity.apply_move(self.identities, applied)
        self.history.append(
            HistoryEntry(
                ply=len(self.history) + 1,
                move_number=move_number,
                color=applied.color,
                san=applied.san,
                from_square=applied.from_square,
                to_square=applied.to_square,
                moved_piece=moved_piece,
                captured_piece=captured_piece,
                promotion=applied.promotion,
                fen_after=self.fen,
            )
        )
        self.reward_if_game_over()
        return applied

    def _schedule_bot_move(self) -> None:
        self._cancel_pending()
        self.bot_thinking = True
        generation = self._generation
        self._pending = self._scheduler.schedule(
            self._bot_move_delay, lambda: self._run_scheduled_bot_move(generation)
        )

    def _run_scheduled_bot_move(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Dropping bot move scheduled for an earlier game")
                return
            self._pending = None
            self.make_bot_move()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _abandon_pending(self) -> None:
        self._generation += 1
        self._cancel_pending()
