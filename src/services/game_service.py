"""Orchestration of running games: API requests -> GameSession (and back)."""

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID, uuid4

from src.api.models import (
    BoardSquareResponse,
    GameStateResponse,
    GetGameRequest,
    HistoryEntryResponse,
    LegalMoveResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    ResignRequest,
    StartGameRequest,
)
from src.core.config import Settings, get_settings
from src.core.exceptions import DeckValidationError, GameStateError
from src.core.shared_types import Color
from src.db.repository import PlayerRepository
from src.reforged.bot import BotOpponent
from src.reforged.composition import compose, identities_to_dict
from src.reforged.deck import DECK_TEMPLATES, Deck
from src.reforged.pieces import IdentityTable
from src.reforged.scheduling import DeferredScheduler
from src.reforged.session import GameSession
from src.services.deck_service import DeckService

logger = logging.getLogger(__name__)


@dataclass
class ActiveGame:
    player_id: str
    session: GameSession


class GameService:
    """
    Orchestration of layers for games against the bot (or hot-seat games).
    ----
    Games only live in memory. Bot replies are collected by a DeferredScheduler and played at the start of the next
    request, so sessions and the database are only ever touched from the caller's thread.
    """

    def __init__(
        self,
        deck_service: DeckService,
        player_repository: PlayerRepository,
        settings: Optional[Settings] = None,
        bot: Optional[BotOpponent] = None,
        scheduler: Optional[DeferredScheduler] = None,
    ) -> None:
        self.deck_service = deck_service
        self.players = player_repository
        self.settings = settings or get_settings()
        self.bot = bot or BotOpponent()
        self.scheduler = scheduler or DeferredScheduler()
        self._games: dict[UUID, ActiveGame] = {}

    # -- API routes logic ---
    def start_game(self, request: StartGameRequest) -> GameStateResponse:
        self.scheduler.run_due()
        # make sure the wallet exists before any reward can be credited
        self.deck_service.get_player(request.player_id)

        custom_fen: Optional[str] = None
        identities: Optional[IdentityTable] = None
        if request.custom_fen is not None:
            custom_fen = request.custom_fen
        elif request.use_decks or request.deck_id or request.opponent_deck_id:
            custom_fen, identities = self._compose_from_decks(request)

        game_id = uuid4()
        session = GameSession(
            mode=request.mode,
            difficulty=request.difficulty,
            bot=self.bot,
            scheduler=self.scheduler,
            on_reward=self._reward_callback(request.player_id),
            settings=self.settings,
        )
        session.reset(request.color, custom_fen, identities)
        self._games[game_id] = ActiveGame(request.player_id, session)
        logger.info("Game %s started for player %s", game_id, request.player_id)
        return self._create_state_response(game_id)

    def get_state(self, request: GetGameRequest) -> GameStateResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend, which is also what lets a pending bot reply get played.
        """
        self.scheduler.run_due()
        return self._create_state_response(request.game_id)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        self.scheduler.run_due()
        session = self._fetch_game(request.game_id).session
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            legal_moves=[
                LegalMoveResponse(
                    from_square=move.from_square.to_algebraic(),
                    to_square=move.to_square.to_algebraic(),
                    san=move.san,
                )
                for move in session.legal_moves(request.square)
            ],
        )

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. A refused move is not an error: the response says so and the state is unchanged."""
        self.scheduler.run_due()
        session = self._fetch_game(request.game_id).session
        accepted = session.make_move(request.from_square, request.to_square)
        return MoveResponse(
            accepted=accepted, state=self._create_state_response(request.game_id)
        )

    def resign(self, request: ResignRequest) -> GameStateResponse:
        self.scheduler.run_due()
        session = self._fetch_game(request.game_id).session
        if not session.resign(request.color):
            raise GameStateError(f"Game {request.game_id} is already over.")
        return self._create_state_response(request.game_id)

    def end_game(self, request: GetGameRequest) -> None:
        """Forget the game. A bot reply still pending for it never gets played."""
        game = self._games.pop(request.game_id, None)
        if game is None:
            raise GameStateError(f"Game with game_id={request.game_id} not found.")
        game.session.close()
        logger.info("Game %s ended", request.game_id)

    # -- Internal helpers --
    def _compose_from_decks(self, request: StartGameRequest) -> tuple[str, IdentityTable]:
        """
        Player's deck (given, else their main deck of that color) against the opponent's deck (given, else the classic
        set-up). Both have to be playable.
        """
        opponent_color = request.color.opponent
        player_deck = (
            self.deck_service.get_deck(request.deck_id)
            if request.deck_id
            else self.deck_service.main_deck(request.player_id, request.color)
        )
        opponent_deck = (
            self.deck_service.get_deck(request.opponent_deck_id)
            if request.opponent_deck_id
            else Deck.from_template(DECK_TEMPLATES[opponent_color][0])
        )

        for deck, color in ((player_deck, request.color), (opponent_deck, opponent_color)):
            if deck.color != color:
                raise DeckValidationError(
                    f"Deck {deck.name!r} is a {deck.color} deck, cannot play it as {color}."
                )
            budget = (
                self.deck_service.budget_for(deck.owner_id)
                if deck.owner_id
                else self.settings.base_budget
            )
            validation = deck.validate(budget)
            if not validation.ok:
                raise DeckValidationError(
                    f"Deck {deck.name!r} cannot be played: {' '.join(validation.errors)}"
                )

        decks = {request.color: player_deck, opponent_color: opponent_deck}
        return compose(decks[Color.WHITE], decks[Color.BLACK])

    def _reward_callback(self, player_id: str):
        def credit(amount: int, winner: Optional[Color]) -> None:
            self.players.add_coins(player_id, amount)
            logger.info(
                "Credited %d coins to player %s (winner: %s)",
                amount,
                player_id,
                winner or "none",
            )

        return credit

    def _fetch_game(self, game_id: UUID) -> ActiveGame:
        """Attempt to find the game and raise error if it fails."""
        game = self._games.get(game_id)
        if game is None:
            raise GameStateError(f"Game with {game_id=} not found.")
        return game

    def _create_state_response(self, game_id: UUID) -> GameStateResponse:
        session = self._fetch_game(game_id).session
        return GameStateResponse(
            game_id=game_id,
            fen=session.fen,
            turn=session.turn,
            mode=session.mode,
            difficulty=session.difficulty,
            player_color=session.player_color,
            status=session.status,
            status_text=session.get_game_status(),
            winner=session.winner,
            draw_reason=session.draw_reason,
            bot_thinking=session.bot_thinking,
            reward_granted=session.reward_granted,
            board=[
                [
                    BoardSquareResponse(
                        square=cell.square.to_algebraic(),
                        type=cell.type,
                        color=cell.color,
                    )
                    if cell is not None
                    else None
                    for cell in row
                ]
                for row in session.board()
            ],
            identities=identities_to_dict(session.identities),
            history=[
                HistoryEntryResponse.model_validate(entry.to_dict())
                for entry in session.history
            ],
            captured={
                color: list(pieces) for color, pieces in session.captured.items()
            },
        )
