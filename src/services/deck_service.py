"""Orchestration of the deck editor: API requests -> Deck domain objects -> repositories (and back)."""

import logging
from typing import Optional
from uuid import UUID

from src.api.models import (
    CreateDeckRequest,
    DeckRequest,
    DeckResponse,
    ListDecksRequest,
    PlacePieceRequest,
    RemovePieceRequest,
    RenameDeckRequest,
)
from src.core.config import Settings, get_settings
from src.core.exceptions import RepositoryError
from src.core.models import PlayerModel
from src.core.shared_types import Color
from src.db.repository import DeckRepository, PlayerRepository
from src.reforged.deck import DECK_TEMPLATES, Deck, budget_for_level, default_decks
from src.reforged.progression import level_for_experience
from src.reforged.square import Square

logger = logging.getLogger(__name__)


class DeckService:
    """Orchestration of layers for the deck editor."""

    def __init__(
        self,
        deck_repository: DeckRepository,
        player_repository: PlayerRepository,
        settings: Optional[Settings] = None,
    ) -> None:
        self.decks = deck_repository
        self.players = player_repository
        self.settings = settings or get_settings()

    # -- API routes logic ---
    def list_decks(self, request: ListDecksRequest) -> list[DeckResponse]:
        """
        All decks of a player.
        ----
        A player who never had a deck of some color gets the template decks for it on first access.
        """
        colors = [request.color] if request.color else list(Color)
        budget = self.budget_for(request.player_id)
        responses = []
        for color in colors:
            decks = self._decks_of(request.player_id, color)
            responses.extend(self._create_deck_response(deck, budget) for deck in decks)
        return responses

    def create_deck(self, request: CreateDeckRequest) -> DeckResponse:
        """New deck: empty, or a copy of one of the templates of that color."""
        if request.template_name is None:
            deck = Deck.empty(request.color, request.name, owner_id=request.player_id)
        else:
            template = next(
                (
                    template
                    for template in DECK_TEMPLATES[request.color]
                    if template.name == request.template_name
                ),
                None,
            )
            if template is None:
                raise RepositoryError(
                    f"No {request.color} template named {request.template_name!r}."
                )
            deck = Deck.from_template(template, owner_id=request.player_id)
            if request.name:
                deck.name = request.name

        # the very first deck of a color is the main one
        if not self.decks.list_decks(request.player_id, request.color.value):
            deck.is_main = True

        self.decks.create_deck(deck.to_model())
        logger.info("Player %s created deck %r (%s)", request.player_id, deck.name, deck.id)
        return self._create_deck_response(deck, self.budget_for(request.player_id))

    def place_piece(self, request: PlacePieceRequest) -> DeckResponse:
        """Put a piece on a square of the deck, within the player's current budget."""
        deck = self._fetch_deck(request.deck_id, request.player_id)
        budget = self.budget_for(request.player_id)

        # raises DeckValidationError, nothing gets stored then
        deck.place(Square.from_algebraic(request.square), request.piece_type, budget)
        self.decks.update_deck(deck.to_model())
        return self._create_deck_response(deck, budget)

    def remove_piece(self, request: RemovePieceRequest) -> DeckResponse:
        deck = self._fetch_deck(request.deck_id, request.player_id)
        if deck.remove(Square.from_algebraic(request.square)) is not None:
            self.decks.update_deck(deck.to_model())
        return self._create_deck_response(deck, self.budget_for(request.player_id))

    def rename_deck(self, request: RenameDeckRequest) -> DeckResponse:
        deck = self._fetch_deck(request.deck_id, request.player_id)
        deck.rename(request.name, request.description)
        self.decks.update_deck(deck.to_model())
        return self._create_deck_response(deck, self.budget_for(request.player_id))

    def set_main_deck(self, request: DeckRequest) -> DeckResponse:
        """Mark a deck as the one played by default. Only one main deck per color."""
        deck = self._fetch_deck(request.deck_id, request.player_id)
        for other in self._decks_of(request.player_id, deck.color):
            if other.is_main and other.id != deck.id:
                other.is_main = False
                self.decks.update_deck(other.to_model())
        deck.is_main = True
        self.decks.update_deck(deck.to_model())
        logger.info("Player %s plays %s with deck %s", request.player_id, deck.color, deck.id)
        return self._create_deck_response(deck, self.budget_for(request.player_id))

    def delete_deck(self, request: DeckRequest) -> None:
        """
        Remove a deck.
        ----
        A player always keeps at least one deck of each color, and always a main one.
        """
        deck = self._fetch_deck(request.deck_id, request.player_id)
        self.decks.delete_deck(deck.id)
        logger.info("Player %s deleted deck %s", request.player_id, deck.id)

        remaining = [
            Deck.from_model(model)
            for model in self.decks.list_decks(request.player_id, deck.color.value)
        ]
        if not remaining:
            replacement = Deck.empty(deck.color, owner_id=request.player_id)
            replacement.is_main = True
            self.decks.create_deck(replacement.to_model())
            return
        if deck.is_main and not any(other.is_main for other in remaining):
            remaining[0].is_main = True
            self.decks.update_deck(remaining[0].to_model())

    def validate_deck(self, request: DeckRequest) -> DeckResponse:
        deck = self._fetch_deck(request.deck_id, request.player_id)
        return self._create_deck_response(deck, self.budget_for(request.player_id))

    # -- Used by the game service ---
    def main_deck(self, player_id: str, color: Color) -> Deck:
        decks = self._decks_of(player_id, color)
        return next((deck for deck in decks if deck.is_main), decks[0])

    def get_deck(self, deck_id: UUID) -> Deck:
        deck_model = self.decks.get_deck(deck_id)
        if deck_model is None:
            raise RepositoryError(f"Deck with {deck_id=} not found.")
        return Deck.from_model(deck_model)

    def budget_for(self, player_id: str) -> int:
        player = self.get_player(player_id)
        level = level_for_experience(player.experience)
        return budget_for_level(level, base=self.settings.base_budget)

    def get_player(self, player_id: str) -> PlayerModel:
        """Players are registered on first contact."""
        player = self.players.get_player(player_id)
        if player is None:
            player = self.players.create_player(PlayerModel(player_id=player_id))
            logger.info("Registered new player %s", player_id)
        return player

    # -- Internal helpers --
    def _decks_of(self, player_id: str, color: Color) -> list[Deck]:
        stored = self.decks.list_decks(player_id, color.value)
        if stored:
            return [Deck.from_model(model) for model in stored]

        decks = default_decks(color, owner_id=player_id)
        decks[0].is_main = True
        for deck in decks:
            self.decks.create_deck(deck.to_model())
        logger.info("Created %d %s template decks for player %s", len(decks), color, player_id)
        return decks

    def _fetch_deck(self, deck_id: UUID, player_id: str) -> Deck:
        """Attempt to find the deck in the repository and raise error if it fails (or if it is someone else's)."""
        deck = self.get_deck(deck_id)
        if deck.owner_id != player_id:
            raise RepositoryError(f"Deck with {deck_id=} does not belong to {player_id!r}.")
        return deck

    def _create_deck_response(self, deck: Deck, budget: int) -> DeckResponse:
        validation = deck.validate(budget)
        model = deck.to_model()
        return DeckResponse(
            deck_id=deck.id,
            name=deck.name,
            description=deck.description,
            color=deck.color,
            placement=model.placement,
            is_main=deck.is_main,
            total_cost=validation.total_cost,
            budget=budget,
            is_valid=validation.ok,
            errors=validation.errors,
        )
