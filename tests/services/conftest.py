"""Mock repositories + services wired to them (shared by the service tests)."""

from typing import Generator, Optional
from uuid import UUID

import pytest

from src.core.config import Settings
from src.core.models import DeckModel, PlayerModel
from src.reforged.scheduling import DeferredScheduler
from src.services.deck_service import DeckService
from src.services.game_service import GameService


class MockDeckRepository:
    """Mock the DeckRepository using a dictionary of deck models."""

    def __init__(self) -> None:
        self._decks: dict[UUID, DeckModel] = {}

    def get_deck(self, deck_id: UUID) -> DeckModel | None:
        return self._decks.get(deck_id)

    def list_decks(self, owner_id: str, color: Optional[str] = None) -> list[DeckModel]:
        decks = [
            deck
            for deck in self._decks.values()
            if deck.owner_id == owner_id and (color is None or deck.color == color)
        ]
        return sorted(decks, key=lambda deck: (deck.created_at, deck.name))

    def create_deck(self, deck: DeckModel) -> DeckModel:
        self._decks[deck.id] = deck
        return deck

    def update_deck(self, deck: DeckModel) -> DeckModel | None:
        if deck.id not in self._decks:
            return None
        self._decks[deck.id] = deck
        return deck

    def delete_deck(self, deck_id: UUID) -> DeckModel | None:
        return self._decks.pop(deck_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._decks.clear()


class MockPlayerRepository:
    def __init__(self) -> None:
        self._players: dict[str, PlayerModel] = {}

    def get_player(self, player_id: str) -> PlayerModel | None:
        return self._players.get(player_id)

    def create_player(self, player: PlayerModel) -> PlayerModel:
        self._players[player.player_id] = player
        return player

    def add_coins(self, player_id: str, amount: int) -> PlayerModel | None:
        player = self._players.get(player_id)
        if player is None:
            return None
        player.coins += amount
        return player

    def clear(self) -> None:
        self._players.clear()


@pytest.fixture
def deck_repository() -> Generator[MockDeckRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockDeckRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def player_repository() -> Generator[MockPlayerRepository, None, None]:
    repo = MockPlayerRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def deck_service(
    deck_repository: MockDeckRepository,
    player_repository: MockPlayerRepository,
    settings: Settings,
) -> DeckService:
    return DeckService(deck_repository, player_repository, settings)


@pytest.fixture
def game_service(
    deck_service: DeckService,
    player_repository: MockPlayerRepository,
    settings: Settings,
    scheduler: DeferredScheduler,
) -> GameService:
    return GameService(deck_service, player_repository, settings, scheduler=scheduler)
