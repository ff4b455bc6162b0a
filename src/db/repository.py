"""Protocol repositories (can implement later for another backend than SQL Alchemy)"""

from typing import Optional, Protocol
from uuid import UUID

from src.core.models import DeckModel, PlayerModel


class DeckRepository(Protocol):
    """Persistence of army decks"""

    def get_deck(self, deck_id: UUID) -> DeckModel | None:
        """Get deck by ID, if record exists."""
        ...

    def list_decks(self, owner_id: str, color: Optional[str] = None) -> list[DeckModel]:
        """All decks of a player (optionally only one color), oldest first."""
        ...

    def create_deck(self, deck: DeckModel) -> DeckModel:
        """Store a new deck (the deck carries its own ID)."""
        ...

    def update_deck(self, deck: DeckModel) -> DeckModel | None:
        """Overwrite an existing record."""
        ...

    def delete_deck(self, deck_id: UUID) -> DeckModel | None:
        """Remove a deck's record."""
        ...


class PlayerRepository(Protocol):
    """Persistence of wallets / progression"""

    def get_player(self, player_id: str) -> PlayerModel | None:
        """Get player by ID, if record exists."""
        ...

    def create_player(self, player: PlayerModel) -> PlayerModel:
        """Store a new player."""
        ...

    def add_coins(self, player_id: str, amount: int) -> PlayerModel | None:
        """Credit (or debit, negative amount) a player's wallet."""
        ...
