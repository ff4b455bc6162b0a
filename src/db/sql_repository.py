"""Implementation of the repositories using SQLAlchemy"""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import DeckModel, PlayerModel
from src.db.schema import DBDeck, DBPlayer


class SQLDeckRepository:
    """Decks stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_deck(self, deck_id: UUID) -> DeckModel | None:
        """Get deck by ID, if record exists."""
        deck_db = self._fetch_deck(deck_id)
        if deck_db:
            return self._to_model(deck_db)
        return None

    def list_decks(self, owner_id: str, color: Optional[str] = None) -> list[DeckModel]:
        """All decks of a player (optionally only one color), oldest first."""
        query = select(DBDeck).where(DBDeck.owner_id == owner_id)
        if color is not None:
            query = query.where(DBDeck.color == color)
        query = query.order_by(DBDeck.created_at, DBDeck.name)
        return [self._to_model(deck_db) for deck_db in self.db.scalars(query)]

    def create_deck(self, deck: DeckModel) -> DeckModel:
        """Store a new deck (the deck carries its own ID)."""
        deck_db = DBDeck(
            id=deck.id,
            owner_id=deck.owner_id,
            name=deck.name,
            description=deck.description,
            color=deck.color,
            placement=deck.placement,
            is_main=deck.is_main,
            created_at=deck.created_at,
            last_modified=deck.last_modified,
        )
        self.db.add(deck_db)
        self.db.commit()
        self.db.refresh(deck_db)
        return self._to_model(deck_db)

    def update_deck(self, deck: DeckModel) -> DeckModel | None:
        """Overwrite an existing record."""
        deck_db = self._fetch_deck(deck.id)
        if not deck_db:
            return None
        deck_db.name = deck.name
        deck_db.description = deck.description
        # JSON column: assign a new dict so the change gets detected
        deck_db.placement = dict(deck.placement)
        deck_db.is_main = deck.is_main
        deck_db.last_modified = deck.last_modified
        self.db.commit()
        self.db.refresh(deck_db)
        return self._to_model(deck_db)

    def delete_deck(self, deck_id: UUID) -> DeckModel | None:
        """Remove a deck's record."""
        deck_db = self._fetch_deck(deck_id)
        if not deck_db:
            return None
        deck_model = self._to_model(deck_db)
        self.db.delete(deck_db)
        self.db.commit()
        return deck_model

    def _fetch_deck(self, deck_id: UUID) -> DBDeck | None:
        query = select(DBDeck).where(DBDeck.id == deck_id)
        return self.db.scalar(query)

    def _to_model(self, deck_db: DBDeck) -> DeckModel:
        """Convert SQLAlchemy model to data transfer model."""
        return DeckModel(
            id=deck_db.id,
            owner_id=deck_db.owner_id,
            name=deck_db.name,
            description=deck_db.description,
            color=deck_db.color,
            placement=dict(deck_db.placement),
            created_at=deck_db.created_at,
            last_modified=deck_db.last_modified,
            is_main=deck_db.is_main,
        )


class SQLPlayerRepository:
    """Players (wallet + experience) stored using SQL"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_player(self, player_id: str) -> PlayerModel | None:
        player_db = self.db.get(DBPlayer, player_id)
        if player_db:
            return self._to_model(player_db)
        return None

    def create_player(self, player: PlayerModel) -> PlayerModel:
        player_db = DBPlayer(
            id=player.player_id,
            display_name=player.display_name,
            coins=player.coins,
            experience=player.experience,
        )
        self.db.add(player_db)
        self.db.commit()
        self.db.refresh(player_db)
        return self._to_model(player_db)

    def add_coins(self, player_id: str, amount: int) -> PlayerModel | None:
        player_db = self.db.get(DBPlayer, player_id)
        if not player_db:
            return None
        player_db.coins += amount
        self.db.commit()
        self.db.refresh(player_db)
        return self._to_model(player_db)

    def _to_model(self, player_db: DBPlayer) -> PlayerModel:
        return PlayerModel(
            player_id=player_db.id,
            display_name=player_db.display_name,
            coins=player_db.coins,
            experience=player_db.experience,
        )
