"""Wiring: settings -> logging -> database -> repositories -> services."""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from src.core.config import Settings, get_settings
from src.core.logs import configure_logging
from src.db.database import build_session_factory
from src.db.sql_repository import SQLDeckRepository, SQLPlayerRepository
from src.services.deck_service import DeckService
from src.services.game_service import GameService

logger = logging.getLogger(__name__)


@dataclass
class Services:
    deck_service: DeckService
    game_service: GameService
    db: Session

    def close(self) -> None:
        self.db.close()


def build_services(settings: Optional[Settings] = None) -> Services:
    """Everything a frontend (web router, CLI, ...) needs, sharing one database session."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    session_factory = build_session_factory(settings.database_url)
    db = session_factory()
    players = SQLPlayerRepository(db)
    deck_service = DeckService(SQLDeckRepository(db), players, settings)
    game_service = GameService(deck_service, players, settings)
    logger.info("Services ready (database: %s)", settings.database_url)
    return Services(deck_service, game_service, db)
