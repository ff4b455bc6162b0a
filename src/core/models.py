"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

# Type aliases to make DeckModel easier to read
SquareName = str
PieceData = dict[str, str]  # {"type": "lion", "color": "white"}


@dataclass
class DeckModel:
    """Transport-safe (JSON friendly) representation of an army deck."""

    id: UUID
    owner_id: str
    name: str
    description: str
    color: str
    placement: dict[SquareName, PieceData]
    created_at: datetime
    last_modified: datetime
    is_main: bool = False


@dataclass
class PlayerModel:
    """Wallet + progression of a single player."""

    player_id: str
    display_name: str = ""
    coins: int = 0
    experience: int = 0
