from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from src.api.models import (
    LegalMovesRequest,
    MoveRequest,
    PlacePieceRequest,
    RenameDeckRequest,
    StartGameRequest,
)
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Difficulty, GameMode, PieceType


@pytest.fixture
def mock_id() -> UUID:
    return uuid4()


# -- Validation - StartGameRequest --
def test_start_game_defaults() -> None:
    request = StartGameRequest(player_id="don't hate the player, hate the name.")
    assert request.color == Color.WHITE
    assert request.mode == GameMode.HUMAN_VS_BOT
    assert request.difficulty == Difficulty.NORMAL
    assert request.custom_fen is None
    assert not request.use_decks


def test_valid_fen() -> None:
    valid_fen = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
    request = StartGameRequest(player_id="player", custom_fen=valid_fen)
    assert request.custom_fen == valid_fen


@pytest.mark.parametrize(
    "invalid_fen",
    [
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",  # only 5 space-separated values
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1 extra",  # too many space-separated values
        "rnbqkbnr/pppppppp/8/8/8/8/RNBQKBNR w KQkq - 0 1",  # only 7 ranks
    ],
)
def test_invalid_fen(invalid_fen: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = StartGameRequest(player_id="player", custom_fen=invalid_fen)


def test_enum_values_from_strings() -> None:
    """Frontends send plain strings."""
    request = StartGameRequest.model_validate(
        {"player_id": "player", "color": "black", "mode": "human-vs-human", "difficulty": "hard"}
    )
    assert request.color == Color.BLACK
    assert request.mode == GameMode.HUMAN_VS_HUMAN
    assert request.difficulty == Difficulty.HARD


def test_unknown_difficulty() -> None:
    with pytest.raises(ValidationError):
        StartGameRequest.model_validate({"player_id": "player", "difficulty": "impossible"})


# -- Validation - MoveRequest --
def test_valid_square_names(mock_id: UUID) -> None:
    """Test that MoveRequest accepts correctly written squares in algebraic notation."""
    request = MoveRequest(game_id=mock_id, from_square="e2", to_square="e4")
    assert request.from_square == "e2"
    assert request.to_square == "e4"


@pytest.mark.parametrize(
    "square",
    [
        "nonsense",  # anything more than two characters.
        "11",  # First character is not a letter
        "aa",  # second character is not a number
        "i1",  # off the board
        "a9",
    ],
)
def test_invalid_from_square(mock_id: UUID, square: str) -> None:
    """Test that an exception is raised when using invalid square name."""
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, from_square=square, to_square="e2")


@pytest.mark.parametrize("square", ["nonsense", "11", "aa"])
def test_invalid_to_square(mock_id: UUID, square: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(game_id=mock_id, from_square="e2", to_square=square)


def test_invalid_legal_moves_square(mock_id: UUID) -> None:
    with pytest.raises(InvalidRequestError):
        _ = LegalMovesRequest(game_id=mock_id, square="z0")


# -- Validation - deck requests --
def test_place_piece_request(mock_id: UUID) -> None:
    request = PlacePieceRequest(
        player_id="player", deck_id=mock_id, square="d1", piece_type="stone-sentinel"
    )
    assert request.piece_type == PieceType.STONE_SENTINEL

    with pytest.raises(InvalidRequestError):
        PlacePieceRequest(player_id="player", deck_id=mock_id, square="d", piece_type="lion")

    with pytest.raises(ValidationError):
        PlacePieceRequest(player_id="player", deck_id=mock_id, square="d1", piece_type="wizard")


def test_rename_request(mock_id: UUID) -> None:
    request = RenameDeckRequest(player_id="player", deck_id=mock_id, name="  Stone wall ")
    assert request.name == "Stone wall"

    with pytest.raises(InvalidRequestError):
        RenameDeckRequest(player_id="player", deck_id=mock_id, name="   ")
