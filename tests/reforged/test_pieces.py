"""Unit tests for src/reforged/pieces.py"""

import pytest

from src.core.exceptions import UnknownPieceError
from src.core.shared_types import Color, PieceType
from src.reforged.pieces import PIECE_CATALOG, MovementRule, Piece, piece_spec


def test_every_piece_type_has_a_catalog_entry() -> None:
    assert set(PIECE_CATALOG) == set(PieceType)


@pytest.mark.parametrize(
    "piece_type, cost, mapped_type",
    [
        (PieceType.PAWN, 1, PieceType.PAWN),
        (PieceType.KNIGHT, 3, PieceType.KNIGHT),
        (PieceType.BISHOP, 3, PieceType.BISHOP),
        (PieceType.ROOK, 5, PieceType.ROOK),
        (PieceType.QUEEN, 8, PieceType.QUEEN),
        (PieceType.KING, 0, PieceType.KING),
        (PieceType.LION, 6, PieceType.QUEEN),
        (PieceType.FOOTMAN, 2, PieceType.QUEEN),
        (PieceType.DRAGON, 8, PieceType.QUEEN),
        (PieceType.STONEHURLER, 5, PieceType.ROOK),
        (PieceType.WAR_ELEPHANT, 4, PieceType.BISHOP),
        (PieceType.ARCANE_SAGE, 7, PieceType.QUEEN),
        (PieceType.BOWGUARD, 3, PieceType.PAWN),
        (PieceType.GALLEON, 5, PieceType.ROOK),
        (PieceType.COMMANDING_STEED, 4, PieceType.KNIGHT),
        (PieceType.STONE_SENTINEL, 7, PieceType.QUEEN),
    ],
)
def test_catalog_costs_and_mapping(
    piece_type: PieceType, cost: int, mapped_type: PieceType
) -> None:
    spec = piece_spec(piece_type)
    assert spec.cost == cost
    assert spec.mapped_type == mapped_type


def test_standard_pieces_use_standard_movement() -> None:
    for piece_type, spec in PIECE_CATALOG.items():
        if piece_type.is_standard:
            assert spec.mapped_type == piece_type
            assert spec.movement == MovementRule.STANDARD


def test_lookup_by_string() -> None:
    assert piece_spec("war-elephant").piece_type == PieceType.WAR_ELEPHANT


@pytest.mark.parametrize("symbol", ["wizard", "", "Lion"])
def test_unknown_symbol(symbol: str) -> None:
    with pytest.raises(UnknownPieceError):
        piece_spec(symbol)


@pytest.mark.parametrize(
    "piece, fen",
    [
        (Piece(PieceType.KING, Color.WHITE), "K"),
        (Piece(PieceType.PAWN, Color.BLACK), "p"),
        (Piece(PieceType.STONE_SENTINEL, Color.WHITE), "Q"),
        (Piece(PieceType.WAR_ELEPHANT, Color.BLACK), "b"),
        (Piece(PieceType.BOWGUARD, Color.WHITE), "P"),
        (Piece(PieceType.COMMANDING_STEED, Color.BLACK), "n"),
        (Piece(PieceType.STONEHURLER, Color.WHITE), "R"),
    ],
)
def test_fen_character_of_mapped_type(piece: Piece, fen: str) -> None:
    assert piece.to_fen() == fen


def test_is_custom() -> None:
    assert Piece(PieceType.LION, Color.WHITE).is_custom
    assert not Piece(PieceType.QUEEN, Color.WHITE).is_custom


def test_dict_conversion() -> None:
    piece = Piece(PieceType.ARCANE_SAGE, Color.BLACK)
    assert piece.to_dict() == {"type": "arcane-sage", "color": "black"}
    assert Piece.from_dict(piece.to_dict()) == piece


def test_from_dict_rejects_unknown_type() -> None:
    with pytest.raises(UnknownPieceError):
        Piece.from_dict({"type": "wizard", "color": "white"})
