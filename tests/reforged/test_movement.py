"""Unit tests for src/reforged/movement.py"""

from src.core.shared_types import Color, PieceType
from src.reforged.movement import distance, filter_moves, is_allowed
from src.reforged.pieces import IdentityTable, Piece
from src.reforged.rules import RulesEngine
from src.reforged.square import Square


def _destinations(fen: str, square: str, identities: IdentityTable) -> set[str]:
    """Where may the piece on `square` go, once the army rules had their say?"""
    engine = RulesEngine(fen)
    moves = engine.legal_moves(Square.from_algebraic(square))
    return {move.to_square.to_algebraic() for move in filter_moves(moves, identities)}


def _army(square: str, piece_type: PieceType, color: Color = Color.WHITE) -> IdentityTable:
    return {Square.from_algebraic(square): Piece(piece_type, color)}


def test_standard_pieces_are_untouched() -> None:
    engine = RulesEngine()
    moves = engine.legal_moves()
    assert filter_moves(moves, {}) == moves


def test_lion_moves_exactly_two() -> None:
    fen = "4k3/8/8/8/3Q4/8/8/4K3 w - - 0 1"
    assert _destinations(fen, "d4", _army("d4", PieceType.LION)) == {
        "b2", "b4", "b6", "d2", "d6", "f2", "f4", "f6"
    }


def test_lion_cannot_jump() -> None:
    """The mapped queen is blocked by the pawn on d5, so d6 never gets generated."""
    fen = "4k3/8/8/3P4/3Q4/8/8/4K3 w - - 0 1"
    assert "d6" not in _destinations(fen, "d4", _army("d4", PieceType.LION))


def test_footman_white() -> None:
    """Forward or sideways onto empty squares, capture diagonally forward only."""
    fen = "4k3/8/8/4p3/3Q4/8/8/4K3 w - - 0 1"
    assert _destinations(fen, "d4", _army("d4", PieceType.FOOTMAN)) == {
        "d5", "c4", "e4", "e5"
    }


def test_footman_black_moves_down_the_board() -> None:
    fen = "4k3/8/8/3q4/8/8/8/4K3 b - - 0 1"
    identities = _army("d5", PieceType.FOOTMAN, Color.BLACK)
    assert _destinations(fen, "d5", identities) == {"d4", "c5", "e5"}


def test_footman_cannot_capture_straight_ahead() -> None:
    fen = "4k3/8/8/3p4/3Q4/8/8/4K3 w - - 0 1"
    assert "d5" not in _destinations(fen, "d4", _army("d4", PieceType.FOOTMAN))


def test_dragon_limited_to_four() -> None:
    fen = "4k3/8/8/8/8/8/8/Q3K3 w - - 0 1"
    engine = RulesEngine(fen)
    moves = engine.legal_moves(Square.from_algebraic("a1"))
    allowed = filter_moves(moves, _army("a1", PieceType.DRAGON))
    assert any(distance(move) > 4 for move in moves)
    assert allowed
    assert all(1 <= distance(move) <= 4 for move in allowed)
    assert {"a5", "e5"} <= {move.to_square.to_algebraic() for move in allowed}


def test_stonehurler_never_moves() -> None:
    fen = "4k3/8/8/8/8/8/8/R3K3 w - - 0 1"
    assert _destinations(fen, "a1", _army("a1", PieceType.STONEHURLER)) == set()


def test_war_elephant_two_diagonal() -> None:
    fen = "4k3/8/8/8/8/8/8/2B1K3 w - - 0 1"
    assert _destinations(fen, "c1", _army("c1", PieceType.WAR_ELEPHANT)) == {"a3", "e3"}


def test_arcane_sage_single_step() -> None:
    fen = "4k3/8/8/8/3Q4/8/8/4K3 w - - 0 1"
    assert _destinations(fen, "d4", _army("d4", PieceType.ARCANE_SAGE)) == {
        "c3", "c4", "c5", "d3", "d5", "e3", "e4", "e5"
    }


def test_galleon_keeps_rook_moves() -> None:
    fen = "4k3/8/8/8/8/8/8/R3K3 w - - 0 1"
    assert _destinations(fen, "a1", _army("a1", PieceType.GALLEON)) == _destinations(
        fen, "a1", {}
    )


def test_stone_sentinel_one_or_two() -> None:
    fen = "4k3/8/8/8/3Q4/8/8/4K3 w - - 0 1"
    destinations = _destinations(fen, "d4", _army("d4", PieceType.STONE_SENTINEL))
    assert {"d5", "d6", "f6", "b2"} <= destinations
    assert "d7" not in destinations


def test_pawn_cannot_capture_stone_sentinel() -> None:
    fen = "4k3/8/8/3q4/4P3/8/8/4K3 w - - 0 1"
    sentinel = _army("d5", PieceType.STONE_SENTINEL, Color.BLACK)
    assert _destinations(fen, "e4", sentinel) == {"e5"}
    # the same square holding a plain queen can be taken
    assert _destinations(fen, "e4", {}) == {"e5", "d5"}


def test_bowguard_may_capture_stone_sentinel() -> None:
    """Only an actual pawn is stopped by the sentinel."""
    fen = "4k3/8/8/3q4/4P3/8/8/4K3 w - - 0 1"
    identities = {
        **_army("d5", PieceType.STONE_SENTINEL, Color.BLACK),
        **_army("e4", PieceType.BOWGUARD),
    }
    assert _destinations(fen, "e4", identities) == {"e5", "d5"}


def test_other_pieces_may_capture_stone_sentinel() -> None:
    fen = "4k3/8/8/3q4/8/8/8/3RK3 w - - 0 1"
    engine = RulesEngine(fen)
    capture = next(
        move
        for move in engine.legal_moves(Square.from_algebraic("d1"))
        if move.to_square == Square.from_algebraic("d5")
    )
    assert is_allowed(capture, _army("d5", PieceType.STONE_SENTINEL, Color.BLACK))
