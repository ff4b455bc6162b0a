"""
Movement rules of the army pieces.

Key idea: the rules engine already generated the move for the mapped standard piece (so it is legal in the ordinary
chess sense: on the board, not blocked, does not leave the king in check). Each army piece gets a predicate that keeps
only the moves its own movement rule allows. Same strategy pattern as a movement-rule table per piece type.

Everything in here is a pure function of (move, identity table).
"""

from typing import Callable, Iterable

from src.core.shared_types import Color, PieceType
from src.reforged.pieces import IdentityTable, MovementRule, piece_spec
from src.reforged.rules import VerboseMove

MovementCheck = Callable[[VerboseMove, Color], bool]


def deltas(move: VerboseMove) -> tuple[int, int]:
    """(file delta, rank delta) of the move"""
    return (
        move.to_square.file - move.from_square.file,
        move.to_square.rank - move.from_square.rank,
    )


def distance(move: VerboseMove) -> int:
    """Chebyshev distance: number of king steps between from and to"""
    dx, dy = deltas(move)
    return max(abs(dx), abs(dy))


def forward(color: Color) -> int:
    # white moves UP the board, black moves DOWN
    return 1 if color == Color.WHITE else -1


# --- MOVEMENT RULES ---
def _standard(move: VerboseMove, color: Color) -> bool:
    return True


def _exactly_two(move: VerboseMove, color: Color) -> bool:
    return distance(move) == 2


def _footman(move: VerboseMove, color: Color) -> bool:
    """
    A footman:
    - steps one square forward (not onto a piece)
    - captures one square diagonally forward (only onto an enemy piece)
    - steps one square sideways (not onto a piece)
    """
    dx, dy = deltas(move)
    if dy == forward(color):
        if dx == 0:
            return not move.is_capture
        if abs(dx) == 1:
            return move.is_capture
        return False
    if dy == 0 and abs(dx) == 1:
        return not move.is_capture
    return False


def _up_to_four(move: VerboseMove, color: Color) -> bool:
    return 1 <= distance(move) <= 4


def _immobile(move: VerboseMove, color: Color) -> bool:
    return False


def _diagonal_two(move: VerboseMove, color: Color) -> bool:
    dx, dy = deltas(move)
    return abs(dx) == abs(dy) and distance(move) == 2


def _single_step(move: VerboseMove, color: Color) -> bool:
    return distance(move) == 1


def _orthogonal(move: VerboseMove, color: Color) -> bool:
    dx, dy = deltas(move)
    return dx == 0 or dy == 0


def _one_or_two(move: VerboseMove, color: Color) -> bool:
    return 1 <= distance(move) <= 2


MOVEMENT_CHECKS: dict[MovementRule, MovementCheck] = {
    MovementRule.STANDARD: _standard,
    MovementRule.EXACTLY_TWO: _exactly_two,
    MovementRule.FOOTMAN: _footman,
    MovementRule.UP_TO_FOUR: _up_to_four,
    MovementRule.IMMOBILE: _immobile,
    MovementRule.DIAGONAL_TWO: _diagonal_two,
    MovementRule.SINGLE_STEP: _single_step,
    MovementRule.UNRESTRICTED: _standard,
    MovementRule.ORTHOGONAL: _orthogonal,
    MovementRule.ONE_OR_TWO: _one_or_two,
}


def is_pawn_capturing_sentinel(move: VerboseMove, identities: IdentityTable) -> bool:
    """Stone sentinels cannot be captured by pawns, whatever the pawn itself would be allowed to do."""
    if not move.is_capture:
        return False
    target = identities.get(move.to_square)
    if target is None or target.type != PieceType.STONE_SENTINEL:
        return False
    mover = identities.get(move.from_square)
    mover_type = mover.type if mover is not None else move.piece
    return mover_type == PieceType.PAWN


def is_allowed(move: VerboseMove, identities: IdentityTable) -> bool:
    """Should the rules-engine generated `move` be kept under the army movement rules?"""
    if is_pawn_capturing_sentinel(move, identities):
        return False

    mover = identities.get(move.from_square)
    if mover is None:
        # standard piece: the rules engine already did all the work
        return True

    check = MOVEMENT_CHECKS[piece_spec(mover.type).movement]
    return check(move, mover.color)


def filter_moves(
    moves: Iterable[VerboseMove], identities: IdentityTable
) -> list[VerboseMove]:
    """Keep the allowed moves, in the order the rules engine generated them."""
    return [move for move in moves if is_allowed(move, identities)]
