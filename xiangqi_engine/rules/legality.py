"""
Legality Engine

Full move legality on top of the per-role geometry:

    1. The move is geometrically possible for the piece's movement role
    2. It does not capture a piece of the mover's own side
    3. Played on the live board (apply, test, revert):
        a. the generals do not face each other on an open file
        b. the mover's general is not attacked
        c. the resulting position would not occur for the third time in
           the game history

Variant differences come from the RulePolicy the engine is built with.
"""

from typing import List, Optional

from xiangqi_engine.board.pieces import Move, Side, in_bounds
from xiangqi_engine.rules.geometry import (
    attacker_squares,
    candidate_targets,
    count_between,
    is_geometric,
)
from xiangqi_engine.rules.policy import RulePolicy, StandardPolicy

REPETITION_LIMIT = 3


class LegalityEngine:
    """
    Move legality and check detection for one position.

    Args:
        position: Position to query (mutated temporarily, always restored)
        policy: Variant policy; StandardPolicy if omitted
    """

    def __init__(self, position, policy: Optional[RulePolicy] = None):
        self.position = position
        self.policy = policy or StandardPolicy()

    def _geometric(self, fr: int, fc: int, tr: int, tc: int, side: Side) -> bool:
        position = self.position
        policy = self.policy
        if policy.side_of(position, tr, tc) is side:
            return False
        role = policy.movement_role(position, fr, fc)
        hidden = policy.is_hidden(position, fr, fc)
        return is_geometric(
            position.grid, role, side, fr, fc, tr, tc, policy.confined(role, hidden)
        )

    def is_geometrically_valid(self, fr: int, fc: int, tr: int, tc: int) -> bool:
        """Geometry and own-capture check only; no check or repetition test."""
        if not (in_bounds(fr, fc) and in_bounds(tr, tc)):
            return False
        if (fr, fc) == (tr, tc):
            return False
        side = self.policy.side_of(self.position, fr, fc)
        if side is None:
            return False
        return self._geometric(fr, fc, tr, tc, side)

    def _survives(self, move: Move, side: Side) -> bool:
        position = self.position
        with position.moved(move):
            if self.generals_facing():
                return False
            if self.is_in_check(side):
                return False
            return position.repetition_count(position.key) + 1 < REPETITION_LIMIT

    def is_valid_move(self, fr: int, fc: int, tr: int, tc: int) -> bool:
        """
        Full legality check.

        Never raises: off-board coordinates and empty origins return False.
        """
        if not self.is_geometrically_valid(fr, fc, tr, tc):
            return False
        side = self.policy.side_of(self.position, fr, fc)
        return self._survives(Move(fr, fc, tr, tc), side)

    def generals_facing(self) -> bool:
        """True if both generals share a file with nothing between them."""
        red = self.position.general_square(Side.RED)
        black = self.position.general_square(Side.BLACK)
        if red is None or black is None or red[1] != black[1]:
            return False
        return count_between(self.position.grid, red[0], red[1], black[0], black[1]) == 0

    def is_in_check(self, side: Side) -> bool:
        """
        Whether a side's general is attacked.

        A side without a general counts as in check.
        """
        square = self.position.general_square(side)
        if square is None:
            return True
        position = self.position
        policy = self.policy
        row, col = square
        enemy = side.opponent
        for r, c in attacker_squares(position.grid, row, col):
            if policy.side_of(position, r, c) is not enemy:
                continue
            role = policy.movement_role(position, r, c)
            confined = policy.confined(role, policy.is_hidden(position, r, c))
            if is_geometric(position.grid, role, enemy, r, c, row, col, confined):
                return True
        return False

    def legal_moves(self, side: Side, captures_only: bool = False) -> List[Move]:
        """
        All legal moves for a side, in board order.

        Args:
            side: Side to move
            captures_only: Only return moves that take an enemy piece

        Returns:
            List of Move
        """
        position = self.position
        policy = self.policy
        enemy = side.opponent
        moves = []
        owned = [
            (row, col)
            for row, col, _ in position.pieces()
            if policy.side_of(position, row, col) is side
        ]
        for row, col in owned:
            role = policy.movement_role(position, row, col)
            for tr, tc in candidate_targets(role, side, row, col):
                target_side = policy.side_of(position, tr, tc)
                if target_side is side:
                    continue
                if captures_only and target_side is not enemy:
                    continue
                if not self._geometric(row, col, tr, tc, side):
                    continue
                move = Move(row, col, tr, tc)
                if self._survives(move, side):
                    moves.append(move)
        return moves

    def captures(self, side: Side) -> List[Move]:
        return self.legal_moves(side, captures_only=True)
