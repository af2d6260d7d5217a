"""
Concealed-Piece Evaluation (blind variant)

Visible pieces are scored exactly like ClassicalEvaluator. A piece whose
identity is hidden is scored without looking at it:

    expected value of its side's unseen pool
    + bonus_fraction * value of its slot role
    + PST bonus of its slot role

The bonus rewards the threat an unrevealed strong slot (e.g. a rook corner)
still poses. Expected values are recomputed from the position on every
evaluate() call.
"""

from xiangqi_engine.board.concealment import category_of, expected_value
from xiangqi_engine.board.pieces import Side, home_side, square_of
from xiangqi_engine.evaluation.base import Evaluator
from xiangqi_engine.evaluation.classical import PIECE_VALUES, piece_score, pst_value


class ConcealedEvaluator(Evaluator):
    """
    Material + PST evaluation that respects concealment.

    Args:
        bonus_fraction: Fraction of the slot role's value added to a hidden
            piece
    """

    def __init__(self, bonus_fraction: float = 0.1):
        if bonus_fraction < 0:
            raise ValueError(f"bonus_fraction must be non-negative, got {bonus_fraction}")
        self.bonus_fraction = bonus_fraction

    def hidden_piece_score(self, position, row: int, col: int, pools: dict) -> float:
        """Score of one hidden piece (unsigned)."""
        concealment = position.concealment
        square = square_of(row, col)
        piece = position.grid[row][col]
        side = home_side(row) if concealment.is_concealed(square) else piece.side
        slot_role = concealment.slot_role(square) or piece.role

        category = category_of(slot_role, concealment.shuffle)
        if (side, category) not in pools:
            pools[side, category] = expected_value(position, side, category, PIECE_VALUES)

        return (
            pools[side, category]
            + self.bonus_fraction * PIECE_VALUES[slot_role]
            + pst_value(slot_role, side, row, col)
        )

    def evaluate(self, position) -> float:
        concealment = position.concealment
        pools = {}
        score = 0.0
        for row, col, piece in position.pieces():
            if concealment is not None and concealment.is_hidden(square_of(row, col)):
                side = home_side(row) if concealment.is_concealed(square_of(row, col)) else piece.side
                value = self.hidden_piece_score(position, row, col, pools)
            else:
                side = piece.side
                value = piece_score(piece.role, piece.side, row, col)
            if side is Side.RED:
                score += value
            else:
                score -= value
        return score

    def __repr__(self) -> str:
        return f"ConcealedEvaluator(bonus_fraction={self.bonus_fraction})"
