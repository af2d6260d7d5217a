"""
Extended Heuristic Evaluation

Wraps a base evaluator and adds four weighted positional terms, each
computed as Red's term minus Black's term:

    - Mobility: number of legal moves
    - King safety: adjacent defenders, check penalty, general mobility
    - Coordination: rook pair, cannon pair, rook with horse, crossed soldiers
    - Center control: occupancy and reach of rows 4-5, columns 3-5

Legal moves are generated once per side per evaluation and shared by the
terms that need them. This is several times slower than the classical
evaluator, so it is off by default.
"""

from typing import Dict, List, Optional

from xiangqi_engine.board.pieces import Move, Role, Side
from xiangqi_engine.evaluation.base import Evaluator
from xiangqi_engine.evaluation.classical import ClassicalEvaluator
from xiangqi_engine.rules.geometry import ORTHOGONAL, has_crossed_river

DEFAULT_WEIGHTS = {
    "mobility": 0.3,
    "king_safety": 0.5,
    "coordination": 0.4,
    "center": 0.2,
}

CENTER_SQUARES = [(row, col) for row in (4, 5) for col in (3, 4, 5)]

# King safety constants
DEFENDER_BONUS = 10
CHECK_PENALTY = 50
GENERAL_MOVE_BONUS = 5
MISSING_GENERAL_PENALTY = -1000

# Coordination constants
ROOK_PAIR_BONUS = 20
CANNON_PAIR_BONUS = 15
ROOK_HORSE_BONUS = 10
CROSSED_SOLDIER_BONUS = 5

# Center constants
CENTER_OCCUPANCY = 10
CENTER_REACH = 5


class ExtendedEvaluator(Evaluator):
    """
    Base evaluation plus weighted mobility, king safety, coordination and
    center control.

    Args:
        legality: LegalityEngine bound to the evaluated position
        base: Evaluator for material and PST (ClassicalEvaluator if omitted)
        weights: Overrides for DEFAULT_WEIGHTS
    """

    def __init__(self, legality, base: Optional[Evaluator] = None, weights: Optional[Dict[str, float]] = None):
        self.legality = legality
        self.base = base or ClassicalEvaluator()
        self.weights = dict(DEFAULT_WEIGHTS)
        if weights:
            unknown = set(weights) - set(DEFAULT_WEIGHTS)
            if unknown:
                raise ValueError(f"Unknown evaluation weights: {sorted(unknown)}")
            self.weights.update(weights)

    def evaluate(self, position) -> float:
        score = self.base.evaluate(position)

        moves = {side: self.legality.legal_moves(side) for side in Side}
        weights = self.weights

        score += weights["mobility"] * (len(moves[Side.RED]) - len(moves[Side.BLACK]))
        score += weights["king_safety"] * (
            self.king_safety(position, Side.RED, moves[Side.RED])
            - self.king_safety(position, Side.BLACK, moves[Side.BLACK])
        )
        score += weights["coordination"] * (
            self.coordination(position, Side.RED) - self.coordination(position, Side.BLACK)
        )
        score += weights["center"] * (
            self.center_control(position, Side.RED, moves[Side.RED])
            - self.center_control(position, Side.BLACK, moves[Side.BLACK])
        )
        return score

    def king_safety(self, position, side: Side, moves: List[Move]) -> int:
        square = position.general_square(side)
        if square is None:
            return MISSING_GENERAL_PENALTY

        policy = self.legality.policy
        row, col = square
        safety = 0
        for dr, dc in ORTHOGONAL:
            if policy.side_of(position, row + dr, col + dc) is side:
                safety += DEFENDER_BONUS

        if self.legality.is_in_check(side):
            safety -= CHECK_PENALTY

        safety += GENERAL_MOVE_BONUS * sum(
            1 for move in moves if (move.from_row, move.from_col) == square
        )
        return safety

    def coordination(self, position, side: Side) -> int:
        """Coordination bonus; pieces whose identity is hidden do not count."""
        policy = self.legality.policy
        counts = {role: 0 for role in Role}
        crossed = 0
        for row, col, piece in position.pieces():
            if piece.side is not side or policy.is_hidden(position, row, col):
                continue
            counts[piece.role] += 1
            if piece.role is Role.SOLDIER and has_crossed_river(side, row):
                crossed += 1

        bonus = crossed * CROSSED_SOLDIER_BONUS
        if counts[Role.ROOK] >= 2:
            bonus += ROOK_PAIR_BONUS
        if counts[Role.CANNON] >= 2:
            bonus += CANNON_PAIR_BONUS
        if counts[Role.ROOK] and counts[Role.HORSE]:
            bonus += ROOK_HORSE_BONUS
        return bonus

    def center_control(self, position, side: Side, moves: List[Move]) -> int:
        policy = self.legality.policy
        reached = {(move.to_row, move.to_col) for move in moves}
        control = 0
        for row, col in CENTER_SQUARES:
            owner = policy.side_of(position, row, col)
            if owner is side:
                control += CENTER_OCCUPANCY
            elif owner is not None:
                control -= CENTER_OCCUPANCY
            if (row, col) in reached:
                control += CENTER_REACH
        return control

    def __repr__(self) -> str:
        return f"ExtendedEvaluator(base={self.base!r}, weights={self.weights})"
