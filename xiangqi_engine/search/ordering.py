"""
Move Ordering

Move ordering is CRITICAL for alpha-beta performance: good moves searched
first cause more cutoffs.

Ordering Priority:
    1. The transposition-table / previous-iteration best move
    2. Captures, by MVV-LVA (Most Valuable Victim - Least Valuable Aggressor)
    3. Quiet moves, by history-heuristic score

References:
    - Move Ordering: https://www.chessprogramming.org/Move_Ordering
    - History Heuristic: https://www.chessprogramming.org/History_Heuristic
"""

from typing import List, Optional

import numpy as np

from xiangqi_engine.board.pieces import NUM_SQUARES, Move
from xiangqi_engine.evaluation.classical import PIECE_VALUES

HASH_MOVE_SCORE = 10 ** 9
CAPTURE_OFFSET = 10 ** 7


class HistoryTable:
    """
    History heuristic scores indexed by (from-square, to-square).

    Quiet moves that caused a beta cutoff gain depth² so they are tried
    earlier in sibling nodes.
    """

    def __init__(self):
        self.scores = np.zeros((NUM_SQUARES, NUM_SQUARES), dtype=np.int64)

    def bump(self, move: Move, depth: int):
        self.scores[move.from_square, move.to_square] += depth * depth

    def score(self, move: Move) -> int:
        return int(self.scores[move.from_square, move.to_square])

    def clear(self):
        self.scores.fill(0)


def mvv_lva(position, policy, move: Move) -> int:
    """
    MVV-LVA score of a capture (0 for quiet moves).

    Roles come from the policy, so hidden pieces are valued by their slot
    role.
    """
    victim = policy.movement_role(position, move.to_row, move.to_col)
    if victim is None:
        return 0
    attacker = policy.movement_role(position, move.from_row, move.from_col)
    return 10 * PIECE_VALUES[victim] - PIECE_VALUES[attacker]


def order_moves(
    position,
    policy,
    moves: List[Move],
    hash_move: Optional[Move] = None,
    history: Optional[HistoryTable] = None,
) -> List[Move]:
    """
    Order moves to improve alpha-beta pruning efficiency.

    Args:
        position: Current position
        policy: Variant policy (for roles of hidden pieces)
        moves: Legal moves to order
        hash_move: Best move from the TT or previous iteration
        history: History table for quiet moves

    Returns:
        Sorted list of moves (best moves first)
    """

    def move_score(move: Move) -> int:
        if move == hash_move:
            return HASH_MOVE_SCORE
        if position.grid[move.to_row][move.to_col] is not None:
            return CAPTURE_OFFSET + mvv_lva(position, policy, move)
        if history is not None:
            return history.score(move)
        return 0

    return sorted(moves, key=move_score, reverse=True)
