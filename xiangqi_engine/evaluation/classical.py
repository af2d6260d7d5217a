"""
Classical Piece-Square Table Evaluation

This module implements a traditional xiangqi evaluation function using:
    1. Material counting (piece values)
    2. Piece-Square Tables (positional bonuses)

This is the baseline evaluator used at every difficulty unless the
extended terms are switched on.

Evaluation Components:
    - Material: P=100, B=200, A=200, N=450, C=450, R=900, K=10000
    - Position: PST bonuses for soldiers, cannons, rooks and horses
"""

import numpy as np

from xiangqi_engine.board.pieces import Role, Side
from xiangqi_engine.evaluation.base import Evaluator

#fmt: off
# ============================================================================
# Material Values
# ============================================================================

PIECE_VALUES = {
    Role.GENERAL: 10000,
    Role.ROOK: 900,
    Role.HORSE: 450,
    Role.CANNON: 450,
    Role.ELEPHANT: 200,
    Role.ADVISOR: 200,
    Role.SOLDIER: 100,
}


# ============================================================================
# Piece-Square Tables (PSTs)
# ============================================================================
# Values are from Red's perspective: row 0 is Black's back rank, row 9 is
# Red's back rank. Black pieces read the table at row 9 - r.
#
# Convention: Higher values = better squares
# ============================================================================

# Soldier PST: reward crossing the river and closing in on the palace
SOLDIER_TABLE = np.array([
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [ 30,  40,  50,  60,  70,  60,  50,  40,  30],
    [ 20,  30,  40,  50,  60,  50,  40,  30,  20],
    [ 20,  20,  20,  20,  20,  20,  20,  20,  20],
    [ 10,  10,  20,  30,  40,  30,  20,  10,  10],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
], dtype=np.int32)

# Cannon PST: the home cannon rank is a good base
CANNON_TABLE = np.array([
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [ 10,  10,  10,  10,  10,  10,  10,  10,  10],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
], dtype=np.int32)

# Rook PST: active on the enemy's second rank, weak in the corners
ROOK_TABLE = np.array([
    [ 10,  10,  10,  10,  10,  10,  10,  10,  10],
    [ 10,  20,  20,  20,  20,  20,  20,  20,  10],
    [  5,  10,  10,  10,  10,  10,  10,  10,   5],
    [  5,  10,  10,  10,  10,  10,  10,  10,   5],
    [  5,  10,  10,  10,  10,  10,  10,  10,   5],
    [  5,  10,  10,  10,  10,  10,  10,  10,   5],
    [  0,   5,   5,   5,   5,   5,   5,   5,   0],
    [  0,   5,   5,   5,   5,   5,   5,   5,   0],
    [  0,   5,   5,   5,   5,   5,   5,   5,   0],
    [ -5,   5,   5,   5,   5,   5,   5,   5,  -5],
], dtype=np.int32)

# Horse PST: central, forward horses; nothing at home
HORSE_TABLE = np.array([
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  5,  15,  15,  15,  15,  15,  15,  15,   5],
    [  5,  10,  20,  20,  20,  20,  20,  10,   5],
    [  5,   5,  15,  20,  20,  20,  15,   5,   5],
    [  5,   5,  10,  15,  15,  15,  10,   5,   5],
    [  5,   5,  10,  15,  15,  15,  10,   5,   5],
    [  0,   5,   5,   5,   5,   5,   5,   5,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
    [  0,   0,   0,   0,   0,   0,   0,   0,   0],
], dtype=np.int32)

# General, advisors and elephants are scored on material alone
FLAT_TABLE = np.zeros((10, 9), dtype=np.int32)
#fmt: on

PIECE_TABLES = {
    Role.SOLDIER: SOLDIER_TABLE,
    Role.CANNON: CANNON_TABLE,
    Role.ROOK: ROOK_TABLE,
    Role.HORSE: HORSE_TABLE,
    Role.GENERAL: FLAT_TABLE,
    Role.ADVISOR: FLAT_TABLE,
    Role.ELEPHANT: FLAT_TABLE,
}


def pst_value(role: Role, side: Side, row: int, col: int) -> int:
    """Piece-square bonus, mirrored across the river for Black."""
    table_row = row if side is Side.RED else 9 - row
    return int(PIECE_TABLES[role][table_row, col])


def piece_score(role: Role, side: Side, row: int, col: int) -> int:
    """Material plus PST bonus, unsigned."""
    return PIECE_VALUES[role] + pst_value(role, side, row, col)


class ClassicalEvaluator(Evaluator):
    """
    Classical evaluation using material and piece-square tables.

    Attributes:
        piece_values: Role -> material value
        piece_tables: Role -> PST array
    """

    def __init__(self):
        """Initialize the classical evaluator with piece-square tables."""
        self.piece_values = PIECE_VALUES
        self.piece_tables = PIECE_TABLES

    def evaluate(self, position) -> float:
        """
        Evaluate position using material + PST.

        Args:
            position: Position to evaluate

        Returns:
            float: Evaluation (Red's perspective)
        """
        score = 0
        for row, col, piece in position.pieces():
            total_value = piece_score(piece.role, piece.side, row, col)
            if piece.side is Side.RED:
                score += total_value
            else:
                score -= total_value
        return float(score)
