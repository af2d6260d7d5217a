"""
Abstract Evaluator Interface

This module defines the abstract base class for all position evaluators.
By defining a common interface, the search can be run with any evaluator
(classical, extended, concealed) without modification.

Key Principles:
    1. Evaluators do not mutate the position
    2. evaluate() always returns a score from Red's perspective
    3. Positive = Red advantage, Negative = Black advantage
    4. A side with no legal moves is scored by the search, not here

Convention:
    - Material values: soldier = 100, rook = 900, general = 10000
    - Return 0 for perfectly equal positions (e.g. the start position)
"""

from abc import ABC, abstractmethod


# Evaluation constants
MATE_SCORE = 200000  # Base score for being mated
INFINITY = 10 ** 9   # Search window bound, larger than any reachable score


def mated_score(depth: int) -> int:
    """
    Score of a node whose side to move has no legal moves.

    Larger remaining depth means the mate was found closer to the root, so
    the score is more negative and faster mates are preferred.
    """
    return -(MATE_SCORE + depth)


class Evaluator(ABC):
    """
    Abstract base class for position evaluation.

    Methods:
        evaluate(position): Returns the evaluation from Red's perspective
    """

    @abstractmethod
    def evaluate(self, position) -> float:
        """
        Evaluate a position from Red's perspective.

        Args:
            position: Position to evaluate

        Returns:
            float: Evaluation (positive favours Red)

        Raises:
            NotImplementedError: If subclass doesn't implement this method
        """
        pass

    def __repr__(self) -> str:
        """String representation of evaluator."""
        return f"{self.__class__.__name__}()"
