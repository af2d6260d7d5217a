"""
Evaluation Module

Position evaluation for the engine. Evaluators are SWAPPABLE: the search
works with any evaluator that implements the base interface.

Key Components:
    - Evaluator (ABC): Abstract base class defining the evaluation interface
    - ClassicalEvaluator: Material plus piece-square tables
    - ExtendedEvaluator: Base evaluation plus weighted positional terms
    - ConcealedEvaluator: Expected-value scoring for the blind variant

Data Flow:
    Position → evaluator.evaluate() → float
                                      Positive = Red advantage
                                      Negative = Black advantage
"""

from xiangqi_engine.evaluation.base import INFINITY, MATE_SCORE, Evaluator, mated_score
from xiangqi_engine.evaluation.classical import PIECE_VALUES, ClassicalEvaluator
from xiangqi_engine.evaluation.concealed import ConcealedEvaluator
from xiangqi_engine.evaluation.extended import DEFAULT_WEIGHTS, ExtendedEvaluator

__all__ = [
    'Evaluator',
    'ClassicalEvaluator',
    'ExtendedEvaluator',
    'ConcealedEvaluator',
    'PIECE_VALUES',
    'DEFAULT_WEIGHTS',
    'MATE_SCORE',
    'INFINITY',
    'mated_score',
]
