"""
Rules Module

Move legality for xiangqi and its blind variant.

Key Components:
    - geometry: Pure per-role movement predicates
    - RulePolicy: What is known about a piece (StandardPolicy, BlindPolicy)
    - LegalityEngine: Full legality, check detection and move generation
"""

from xiangqi_engine.rules.legality import LegalityEngine
from xiangqi_engine.rules.policy import BlindPolicy, RulePolicy, StandardPolicy, policy_for

__all__ = [
    'LegalityEngine',
    'RulePolicy',
    'StandardPolicy',
    'BlindPolicy',
    'policy_for',
]
