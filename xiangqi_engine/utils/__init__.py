"""
Utilities Module

This module provides utility functions for testing and benchmarking the
engine.

Key Components:
    - Tactical suite: positions with a known best move
    - evaluate_position / run_suite: fixed-depth runners

Testing Methodology:
    Each position has a single clearly best move (a free capture or a
    forced mate). The engine's task is to find it at a fixed depth.

Success Metrics:
    - Tactical suite: 3/3 at depth 2
"""

from xiangqi_engine.utils.testing import (
    TACTICAL_POSITIONS,
    evaluate_position,
    run_suite,
)

__all__ = [
    'TACTICAL_POSITIONS',
    'evaluate_position',
    'run_suite',
]
