"""
Xiangqi Engine

A Chinese Chess (xiangqi) engine with alpha-beta search, also playing the
blind variant (jieqi) where pieces start face down.

## Architecture

The engine is organized into several key modules:

1. **board**: Position model
   - Pieces, moves, FEN / ICCS text
   - Paired apply/revert with an incremental Zobrist fingerprint
   - Concealment layer for the blind variant

2. **rules**: Move legality
   - Per-role geometry
   - Variant policies (standard / blind)
   - Check, flying generals and repetition

3. **evaluation**: Position evaluation functions
   - Abstract Evaluator interface (swappable design)
   - ClassicalEvaluator: material + piece-square tables
   - ExtendedEvaluator: mobility, king safety, coordination, center
   - ConcealedEvaluator: expected values for hidden pieces

4. **search**: Search algorithms
   - Iterative-deepening alpha-beta with quiescence
   - Transposition table and history heuristic
   - Opening book

5. **utils**: Testing and benchmarking utilities
   - Tactical suite

## Quick Start

```python
from xiangqi_engine import EngineConfig, Side, XiangqiEngine

engine = XiangqiEngine(EngineConfig(difficulty=1, seed=1))
engine.move_piece(7, 7, 7, 4)              # Red: central cannon
move = engine.get_best_move(Side.BLACK)
print(f"Black plays {move}")
```

## Version

0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from xiangqi_engine.board.pieces import Move, Piece, Role, Side
from xiangqi_engine.config import DIFFICULTY_PROFILES, EngineConfig, SearchProfile
from xiangqi_engine.engine import XiangqiEngine
from xiangqi_engine.adapter import ThreadedEngineAdapter

__all__ = [
    'Move',
    'Piece',
    'Role',
    'Side',
    'EngineConfig',
    'SearchProfile',
    'DIFFICULTY_PROFILES',
    'XiangqiEngine',
    'ThreadedEngineAdapter',
]
