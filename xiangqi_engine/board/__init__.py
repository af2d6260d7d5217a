"""
Board Module

Position model for xiangqi and its blind variant.

Key Components:
    - Piece, Side, Role, Move: Immutable value types
    - Position: 10x9 board with paired apply/revert, game history and an
      incrementally maintained Zobrist fingerprint
    - ConcealmentState: Concealed squares and slot roles (blind variant)
    - FEN / ICCS conversion helpers

Data Flow:
    FEN text → position_from_fen() → Position ⇄ apply()/revert() → search
"""

from xiangqi_engine.board.pieces import Move, Piece, Role, Side
from xiangqi_engine.board.position import MoveRecord, Position, standard_position
from xiangqi_engine.board.concealment import ConcealmentState, blind_position
from xiangqi_engine.board.representation import (
    START_FEN,
    position_from_fen,
    position_to_fen,
)
from xiangqi_engine.board.zobrist import zobrist_hash

__all__ = [
    'Move',
    'Piece',
    'Role',
    'Side',
    'MoveRecord',
    'Position',
    'standard_position',
    'ConcealmentState',
    'blind_position',
    'START_FEN',
    'position_from_fen',
    'position_to_fen',
    'zobrist_hash',
]
