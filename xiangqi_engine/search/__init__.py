"""
Search Module

This module implements the engine's search: negamax with alpha-beta
pruning, iterative deepening under a time budget, a transposition table,
history-heuristic move ordering, quiescence at the leaves and an opening
book shortcut.

Key Components:
    - Searcher: Iterative-deepening alpha-beta search
    - find_best_move: Fixed-depth search helper
    - SearchCache: Transposition table + history table of one game
    - TranspositionTable: Position cache keyed by Zobrist fingerprints
    - OpeningBook: Opening lines for both variants
"""

from xiangqi_engine.search.alphabeta import (
    SearchCache,
    Searcher,
    SearchResult,
    find_best_move,
)
from xiangqi_engine.search.book import OpeningBook
from xiangqi_engine.search.ordering import HistoryTable, order_moves
from xiangqi_engine.search.transposition import NodeType, TranspositionTable

__all__ = [
    'Searcher',
    'SearchResult',
    'SearchCache',
    'find_best_move',
    'OpeningBook',
    'HistoryTable',
    'order_moves',
    'NodeType',
    'TranspositionTable',
]
