"""
Transposition Table

This module implements a transposition table (TT) - a hash table that caches
search results to avoid re-searching positions reached through different
move orders. Keys are position fingerprints combined with the side to move
(see board/zobrist.py).

References:
    - Transposition Table: https://www.chessprogramming.org/Transposition_Table
"""

import random
from enum import Enum
from typing import Dict, Optional

from xiangqi_engine.board.pieces import Move


class NodeType(Enum):
    """
    Type of node in search tree.

    This determines how we can use the cached value:
        - EXACT: The exact evaluation (all moves searched inside the window)
        - LOWER_BOUND: Beta cutoff occurred (value is at least this good)
        - UPPER_BOUND: No move raised alpha (value is at most this good)
    """
    EXACT = 0
    LOWER_BOUND = 1
    UPPER_BOUND = 2


class TTEntry:
    """
    Entry in the transposition table.

    Attributes:
        key: Search key of the position (fingerprint + side to move)
        depth: Remaining depth this entry was searched to
        value: Score from the side to move's point of view
        node_type: EXACT, LOWER_BOUND, or UPPER_BOUND
        best_move: Best move found in this position
    """

    __slots__ = ("key", "depth", "value", "node_type", "best_move")

    def __init__(
        self,
        key: int,
        depth: int,
        value: float,
        node_type: NodeType,
        best_move: Optional[Move] = None,
    ):
        self.key = key
        self.depth = depth
        self.value = value
        self.node_type = node_type
        self.best_move = best_move

    def __repr__(self) -> str:
        return (
            f"TTEntry(key={self.key}, depth={self.depth}, "
            f"value={self.value:.2f}, type={self.node_type}, move={self.best_move})"
        )


class TranspositionTable:
    """
    Transposition table for caching search results.

    Attributes:
        max_size: Maximum number of entries (memory limit)
        table: Dictionary mapping key → TTEntry
    """

    def __init__(self, max_size: int = 1_000_000, rng: Optional[random.Random] = None):
        """
        Initialize transposition table.

        Args:
            max_size: Maximum number of entries
            rng: Random generator used to pick eviction victims
        """
        if max_size < 1:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self.table: Dict[int, TTEntry] = {}
        self.rng = rng or random.Random()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def store(
        self,
        key: int,
        depth: int,
        value: float,
        node_type: NodeType,
        best_move: Optional[Move] = None,
    ):
        """
        Store a search result in the transposition table.

        Args:
            key: Search key of the position
            depth: Remaining depth the result was computed at
            value: Score (side to move's point of view)
            node_type: EXACT, LOWER_BOUND, or UPPER_BOUND
            best_move: Best move found (optional)
        """
        existing = self.table.get(key)
        # Only replace if new depth >= old depth
        if existing is not None and depth < existing.depth:
            return

        self.table[key] = TTEntry(key, depth, value, node_type, best_move)

        # Random eviction once full
        if len(self.table) > self.max_size:
            victim = self.rng.choice(list(self.table.keys()))
            del self.table[victim]
            self.evictions += 1

    def lookup(self, key: int, depth: int = 0) -> Optional[TTEntry]:
        """
        Look up a position in the transposition table.

        Args:
            key: Search key of the position
            depth: Current remaining depth (only use if cached depth >= this)

        Returns:
            TTEntry if found and usable, None otherwise
        """
        entry = self.table.get(key)
        if entry is not None and entry.depth >= depth:
            self.hits += 1
            return entry

        self.misses += 1
        return None

    def best_move(self, key: int) -> Optional[Move]:
        """Stored best move regardless of depth (for move ordering)."""
        entry = self.table.get(key)
        return entry.best_move if entry is not None else None

    def clear(self):
        """Clear all entries from the transposition table."""
        self.table.clear()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get_stats(self) -> Dict[str, float]:
        """Get statistics about transposition table usage."""
        total_lookups = self.hits + self.misses
        hit_rate = (self.hits / total_lookups * 100) if total_lookups > 0 else 0

        return {
            'entries': len(self.table),
            'hits': self.hits,
            'misses': self.misses,
            'evictions': self.evictions,
            'hit_rate': hit_rate,
        }

    def __len__(self) -> int:
        return len(self.table)

    def __repr__(self) -> str:
        stats = self.get_stats()
        return (
            f"TranspositionTable(entries={stats['entries']}, "
            f"hit_rate={stats['hit_rate']:.1f}%)"
        )
