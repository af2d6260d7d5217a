"""
Alpha-Beta Search with Iterative Deepening

This module implements the core search of the engine: negamax with
alpha-beta pruning, a transposition table, history-heuristic move ordering
and a capture-only quiescence extension at the leaves, driven by iterative
deepening under a time budget.

Key Concepts:
    - Negamax: scores are from the side to move's point of view, so each
      recursive call negates the child's score and swaps the window
    - Alpha-Beta: prunes branches that can't affect the result
    - Iterative Deepening: search depth 1, 2, 3, ... and keep the best move
      of the last completed depth; the time budget is only checked between
      depths, and the profile's depth floor always runs
    - Quiescence: extend leaves with captures so the static evaluation is
      never taken in the middle of an exchange

The position is mutated in place (apply / revert) and must not be touched
by anyone else while a search is running.

References:
    - Alpha-Beta: https://www.chessprogramming.org/Alpha-Beta
    - Iterative Deepening: https://www.chessprogramming.org/Iterative_Deepening
    - Quiescence Search: https://www.chessprogramming.org/Quiescence_Search
"""

import logging
import random
import time
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Tuple

from xiangqi_engine.board.pieces import Move, Side
from xiangqi_engine.board.zobrist import search_key
from xiangqi_engine.config import MAX_DEPTH, SearchProfile
from xiangqi_engine.evaluation.base import INFINITY, Evaluator, mated_score
from xiangqi_engine.evaluation.classical import ClassicalEvaluator
from xiangqi_engine.rules.legality import LegalityEngine
from xiangqi_engine.search.book import OpeningBook
from xiangqi_engine.search.ordering import HistoryTable, mvv_lva, order_moves
from xiangqi_engine.search.transposition import NodeType, TranspositionTable

logger = logging.getLogger(__name__)

DEFAULT_QUIESCENCE_DEPTH = 6


@dataclass
class SearchResult:
    """
    Outcome of a search.

    Attributes:
        move: Best move found, or None if the side has no legal moves
        score: Score of the move from Red's perspective
        depth: Last completed iteration depth (0 for book moves)
        nodes: Nodes visited, quiescence included
        elapsed: Wall-clock seconds spent
        from_book: True if the move came from the opening book
    """

    move: Optional[Move]
    score: float
    depth: int
    nodes: int
    elapsed: float
    from_book: bool = False


class SearchCache:
    """
    State that survives between searches of the same game: the
    transposition table and the history-heuristic table.
    """

    def __init__(self, tt_size: int = 1_000_000, rng: Optional[random.Random] = None):
        self.tt = TranspositionTable(tt_size, rng)
        self.history = HistoryTable()

    def clear(self):
        self.tt.clear()
        self.history.clear()


class Searcher:
    """
    Negamax alpha-beta searcher over a LegalityEngine and an Evaluator.

    Args:
        legality: LegalityEngine bound to the position to search
        evaluator: Static evaluator (Red's perspective)
        book: Opening book, or None to never use one
        rng: Random source for book choices
        quiescence_depth: Maximum number of captures in a quiescence line
        provisional: Search moves of concealed pieces without revealing
            their identity to the evaluator (blind variant)
    """

    def __init__(
        self,
        legality,
        evaluator: Evaluator,
        book: Optional[OpeningBook] = None,
        rng: Optional[random.Random] = None,
        quiescence_depth: int = DEFAULT_QUIESCENCE_DEPTH,
        provisional: bool = False,
    ):
        self.legality = legality
        self.evaluator = evaluator
        self.book = book
        self.rng = rng or random.Random()
        self.quiescence_depth = quiescence_depth
        self.provisional = provisional

        self.nodes = 0
        self._path: Counter = Counter()
        self._cache: Optional[SearchCache] = None

    @property
    def position(self):
        return self.legality.position

    def _static(self, side: Side) -> float:
        score = self.evaluator.evaluate(self.position)
        return score if side is Side.RED else -score

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    def get_best_move(
        self,
        side: Side,
        profile: SearchProfile,
        cache: Optional[SearchCache] = None,
        use_book: bool = True,
    ) -> SearchResult:
        """
        Pick a move for `side`.

        Args:
            side: Side to move
            profile: Depth floor, depth cap and time budget
            cache: SearchCache to use (a throwaway one if omitted)
            use_book: Consult the opening book first

        Returns:
            SearchResult; its move is None exactly when the side has no
            legal moves

        Raises:
            ValueError: If the profile cannot complete a single iteration
        """
        start_time = time.perf_counter()
        profile.validate()
        self._cache = cache or SearchCache()
        self.nodes = 0
        self._path.clear()

        legal_moves = self.legality.legal_moves(side)
        if not legal_moves:
            logger.info("No legal moves for %s", side.value)
            return SearchResult(None, 0.0, 0, 0, time.perf_counter() - start_time)

        if use_book and self.book is not None:
            book_move = self.book.choose(
                self.position, side, self.rng, blind=self.legality.policy.name == "blind"
            )
            if book_move is not None:
                if book_move in legal_moves:
                    logger.info("Book move: %s", book_move.iccs())
                    return SearchResult(
                        book_move, 0.0, 0, 0, time.perf_counter() - start_time, from_book=True
                    )
                logger.debug("Ignoring invalid book move %s", book_move.iccs())

        max_depth = min(profile.max_depth, MAX_DEPTH)
        best_move = None
        best_score = 0.0
        completed = 0

        # Iterative Deepening
        for depth in range(1, max_depth + 1):
            elapsed = time.perf_counter() - start_time
            if completed >= profile.depth_floor and elapsed >= profile.time_budget:
                break

            move, score = self.search_root(side, depth, legal_moves, best_move)
            best_move, best_score, completed = move, score, depth

            logger.debug(
                "depth %d: best %s score %.1f nodes %d time %.2fs",
                depth,
                move.iccs(),
                score,
                self.nodes,
                time.perf_counter() - start_time,
            )

        elapsed = time.perf_counter() - start_time
        red_score = best_score if side is Side.RED else -best_score
        logger.info(
            "Search finished: %s (score %.1f, depth %d, %d nodes, %.2fs)",
            best_move.iccs(),
            red_score,
            completed,
            self.nodes,
            elapsed,
        )
        return SearchResult(best_move, red_score, completed, self.nodes, elapsed)

    # ------------------------------------------------------------------
    # Root
    # ------------------------------------------------------------------

    def search_root(
        self,
        side: Side,
        depth: int,
        legal_moves: List[Move],
        previous_best: Optional[Move] = None,
    ) -> Tuple[Move, float]:
        """
        Search every root move to `depth`.

        Returns:
            Tuple of (best move, score from the side to move's view)
        """
        position = self.position
        cache = self._cache
        alpha = -INFINITY
        beta = INFINITY

        ordered = order_moves(
            position, self.legality.policy, legal_moves, previous_best, cache.history
        )

        root_key = search_key(position.key, side)
        self._path[root_key] += 1
        best_move = ordered[0]
        best_score = -INFINITY
        try:
            for move in ordered:
                with position.moved(move, self.provisional):
                    score = -self.alpha_beta(side.opponent, depth - 1, -beta, -alpha, 1)
                if score > best_score:
                    best_score = score
                    best_move = move
                if score > alpha:
                    alpha = score
        finally:
            self._path[root_key] -= 1

        cache.tt.store(root_key, depth, best_score, NodeType.EXACT, best_move)
        return best_move, best_score

    # ------------------------------------------------------------------
    # Interior nodes
    # ------------------------------------------------------------------

    def alpha_beta(self, side: Side, depth: int, alpha: float, beta: float, ply: int) -> float:
        """
        Negamax search with alpha-beta pruning.

        Args:
            side: Side to move at this node
            depth: Remaining depth (quiescence takes over at 0)
            alpha: Lower bound of the window
            beta: Upper bound of the window
            ply: Distance from the root

        Returns:
            float: Score from `side`'s point of view
        """
        self.nodes += 1
        position = self.position
        cache = self._cache
        key = search_key(position.key, side)

        # Repetition inside the current line is a draw
        if self._path[key]:
            return 0.0

        alpha_orig = alpha

        # TT Lookup
        entry = cache.tt.lookup(key, depth)
        if entry is not None:
            if entry.node_type is NodeType.EXACT:
                return entry.value
            if entry.node_type is NodeType.LOWER_BOUND:
                alpha = max(alpha, entry.value)
            elif entry.node_type is NodeType.UPPER_BOUND:
                beta = min(beta, entry.value)
            if alpha >= beta:
                return entry.value

        if depth <= 0:
            return self.quiescence(side, alpha, beta, 0)

        moves = self.legality.legal_moves(side)
        if not moves:
            return mated_score(depth)

        ordered = order_moves(
            position, self.legality.policy, moves, cache.tt.best_move(key), cache.history
        )

        best_score = -INFINITY
        best_move = None
        self._path[key] += 1
        try:
            for move in ordered:
                quiet = position.grid[move.to_row][move.to_col] is None
                with position.moved(move, self.provisional):
                    score = -self.alpha_beta(side.opponent, depth - 1, -beta, -alpha, ply + 1)

                if score > best_score:
                    best_score = score
                    best_move = move
                if score > alpha:
                    alpha = score
                if alpha >= beta:
                    if quiet:
                        cache.history.bump(move, depth)
                    break
        finally:
            self._path[key] -= 1

        if best_score <= alpha_orig:
            node_type = NodeType.UPPER_BOUND
        elif best_score >= beta:
            node_type = NodeType.LOWER_BOUND
        else:
            node_type = NodeType.EXACT
        cache.tt.store(key, depth, best_score, node_type, best_move)

        return best_score

    def quiescence(self, side: Side, alpha: float, beta: float, qdepth: int) -> float:
        """
        Capture-only search from the stand-pat score (fail-hard).

        Stops extending after `quiescence_depth` captures.
        """
        self.nodes += 1
        stand_pat = self._static(side)
        if stand_pat >= beta:
            return beta
        if stand_pat > alpha:
            alpha = stand_pat
        if qdepth >= self.quiescence_depth:
            return alpha

        position = self.position
        policy = self.legality.policy
        captures = self.legality.captures(side)
        captures.sort(key=lambda move: mvv_lva(position, policy, move), reverse=True)

        for move in captures:
            with position.moved(move, self.provisional):
                score = -self.quiescence(side.opponent, -beta, -alpha, qdepth + 1)
            if score >= beta:
                return beta
            if score > alpha:
                alpha = score

        return alpha


def find_best_move(
    position,
    side: Side,
    depth: int,
    evaluator: Optional[Evaluator] = None,
    policy=None,
    cache: Optional[SearchCache] = None,
) -> SearchResult:
    """
    Search a position to a fixed depth without book or time limit.

    Args:
        position: Position to search (restored before returning)
        side: Side to move
        depth: Search depth
        evaluator: Evaluator (ClassicalEvaluator if omitted)
        policy: Variant policy (StandardPolicy if omitted)
        cache: Optional SearchCache to reuse

    Returns:
        SearchResult

    Raises:
        ValueError: If depth is below 1
    """
    legality = LegalityEngine(position, policy)
    searcher = Searcher(legality, evaluator or ClassicalEvaluator())
    profile = SearchProfile(depth_floor=depth, max_depth=depth, time_budget=float("inf"))
    return searcher.get_best_move(side, profile, cache, use_book=False)
