"""
Engine Testing and Benchmarking

This module provides a small tactical suite and the helpers to run it
against the search at a fixed depth.

Tactical Suite:
    Positions with a single clearly best move: a free rook capture and
    short forced mates. Each entry records the FEN, the side to move (in
    the FEN) and the accepted moves in ICCS notation.

Evaluation Metrics:
    - Correct Moves: Number of positions where the engine found a best move
    - Time per Position: Average thinking time
    - Nodes Searched: Total nodes visited
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from xiangqi_engine.board.representation import position_from_fen
from xiangqi_engine.evaluation.base import Evaluator
from xiangqi_engine.search.alphabeta import SearchCache, find_best_move

logger = logging.getLogger(__name__)


@dataclass
class SuitePosition:
    """
    A test position with expected best move(s).

    Attributes:
        fen: Board position in FEN notation (side to move included)
        best_moves: List of acceptable best moves (ICCS format)
        description: Human-readable description of the position
        id: Position identifier (e.g., "TAC.01")
    """
    fen: str
    best_moves: List[str]
    description: str = ""
    id: str = ""


@dataclass
class SuiteResult:
    """
    Result of testing a single position.

    Attributes:
        position: The test position
        found_move: Move the engine found (ICCS format)
        score: Score of the move (Red's perspective)
        correct: Whether the engine found a best move
        time_taken: Time spent searching (seconds)
        nodes_searched: Number of nodes visited
        depth: Search depth used
    """
    position: SuitePosition
    found_move: str
    score: float
    correct: bool
    time_taken: float
    nodes_searched: int = 0
    depth: int = 0


# ============================================================================
# Tactical Suite
# ============================================================================

TACTICAL_POSITIONS = [
    SuitePosition(
        id="TAC.01",
        fen="r3k4/9/9/9/9/9/R8/9/9/3K5 b",
        best_moves=["a9a3"],
        description="Black rook takes the undefended Red rook",
    ),
    SuitePosition(
        id="TAC.02",
        fen="5k3/9/9/9/r8/9/9/9/9/3BKB3 b",
        best_moves=["a5e5"],
        description="Black rook mates the general smothered by its elephants",
    ),
    SuitePosition(
        id="TAC.03",
        fen="4k4/3ppp3/9/9/9/9/9/9/9/R3K4 w",
        best_moves=["a0a9"],
        description="Red rook mates along the back rank behind a soldier wall",
    ),
]


def evaluate_position(
    position: SuitePosition,
    depth: int,
    evaluator: Optional[Evaluator] = None,
    cache: Optional[SearchCache] = None,
    verbose: bool = False,
) -> SuiteResult:
    """
    Evaluate a single test position.

    Args:
        position: Test position to evaluate
        depth: Search depth
        evaluator: Position evaluator (classical if omitted)
        cache: Optional SearchCache to reuse
        verbose: If True, print detailed output

    Returns:
        SuiteResult with engine's move and whether it was correct
    """
    if verbose:
        print(f"\nTesting {position.id}: {position.description}")
        print(f"FEN: {position.fen}")
        print(f"Expected moves: {position.best_moves}")

    start_time = time.time()

    try:
        board, side = position_from_fen(position.fen)
        result = find_best_move(board, side, depth, evaluator, cache=cache)

        time_taken = time.time() - start_time
        found_move = result.move.iccs() if result.move else ""
        correct = found_move in position.best_moves

        if verbose:
            print(f"Engine found: {found_move} (score: {result.score:.2f})")
            print(f"Nodes searched: {result.nodes:,}")
            print(f"Time: {time_taken:.2f}s")
            print(f"Result: {'CORRECT' if correct else 'WRONG'}")

        return SuiteResult(
            position=position,
            found_move=found_move,
            score=result.score,
            correct=correct,
            time_taken=time_taken,
            nodes_searched=result.nodes,
            depth=depth,
        )

    except ValueError as e:
        logger.error(f"Error evaluating position {position.id}: {e}", exc_info=True)
        return SuiteResult(
            position=position,
            found_move="",
            score=0.0,
            correct=False,
            time_taken=time.time() - start_time,
            depth=depth,
        )


def run_suite(
    depth: int = 2,
    evaluator: Optional[Evaluator] = None,
    positions: Optional[List[SuitePosition]] = None,
    verbose: bool = True,
) -> Dict[str, Any]:
    """
    Run the tactical suite.

    Args:
        depth: Search depth (default: 2)
        evaluator: Position evaluator
        positions: Positions to run (TACTICAL_POSITIONS if omitted)
        verbose: If True, print detailed results

    Returns:
        Dictionary with test results:
            - score: Number of correct positions
            - total: Total number of positions
            - percentage: Success percentage
            - results: List of SuiteResult objects
            - avg_time: Average time per position
            - total_time: Total time
    """
    positions = TACTICAL_POSITIONS if positions is None else positions

    if verbose:
        print("=" * 70)
        print(f"TACTICAL SUITE (depth {depth})")
        print("=" * 70)

    results = []
    correct_count = 0
    total_time = 0.0

    for position in positions:
        result = evaluate_position(position, depth, evaluator, verbose=verbose)
        results.append(result)

        if result.correct:
            correct_count += 1

        total_time += result.time_taken

    avg_time = total_time / len(positions) if positions else 0
    percentage = (correct_count / len(positions) * 100) if positions else 0

    if verbose:
        print("\n" + "=" * 70)
        print("SUMMARY")
        print("=" * 70)
        print(f"Score: {correct_count}/{len(positions)} ({percentage:.1f}%)")
        print(f"Average time: {avg_time:.2f}s")
        print(f"Total time: {total_time:.2f}s")

    return {
        'score': correct_count,
        'total': len(positions),
        'percentage': percentage,
        'results': results,
        'avg_time': avg_time,
        'total_time': total_time,
    }
