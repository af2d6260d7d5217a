#!/usr/bin/env python3
"""
Tactical Benchmark Runner

Runs the tactical suite at multiple depths to establish baseline
performance metrics, and optionally plays engine-vs-engine games.

Usage:
    python tools/run_benchmark.py [--depths 1,2,3] [--verbose]
    python tools/run_benchmark.py --self-play 4 --variant blind --difficulty 1
"""

import sys
import argparse
import logging
import time
from collections import Counter
from pathlib import Path

from tqdm import tqdm

sys.path.insert(0, str(Path(__file__).parent.parent))

from xiangqi_engine.board.pieces import Side
from xiangqi_engine.config import EngineConfig
from xiangqi_engine.engine import XiangqiEngine
from xiangqi_engine.evaluation.classical import ClassicalEvaluator
from xiangqi_engine.utils.testing import run_suite

MAX_PLIES = 200


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def format_time(seconds: float) -> str:
    """Format time"""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        minutes = int(seconds // 60)
        secs = seconds % 60
        return f"{minutes}m {secs:.0f}s"


def run_benchmark(depths: list, verbose: bool = False):
    """
    Run the tactical suite at multiple depths.

    Args:
        depths: List of depths to test
        verbose: If True, print detailed results for each position
    """
    evaluator = ClassicalEvaluator()

    print("=" * 80)
    print("TACTICAL BENCHMARK - Xiangqi Engine")
    print("=" * 80)
    print("Evaluator: Classical (Piece-Square Tables)")
    print("Search: Alpha-Beta + Quiescence + Transposition Table")
    print(f"Depths: {depths}")
    print("=" * 80)

    all_results = []

    for depth in depths:
        start_time = time.time()
        result = run_suite(depth=depth, evaluator=evaluator, verbose=verbose)
        total_time = time.time() - start_time

        total_nodes = sum(r.nodes_searched for r in result['results'])
        nodes_per_sec = total_nodes / total_time if total_time > 0 else 0

        all_results.append({
            'depth': depth,
            'score': result['score'],
            'total': result['total'],
            'percentage': result['percentage'],
            'avg_time': result['avg_time'],
            'nodes_per_sec': nodes_per_sec,
            'results': result['results'],
        })

        failed = [r for r in result['results'] if not r.correct]
        if failed and verbose:
            print("\n  Failed positions:")
            for r in failed:
                print(f"    {r.position.id}: Expected {r.position.best_moves}, got {r.found_move}")

    print("\n" + "=" * 80)
    print("SUMMARY TABLE")
    print("=" * 80)
    print(f"{'Depth':<8} {'Correct':<12} {'%':<8} {'Avg Time':<12} {'Nodes/sec':<15}")
    print("-" * 80)

    for r in all_results:
        print(f"{r['depth']:<8} {r['score']}/{r['total']:<10} {r['percentage']:<7.1f}% {format_time(r['avg_time']):<12} {r['nodes_per_sec']:>12,.0f}")

    print("=" * 80)
    return all_results


def play_game(config: EngineConfig) -> str:
    """
    Play one engine-vs-engine game.

    Returns:
        "red", "black" or "draw"
    """
    engine = XiangqiEngine(config)
    side = Side.RED
    for _ in range(MAX_PLIES):
        move = engine.get_best_move(side)
        if move is None:
            # No legal moves loses in xiangqi
            return side.opponent.value
        engine.move_piece(*move)
        winner = engine.check_win()
        if winner is not None:
            return winner.value
        side = side.opponent
    return "draw"


def run_self_play(games: int, variant: str, difficulty: int, seed: int):
    """Play a series of games and print the tally."""
    tally = Counter()
    start_time = time.time()
    for game in tqdm(range(games), desc=f"Self-play ({variant})", unit="game"):
        config = EngineConfig(variant=variant, difficulty=difficulty, seed=seed + game)
        tally[play_game(config)] += 1

    print(f"\nSelf-play results after {games} games ({format_time(time.time() - start_time)}):")
    for outcome in ("red", "black", "draw"):
        print(f"  {outcome:<6} {tally[outcome]}")
    return tally


def main():
    parser = argparse.ArgumentParser(
        description="Run the tactical benchmark and optional self-play"
    )
    parser.add_argument(
        "--depths",
        type=str,
        default="1,2,3",
        help="Comma-separated list of depths to test (default: 1,2,3)"
    )
    parser.add_argument(
        "--self-play",
        type=int,
        default=0,
        metavar="GAMES",
        help="Number of engine-vs-engine games to play after the suite"
    )
    parser.add_argument(
        "--variant",
        choices=["standard", "blind"],
        default="standard",
        help="Variant for self-play games"
    )
    parser.add_argument(
        "--difficulty",
        type=int,
        default=1,
        help="Difficulty level for self-play games (1-3)"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Base seed for self-play games"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Print detailed results for each position"
    )

    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        depths = [int(d.strip()) for d in args.depths.split(",")]
    except ValueError:
        print("Error: depths must be comma-separated integers")
        sys.exit(1)

    try:
        run_benchmark(depths, verbose=args.verbose)
        if args.self_play:
            run_self_play(args.self_play, args.variant, args.difficulty, args.seed)
    except KeyboardInterrupt:
        print("\n\nBenchmark interrupted by user")
        sys.exit(1)
    except ValueError as e:
        logging.error(f"Benchmark failed: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
