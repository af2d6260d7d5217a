#!/usr/bin/env python3
"""
Play against the engine in the terminal.

You play Red and enter moves in ICCS notation (e.g. "h2e2"). Other
commands: "undo" takes back your last move and the engine's reply,
"moves" lists your legal moves, "quit" leaves.

Usage:
    python tools/play.py [--variant blind] [--difficulty 2] [--seed 7]
"""

import sys
import argparse
import logging
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from xiangqi_engine.board.pieces import FILES, Move, Side
from xiangqi_engine.config import EngineConfig
from xiangqi_engine.engine import XiangqiEngine


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def render(engine: XiangqiEngine) -> str:
    """Board as text; concealed pieces are shown as 'X' (Red) or 'x' (Black)."""
    concealed = set(engine.concealed_squares())
    lines = []
    for row, cells in enumerate(engine.get_board_state()):
        text = []
        for col, symbol in enumerate(cells):
            if symbol is None:
                text.append(".")
            elif (row, col) in concealed:
                text.append("X" if row >= 5 else "x")
            else:
                text.append(symbol)
        lines.append(f"{9 - row}  {' '.join(text)}")
        if row == 4:
            lines.append("   " + "~" * 17)
    lines.append("   " + " ".join(FILES))
    return "\n".join(lines)


def game_over(engine: XiangqiEngine, side: Side) -> bool:
    winner = engine.check_win()
    if winner is None and not engine.get_all_legal_moves(side):
        winner = side.opponent
    if winner is None:
        return False
    print(render(engine))
    print(f"\n{winner.value.capitalize()} wins!")
    return True


def main():
    parser = argparse.ArgumentParser(description="Play xiangqi against the engine")
    parser.add_argument("--variant", choices=["standard", "blind"], default="standard")
    parser.add_argument("--difficulty", type=int, default=2, help="Engine strength (1-3)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the blind deal")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    setup_logging(args.verbose)
    engine = XiangqiEngine(
        EngineConfig(variant=args.variant, difficulty=args.difficulty, seed=args.seed)
    )

    while True:
        if game_over(engine, Side.RED):
            break
        print(render(engine))
        if engine.is_in_check(Side.RED):
            print("You are in check.")

        try:
            command = input("\nYour move: ").strip().lower()
        except EOFError:
            break

        if command in ("quit", "exit"):
            break
        if command == "undo":
            if len(engine.position.history) >= 2:
                engine.undo()
                engine.undo()
            continue
        if command == "moves":
            print(" ".join(move.iccs() for move in engine.get_all_legal_moves(Side.RED)))
            continue

        try:
            move = Move.from_iccs(command)
        except ValueError as e:
            print(e)
            continue
        if move not in engine.get_all_legal_moves(Side.RED):
            print(f"Illegal move: {command}")
            continue
        engine.move_piece(*move)

        if game_over(engine, Side.BLACK):
            break
        reply = engine.get_best_move(Side.BLACK)
        engine.move_piece(*reply)
        print(f"\nEngine plays {reply.iccs()}\n")


if __name__ == "__main__":
    main()
