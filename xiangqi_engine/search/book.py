"""
Built-in opening book.

Standard games are indexed by (position fingerprint, side to move); the
table is built at construction time by replaying a handful of common
opening lines from the start position. Blind games only have a book for the
root of the game, since nothing else about the layout is known.

When several candidate moves exist the engine picks one uniformly at
random. Book moves are always re-validated by the caller.
"""

import logging
from typing import Dict, List, Optional, Tuple

from xiangqi_engine.board.pieces import Move, Side
from xiangqi_engine.board.position import standard_position

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Opening repertoire (ICCS, alternating Red / Black from the start position)
# ---------------------------------------------------------------------------

OPENING_LINES = [
    # Central cannon vs. screen horses
    "h2e2 h9g7 h0g2 i9h9 i0h0 b9c7",
    # Central cannon vs. central cannon, horse development
    "h2e2 b7e7 h0g2 b9c7",
    # Same-direction cannons
    "h2e2 h7e7",
    # Pawn opening
    "c3c4 g6g5 b0c2 b9c7",
    "c3c4 c6c5",
    # Elephant opening
    "c0e2 h7e7",
    # Horse opening
    "b0c2 c6c5",
]

# Root moves of a blind game by side to move (slot rules apply)
BLIND_ROOT_MOVES = {
    Side.RED: ["h2e2", "b2e2", "c3c4", "g3g4", "e3e4"],
    Side.BLACK: ["h7e7", "b7e7", "c6c5", "g6g5"],
}


class OpeningBook:
    """
    Mapping from a book key to an ordered list of candidate moves.

    Attributes:
        entries: (fingerprint, side) -> moves for standard games
        blind_entries: side -> moves for the root of a blind game
    """

    def __init__(self):
        self.entries: Dict[Tuple[int, Side], List[Move]] = {}
        self.blind_entries: Dict[Side, List[Move]] = {}

    def add(self, fingerprint: int, side: Side, move: Move):
        candidates = self.entries.setdefault((fingerprint, side), [])
        if move not in candidates:
            candidates.append(move)

    @classmethod
    def standard(cls, lines: Optional[List[str]] = None) -> "OpeningBook":
        """Build the book by replaying opening lines from the start position."""
        book = cls()
        for line in lines if lines is not None else OPENING_LINES:
            position = standard_position()
            side = Side.RED
            for text in line.split():
                move = Move.from_iccs(text)
                book.add(position.key, side, move)
                position.apply(move)
                side = side.opponent
        for side, moves in BLIND_ROOT_MOVES.items():
            book.blind_entries[side] = [Move.from_iccs(text) for text in moves]
        logger.debug("Opening book built with %d positions", len(book.entries))
        return book

    def candidates(self, position, side: Side, blind: bool = False) -> List[Move]:
        """Candidate moves for a position, or an empty list if out of book."""
        if blind:
            # Only the root of the game
            if position.history:
                return []
            return list(self.blind_entries.get(side, []))
        return list(self.entries.get((position.key, side), []))

    def choose(self, position, side: Side, rng, blind: bool = False) -> Optional[Move]:
        """Pick a candidate uniformly at random (None when out of book)."""
        moves = self.candidates(position, side, blind)
        if not moves:
            return None
        return rng.choice(moves)

    def __len__(self) -> int:
        return len(self.entries)
