"""
Position Model

The 10x9 board, the captured lists and the real game history. All
mutation goes through two paired operations:

    apply(move) -> UndoToken     revert(token)

Search uses them directly (usually through the `moved()` context manager)
and never touches the game history. `move_piece()` and `undo()` wrap the
same pair and additionally append to / pop from the history, which is what
the three-fold repetition rule looks at.

The fingerprint (`position.key`) is a Zobrist hash kept up to date on every
apply/revert. In the blind variant the concealment state contributes to it
as well.
"""

from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from xiangqi_engine.board.pieces import (
    BOARD_COLS,
    BOARD_ROWS,
    Move,
    Piece,
    Role,
    Side,
    in_bounds,
    square_of,
)
from xiangqi_engine.board.zobrist import piece_key

# fmt: off
STANDARD_LAYOUT = [
    "rnbakabnr",  # 0: Black back rank
    ".........",
    ".c.....c.",  # 2: Black cannons
    "p.p.p.p.p",  # 3: Black soldiers
    ".........",  # 4: river
    ".........",  # 5: river
    "P.P.P.P.P",  # 6: Red soldiers
    ".C.....C.",  # 7: Red cannons
    ".........",
    "RNBAKABNR",  # 9: Red back rank
]
# fmt: on


class UndoToken(NamedTuple):
    """Everything revert() needs to restore the position exactly."""

    move: Move
    piece: Piece
    captured: Optional[Piece]
    concealment: Optional[tuple]


@dataclass
class MoveRecord:
    """
    Entry in the game history.

    Attributes:
        from_row, from_col, to_row, to_col: Move coordinates
        piece: The piece that moved
        captured: The piece that was captured, if any
        fingerprint: Position fingerprint after the move
        token: Undo token used to reverse the move
    """

    from_row: int
    from_col: int
    to_row: int
    to_col: int
    piece: Piece
    captured: Optional[Piece]
    fingerprint: int
    token: UndoToken = field(repr=False, compare=False)

    @property
    def move(self) -> Move:
        return Move(self.from_row, self.from_col, self.to_row, self.to_col)


class Position:
    """
    Mutable board position.

    Attributes:
        grid: 10x9 list of rows; each cell is a Piece or None
        history: Real game history (MoveRecord list)
        captured_by: Pieces each side has taken, in capture order
        captured_concealed: Parallel flags, True if the captured piece was
            still concealed when it was taken
        concealment: ConcealmentState for the blind variant, else None
        key: Incrementally maintained fingerprint
    """

    def __init__(self, concealment=None):
        self.grid: List[List[Optional[Piece]]] = [
            [None] * BOARD_COLS for _ in range(BOARD_ROWS)
        ]
        self.history: List[MoveRecord] = []
        self.captured_by: Dict[Side, List[Piece]] = {Side.RED: [], Side.BLACK: []}
        self.captured_concealed: Dict[Side, List[bool]] = {
            Side.RED: [],
            Side.BLACK: [],
        }
        self.concealment = concealment
        self.key = 0
        self._generals: Dict[Side, Optional[Tuple[int, int]]] = {
            Side.RED: None,
            Side.BLACK: None,
        }
        self._seen: Counter = Counter()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def piece_at(self, row: int, col: int) -> Optional[Piece]:
        """Piece on a square, or None for empty or off-board squares."""
        if not in_bounds(row, col):
            return None
        return self.grid[row][col]

    def pieces(self) -> Iterator[Tuple[int, int, Piece]]:
        """Yield (row, col, piece) for every occupied square."""
        for row, cells in enumerate(self.grid):
            for col, piece in enumerate(cells):
                if piece is not None:
                    yield row, col, piece

    def general_square(self, side: Side) -> Optional[Tuple[int, int]]:
        return self._generals[side]

    def repetition_count(self, fingerprint: int) -> int:
        """How many times a fingerprint occurs in the real game history."""
        return self._seen[fingerprint]

    def is_concealed(self, row: int, col: int) -> bool:
        return self.concealment is not None and self.concealment.is_concealed(
            square_of(row, col)
        )

    def board_state(self) -> Tuple[Tuple[Optional[str], ...], ...]:
        """Read-only snapshot of the grid as piece symbols (None = empty)."""
        return tuple(
            tuple(piece.symbol if piece else None for piece in cells)
            for cells in self.grid
        )

    def last_move(self) -> Optional[MoveRecord]:
        return self.history[-1] if self.history else None

    # ------------------------------------------------------------------
    # Low-level placement (keeps key and general squares in sync)
    # ------------------------------------------------------------------

    def _place(self, row: int, col: int, piece: Piece):
        self.grid[row][col] = piece
        self.key ^= piece_key(piece, square_of(row, col))
        if piece.role is Role.GENERAL:
            self._generals[piece.side] = (row, col)

    def _remove(self, row: int, col: int) -> Optional[Piece]:
        piece = self.grid[row][col]
        if piece is None:
            return None
        self.grid[row][col] = None
        self.key ^= piece_key(piece, square_of(row, col))
        if piece.role is Role.GENERAL and self._generals[piece.side] == (row, col):
            self._generals[piece.side] = None
        return piece

    def set_piece(self, row: int, col: int, piece: Optional[Piece]):
        """Put a piece (or None) on a square. Used for setup only."""
        self._remove(row, col)
        if piece is not None:
            self._place(row, col, piece)

    # ------------------------------------------------------------------
    # Paired mutation
    # ------------------------------------------------------------------

    def apply(self, move: Move, provisional: bool = False) -> UndoToken:
        """
        Play a move on the board without recording it in the history.

        Args:
            move: Move to play (not validated)
            provisional: Blind variant only. Marks a concealed mover as
                revealed to the rules but still unknown to the evaluator.

        Returns:
            UndoToken to pass to revert()

        Raises:
            ValueError: If the origin square is empty
        """
        fr, fc, tr, tc = move
        piece = self.grid[fr][fc]
        if piece is None:
            raise ValueError(f"No piece on the origin square of {move}")

        concealment = self.concealment
        from_sq = square_of(fr, fc)
        to_sq = square_of(tr, tc)
        concealment_token = None
        captured_was_concealed = False
        if concealment is not None:
            captured_was_concealed = concealment.is_hidden(to_sq)
            self.key ^= concealment.key_at(from_sq) ^ concealment.key_at(to_sq)
            concealment_token = concealment.apply(from_sq, to_sq, provisional)
            self.key ^= concealment.key_at(from_sq) ^ concealment.key_at(to_sq)

        self._remove(fr, fc)
        captured = self._remove(tr, tc)
        self._place(tr, tc, piece)

        if captured is not None:
            taker = captured.side.opponent
            self.captured_by[taker].append(captured)
            self.captured_concealed[taker].append(captured_was_concealed)

        return UndoToken(move, piece, captured, concealment_token)

    def revert(self, token: UndoToken):
        """Exactly reverse an apply()."""
        fr, fc, tr, tc = token.move

        self._remove(tr, tc)
        self._place(fr, fc, token.piece)
        if token.captured is not None:
            self._place(tr, tc, token.captured)
            taker = token.captured.side.opponent
            self.captured_by[taker].pop()
            self.captured_concealed[taker].pop()

        concealment = self.concealment
        if concealment is not None:
            from_sq = square_of(fr, fc)
            to_sq = square_of(tr, tc)
            self.key ^= concealment.key_at(from_sq) ^ concealment.key_at(to_sq)
            concealment.revert(from_sq, to_sq, token.concealment)
            self.key ^= concealment.key_at(from_sq) ^ concealment.key_at(to_sq)

    @contextmanager
    def moved(self, move: Move, provisional: bool = False):
        """Context manager that applies a move and always reverts it."""
        token = self.apply(move, provisional)
        try:
            yield token
        finally:
            self.revert(token)

    # ------------------------------------------------------------------
    # Game history
    # ------------------------------------------------------------------

    def move_piece(self, from_row: int, from_col: int, to_row: int, to_col: int) -> MoveRecord:
        """
        Play a move and record it in the game history.

        The caller is responsible for checking legality first.
        """
        token = self.apply(Move(from_row, from_col, to_row, to_col))
        record = MoveRecord(
            from_row,
            from_col,
            to_row,
            to_col,
            token.piece,
            token.captured,
            self.key,
            token,
        )
        self.history.append(record)
        self._seen[self.key] += 1
        return record

    def undo(self) -> Optional[MoveRecord]:
        """Take back the last recorded move; None if there is none."""
        if not self.history:
            return None
        record = self.history.pop()
        self._seen[record.fingerprint] -= 1
        if not self._seen[record.fingerprint]:
            del self._seen[record.fingerprint]
        self.revert(record.token)
        return record

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    def copy(self) -> "Position":
        """
        Independent copy with the same board, captured lists and history.

        History records share their (immutable) undo tokens with the
        original, so the copy can undo moves too.
        """
        clone = Position(self.concealment.copy() if self.concealment else None)
        clone.grid = [list(cells) for cells in self.grid]
        clone.history = list(self.history)
        clone.captured_by = {side: list(items) for side, items in self.captured_by.items()}
        clone.captured_concealed = {
            side: list(items) for side, items in self.captured_concealed.items()
        }
        clone.key = self.key
        clone._generals = dict(self._generals)
        clone._seen = Counter(self._seen)
        return clone

    def __repr__(self) -> str:
        rows = ["".join(p.symbol if p else "." for p in cells) for cells in self.grid]
        return "Position(\n  " + "\n  ".join(rows) + "\n)"


def standard_position() -> Position:
    """Fresh position with the standard starting layout."""
    position = Position()
    for row, line in enumerate(STANDARD_LAYOUT):
        for col, symbol in enumerate(line):
            if symbol != ".":
                position.set_piece(row, col, Piece.from_symbol(symbol))
    return position
