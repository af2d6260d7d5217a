"""
Text Representations

Conversion between Position objects and xiangqi FEN.

FEN Layout:
    Ten ranks separated by '/', listed from Black's back rank (row 0) to
    Red's back rank (row 9). Digits 1-9 count empty squares. Upper case is
    Red, lower case is Black, using the letters k a b n r c p. The second
    field is the side to move: 'w' (or 'r') for Red, 'b' for Black. Any
    further fields are ignored.

    Example (start position):
        rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR w
"""

from typing import Tuple

from xiangqi_engine.board.pieces import BOARD_COLS, BOARD_ROWS, Piece, Side
from xiangqi_engine.board.position import Position

START_FEN = "rnbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR w"


def position_from_fen(fen: str, concealment=None) -> Tuple[Position, Side]:
    """
    Parse a xiangqi FEN string.

    Args:
        fen: FEN text
        concealment: Optional ConcealmentState to attach (blind variant)

    Returns:
        Tuple of (position, side to move)

    Raises:
        ValueError: If the FEN is malformed
    """
    fields = fen.strip().split()
    if not fields:
        raise ValueError("Empty FEN string")

    ranks = fields[0].split("/")
    if len(ranks) != BOARD_ROWS:
        raise ValueError(f"FEN must have {BOARD_ROWS} ranks, got {len(ranks)}")

    position = Position()
    for row, rank in enumerate(ranks):
        col = 0
        for char in rank:
            if char.isdigit():
                col += int(char)
                continue
            if col >= BOARD_COLS:
                raise ValueError(f"Rank {row} of FEN is too long: {rank!r}")
            position.set_piece(row, col, Piece.from_symbol(char))
            col += 1
        if col != BOARD_COLS:
            raise ValueError(
                f"Rank {row} of FEN must describe {BOARD_COLS} files, got {col}: {rank!r}"
            )

    side_field = fields[1].lower() if len(fields) > 1 else "w"
    if side_field in ("w", "r"):
        side = Side.RED
    elif side_field == "b":
        side = Side.BLACK
    else:
        raise ValueError(f"Invalid side to move in FEN: {fields[1]!r}")

    if concealment is not None:
        position.concealment = concealment
        for square in range(BOARD_ROWS * BOARD_COLS):
            position.key ^= concealment.key_at(square)

    return position, side


def position_to_fen(position: Position, side: Side = Side.RED) -> str:
    """Serialize the board (true identities) and side to move as FEN."""
    ranks = []
    for cells in position.grid:
        text = ""
        empty = 0
        for piece in cells:
            if piece is None:
                empty += 1
                continue
            if empty:
                text += str(empty)
                empty = 0
            text += piece.symbol
        if empty:
            text += str(empty)
        ranks.append(text)
    return "/".join(ranks) + (" w" if side is Side.RED else " b")
