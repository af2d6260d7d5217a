"""
Pieces, Sides and Moves

Basic value types shared by every other module.

Board Orientation:
    - Row 0 = Black's back rank
    - Row 9 = Red's back rank
    - Column 0 = a-file, Column 8 = i-file (from Red's point of view)
    - Rows 0-4 are Black's half, rows 5-9 are Red's half (the river
      runs between rows 4 and 5)

Notation:
    Moves are written in ICCS coordinates, e.g. "h2e2". Files are a-i
    (columns 0-8) and ranks are 0-9 counted from Red's back rank, so
    rank = 9 - row.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Tuple

BOARD_ROWS = 10
BOARD_COLS = 9
NUM_SQUARES = BOARD_ROWS * BOARD_COLS

FILES = "abcdefghi"


class Side(Enum):
    """The two players. Red moves first and sits on rows 5-9."""

    RED = "red"
    BLACK = "black"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self is Side.RED else Side.RED

    @property
    def forward(self) -> int:
        """Row delta of a forward step for this side."""
        return -1 if self is Side.RED else 1


class Role(Enum):
    """Piece roles, valued by their FEN letter."""

    GENERAL = "k"
    ADVISOR = "a"
    ELEPHANT = "b"
    HORSE = "n"
    ROOK = "r"
    CANNON = "c"
    SOLDIER = "p"


ROLE_INDEX = {role: index for index, role in enumerate(Role)}


@dataclass(frozen=True)
class Piece:
    """A piece on the board: a role owned by a side."""

    role: Role
    side: Side

    @property
    def symbol(self) -> str:
        """FEN letter: upper case for Red, lower case for Black."""
        letter = self.role.value
        return letter.upper() if self.side is Side.RED else letter

    @classmethod
    def from_symbol(cls, symbol: str) -> "Piece":
        """
        Build a piece from its FEN letter.

        Raises:
            ValueError: If the letter is not a xiangqi piece
        """
        try:
            role = Role(symbol.lower())
        except ValueError:
            raise ValueError(f"Unknown piece symbol: {symbol!r}") from None
        side = Side.RED if symbol.isupper() else Side.BLACK
        return cls(role, side)

    def __str__(self) -> str:
        return self.symbol


class Move(NamedTuple):
    """A from/to coordinate pair."""

    from_row: int
    from_col: int
    to_row: int
    to_col: int

    @property
    def from_square(self) -> int:
        return square_of(self.from_row, self.from_col)

    @property
    def to_square(self) -> int:
        return square_of(self.to_row, self.to_col)

    def iccs(self) -> str:
        """ICCS text for this move, e.g. 'h2e2'."""
        return (
            f"{FILES[self.from_col]}{9 - self.from_row}"
            f"{FILES[self.to_col]}{9 - self.to_row}"
        )

    @classmethod
    def from_iccs(cls, text: str) -> "Move":
        """
        Parse an ICCS move string.

        Raises:
            ValueError: If the text is not four valid coordinate characters
        """
        text = text.strip().lower()
        if len(text) != 4:
            raise ValueError(f"Invalid ICCS move: {text!r}")
        from_col, to_col = FILES.find(text[0]), FILES.find(text[2])
        if from_col < 0 or to_col < 0 or not (text[1].isdigit() and text[3].isdigit()):
            raise ValueError(f"Invalid ICCS move: {text!r}")
        return cls(9 - int(text[1]), from_col, 9 - int(text[3]), to_col)

    def __str__(self) -> str:
        return self.iccs()


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_ROWS and 0 <= col < BOARD_COLS


def square_of(row: int, col: int) -> int:
    return row * BOARD_COLS + col


def coordinates_of(square: int) -> Tuple[int, int]:
    return divmod(square, BOARD_COLS)


def home_side(row: int) -> Side:
    """Side whose half of the board contains this row."""
    return Side.RED if row >= 5 else Side.BLACK
