"""
Movement Geometry

Pure per-role movement predicates over a 10x9 grid. Nothing here knows
about check, repetition or variants: the caller passes the role and side
that should be used for the moving piece and whether river / palace
confinement applies.

Roles:
    - Rook: any distance along a row or column, nothing in between
    - Cannon: like a rook when moving; captures need exactly one screen
    - Horse: (±2, ±1) or (±1, ±2); the orthogonal leg square must be empty
    - Elephant: two steps diagonally; the eye square must be empty
    - Advisor: one step diagonally
    - General: one step orthogonally, always inside the palace
    - Soldier: one step forward; sideways too once across the river
"""

from typing import Iterator, List, Optional, Sequence, Tuple

from xiangqi_engine.board.pieces import BOARD_COLS, BOARD_ROWS, Role, Side, in_bounds

Grid = Sequence[Sequence[Optional[object]]]

ORTHOGONAL = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONAL = ((-1, -1), (-1, 1), (1, -1), (1, 1))

# (delta_row, delta_col, leg_row, leg_col)
HORSE_JUMPS = (
    (-2, -1, -1, 0), (-2, 1, -1, 0),
    (2, -1, 1, 0), (2, 1, 1, 0),
    (-1, -2, 0, -1), (1, -2, 0, -1),
    (-1, 2, 0, 1), (1, 2, 0, 1),
)


def in_palace(side: Side, row: int, col: int) -> bool:
    if not 3 <= col <= 5:
        return False
    if side is Side.RED:
        return 7 <= row <= 9
    return 0 <= row <= 2


def on_own_half(side: Side, row: int) -> bool:
    return row >= 5 if side is Side.RED else row <= 4


def has_crossed_river(side: Side, row: int) -> bool:
    return not on_own_half(side, row)


def count_between(grid: Grid, fr: int, fc: int, tr: int, tc: int) -> int:
    """Number of pieces strictly between two squares on a row or column."""
    count = 0
    if fr == tr:
        step = 1 if tc > fc else -1
        for col in range(fc + step, tc, step):
            if grid[fr][col] is not None:
                count += 1
    else:
        step = 1 if tr > fr else -1
        for row in range(fr + step, tr, step):
            if grid[row][fc] is not None:
                count += 1
    return count


def is_geometric(
    grid: Grid,
    role: Role,
    side: Side,
    fr: int,
    fc: int,
    tr: int,
    tc: int,
    confined: bool = True,
) -> bool:
    """
    Check whether a piece of the given role/side can reach (tr, tc).

    Occupancy of the target square only matters for the cannon. Ownership of
    the target is the caller's concern.

    Args:
        grid: Board cells (None = empty)
        role: Movement role of the piece
        side: Side the piece moves for
        fr, fc: Origin square
        tr, tc: Target square (must be on the board)
        confined: Apply river confinement to elephants and palace
            confinement to advisors

    Returns:
        True if the move is geometrically possible
    """
    dr = tr - fr
    dc = tc - fc
    if dr == 0 and dc == 0:
        return False
    adr = abs(dr)
    adc = abs(dc)

    if role is Role.ROOK:
        if dr and dc:
            return False
        return count_between(grid, fr, fc, tr, tc) == 0

    if role is Role.CANNON:
        if dr and dc:
            return False
        screens = count_between(grid, fr, fc, tr, tc)
        if grid[tr][tc] is None:
            return screens == 0
        return screens == 1

    if role is Role.HORSE:
        if adr == 2 and adc == 1:
            return grid[fr + dr // 2][fc] is None
        if adr == 1 and adc == 2:
            return grid[fr][fc + dc // 2] is None
        return False

    if role is Role.ELEPHANT:
        if adr != 2 or adc != 2:
            return False
        if confined and not on_own_half(side, tr):
            return False
        return grid[fr + dr // 2][fc + dc // 2] is None

    if role is Role.ADVISOR:
        if adr != 1 or adc != 1:
            return False
        return not confined or in_palace(side, tr, tc)

    if role is Role.GENERAL:
        if adr + adc != 1:
            return False
        return in_palace(side, tr, tc)

    if role is Role.SOLDIER:
        if dr == side.forward and dc == 0:
            return True
        return dr == 0 and adc == 1 and has_crossed_river(side, fr)

    return False


def candidate_targets(role: Role, side: Side, row: int, col: int) -> Iterator[Tuple[int, int]]:
    """
    Yield the on-board squares a piece of this role could possibly reach.

    The list is a superset; every candidate still has to pass is_geometric.
    """
    if role in (Role.ROOK, Role.CANNON):
        for r in range(BOARD_ROWS):
            if r != row:
                yield r, col
        for c in range(BOARD_COLS):
            if c != col:
                yield row, c
        return

    if role is Role.HORSE:
        deltas: Sequence[Tuple[int, int]] = [(jump[0], jump[1]) for jump in HORSE_JUMPS]
    elif role is Role.ELEPHANT:
        deltas = [(2 * dr, 2 * dc) for dr, dc in DIAGONAL]
    elif role is Role.ADVISOR:
        deltas = DIAGONAL
    elif role is Role.GENERAL:
        deltas = ORTHOGONAL
    else:
        deltas = ((side.forward, 0), (0, -1), (0, 1))

    for dr, dc in deltas:
        if in_bounds(row + dr, col + dc):
            yield row + dr, col + dc


def attacker_squares(grid: Grid, row: int, col: int) -> List[Tuple[int, int]]:
    """
    Squares that could hold a piece attacking (row, col).

    Covers the first two pieces on each orthogonal ray (rooks, cannons,
    soldiers, generals), the eight horse origins and the one- and two-step
    diagonals (advisors, elephants). Only occupied squares are returned.
    """
    squares = []
    for dr, dc in ORTHOGONAL:
        found = 0
        r, c = row + dr, col + dc
        while in_bounds(r, c) and found < 2:
            if grid[r][c] is not None:
                squares.append((r, c))
                found += 1
            r += dr
            c += dc

    for dr, dc, _, _ in HORSE_JUMPS:
        r, c = row - dr, col - dc
        if in_bounds(r, c) and grid[r][c] is not None:
            squares.append((r, c))

    for dr, dc in DIAGONAL:
        for distance in (1, 2):
            r, c = row + dr * distance, col + dc * distance
            if in_bounds(r, c) and grid[r][c] is not None:
                squares.append((r, c))

    return squares
