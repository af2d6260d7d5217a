"""
Zobrist Keys

Random 64-bit numbers for every (piece, square) combination plus the
concealment state of the blind variant. A position fingerprint is the XOR
of the keys of everything on the board, which lets Position update it
incrementally on every move: XOR out the old square, XOR in the new one.

Hash components:
    - 14 pieces (7 roles * 2 sides) * 90 squares = 1260 numbers
    - Concealed flag per square = 90 numbers
    - Provisional-reveal flag per square = 90 numbers (search only)
    - Slot role per square: 7 roles * 90 squares = 630 numbers
    - Side to move (XORed in for Black) = 1 number

Reference:
    https://www.chessprogramming.org/Zobrist_Hashing
"""

import random

from xiangqi_engine.board.pieces import (
    NUM_SQUARES,
    ROLE_INDEX,
    Role,
    Side,
    square_of,
)

# Private generator with a fixed seed: book keys must be identical across runs
_rng = random.Random(0x58513A)

# [side][role][square]
PIECE_KEYS = {
    side: [[_rng.getrandbits(64) for _ in range(NUM_SQUARES)] for _ in Role]
    for side in Side
}

CONCEALED_KEYS = [_rng.getrandbits(64) for _ in range(NUM_SQUARES)]

PROVISIONAL_KEYS = [_rng.getrandbits(64) for _ in range(NUM_SQUARES)]

# [role][square]
SLOT_ROLE_KEYS = [[_rng.getrandbits(64) for _ in range(NUM_SQUARES)] for _ in Role]

SIDE_TO_MOVE_KEY = _rng.getrandbits(64)


def piece_key(piece, square: int) -> int:
    return PIECE_KEYS[piece.side][ROLE_INDEX[piece.role]][square]


def slot_role_key(role: Role, square: int) -> int:
    return SLOT_ROLE_KEYS[ROLE_INDEX[role]][square]


def search_key(fingerprint: int, side: Side) -> int:
    """Combine a position fingerprint with the side to move."""
    if side is Side.BLACK:
        return fingerprint ^ SIDE_TO_MOVE_KEY
    return fingerprint


def zobrist_hash(position) -> int:
    """
    Compute the fingerprint of a position from scratch.

    Position keeps the same value up to date incrementally; this function
    is the reference it must always agree with.

    Args:
        position: Position to hash

    Returns:
        64-bit integer fingerprint
    """
    hash_value = 0
    for row, col, piece in position.pieces():
        hash_value ^= piece_key(piece, square_of(row, col))

    concealment = position.concealment
    if concealment is not None:
        for square in range(NUM_SQUARES):
            hash_value ^= concealment.key_at(square)

    return hash_value
