"""
Concealment Layer (blind variant)

In the blind variant every non-general piece starts face down on one of its
side's fixed slots. What the rules and the evaluator know about such a piece
comes from this module:

    - Side: inferred from the board half of the slot (rows 5-9 are Red)
    - Role: the role originally assigned to the slot (the "slot role"), which
      migrates with the piece on every move
    - Value: the expected value of everything of that side that has not been
      seen yet

The first move of a concealed piece reveals it for good. During search a
hypothetical move marks the piece *provisional* instead. It leaves the
concealed set, so ownership follows the true piece, but it still moves by
its slot role under the palace and river limits, and the evaluator keeps
treating it as unknown so the search never profits from identities it could
not have seen.
"""

from collections import Counter
from typing import Dict, Iterable, List, Optional, Set, Tuple

from xiangqi_engine.board.pieces import (
    BOARD_COLS,
    Piece,
    Role,
    Side,
    square_of,
)
from xiangqi_engine.board.position import STANDARD_LAYOUT, Position
from xiangqi_engine.board.zobrist import CONCEALED_KEYS, PROVISIONAL_KEYS, slot_role_key

SHUFFLE_SCOPES = ("side", "group")

# Slot groups per side as (row, col). Black mirrors Red across the river.
_RED_SLOT_GROUPS = {
    "back": [(9, col) for col in (0, 1, 2, 3, 5, 6, 7, 8)],
    "cannon": [(7, 1), (7, 7)],
    "soldier": [(6, col) for col in (0, 2, 4, 6, 8)],
}

SLOT_GROUPS = {
    Side.RED: _RED_SLOT_GROUPS,
    Side.BLACK: {
        name: [(9 - row, col) for row, col in slots]
        for name, slots in _RED_SLOT_GROUPS.items()
    },
}

# Non-general pieces each side starts with, by slot group
GROUP_COMPOSITION = {
    "back": {Role.ROOK: 2, Role.HORSE: 2, Role.ELEPHANT: 2, Role.ADVISOR: 2},
    "cannon": {Role.CANNON: 2},
    "soldier": {Role.SOLDIER: 5},
}

ROLE_GROUP = {
    role: group for group, roles in GROUP_COMPOSITION.items() for role in roles
}

CATEGORY_COMPOSITION = dict(GROUP_COMPOSITION)
CATEGORY_COMPOSITION["all"] = {
    role: count for roles in GROUP_COMPOSITION.values() for role, count in roles.items()
}


def category_of(role: Role, scope: str) -> str:
    """
    Category that determines the unseen pool of a concealed piece.

    With the "side" shuffle any slot can hold any piece, so the pool is the
    whole side. With the "group" shuffle pieces only move within their
    slot group.
    """
    if scope == "side":
        return "all"
    return ROLE_GROUP[role]


# Token layout: (from_concealed, from_provisional, from_slot,
#                to_concealed, to_provisional, to_slot)
ConcealmentToken = Tuple[bool, bool, Optional[Role], bool, bool, Optional[Role]]


class ConcealmentState:
    """
    Concealed set and slot-role map of a blind game.

    Attributes:
        shuffle: Shuffle scope the game was dealt with ("side" or "group")
        concealed: Squares whose piece has never moved
        provisional: Squares whose piece was revealed by a search move only
        slot_roles: Square -> originally assigned role, for every non-general
            piece still on the board
    """

    def __init__(self, shuffle: str = "side"):
        if shuffle not in SHUFFLE_SCOPES:
            raise ValueError(f"shuffle must be one of {SHUFFLE_SCOPES}, got {shuffle!r}")
        self.shuffle = shuffle
        self.concealed: Set[int] = set()
        self.provisional: Set[int] = set()
        self.slot_roles: Dict[int, Role] = {}

    def is_concealed(self, square: int) -> bool:
        return square in self.concealed

    def is_hidden(self, square: int) -> bool:
        """True if the evaluator must not look at the true identity."""
        return square in self.concealed or square in self.provisional

    def slot_role(self, square: int) -> Optional[Role]:
        return self.slot_roles.get(square)

    def key_at(self, square: int) -> int:
        """Fingerprint contribution of one square's concealment state."""
        key = 0
        if square in self.concealed:
            key ^= CONCEALED_KEYS[square]
        if square in self.provisional:
            key ^= PROVISIONAL_KEYS[square]
        role = self.slot_roles.get(square)
        if role is not None:
            key ^= slot_role_key(role, square)
        return key

    def apply(self, from_sq: int, to_sq: int, provisional: bool = False) -> ConcealmentToken:
        """
        Update the state for a piece moving from_sq -> to_sq.

        Whatever sat on to_sq is captured, so its entries are dropped. The
        mover's slot role follows it. A concealed mover is revealed, or only
        marked provisional when `provisional` is set.
        """
        token = (
            from_sq in self.concealed,
            from_sq in self.provisional,
            self.slot_roles.get(from_sq),
            to_sq in self.concealed,
            to_sq in self.provisional,
            self.slot_roles.get(to_sq),
        )
        from_concealed, from_provisional, from_slot = token[:3]

        self.concealed.discard(from_sq)
        self.concealed.discard(to_sq)
        self.provisional.discard(from_sq)
        self.provisional.discard(to_sq)
        self.slot_roles.pop(from_sq, None)
        self.slot_roles.pop(to_sq, None)

        if from_slot is not None:
            self.slot_roles[to_sq] = from_slot
        if from_provisional or (from_concealed and provisional):
            self.provisional.add(to_sq)
        return token

    def revert(self, from_sq: int, to_sq: int, token: ConcealmentToken):
        """Restore both squares exactly as they were before apply()."""
        for square, (concealed, provisional, slot) in (
            (from_sq, token[:3]),
            (to_sq, token[3:]),
        ):
            if concealed:
                self.concealed.add(square)
            else:
                self.concealed.discard(square)
            if provisional:
                self.provisional.add(square)
            else:
                self.provisional.discard(square)
            if slot is not None:
                self.slot_roles[square] = slot
            else:
                self.slot_roles.pop(square, None)

    def copy(self) -> "ConcealmentState":
        clone = ConcealmentState(self.shuffle)
        clone.concealed = set(self.concealed)
        clone.provisional = set(self.provisional)
        clone.slot_roles = dict(self.slot_roles)
        return clone

    def to_dict(self) -> dict:
        """Plain-data snapshot (provisional marks are search-only and not saved)."""
        return {
            "shuffle": self.shuffle,
            "concealed": sorted(self.concealed),
            "slot_roles": {str(sq): role.value for sq, role in sorted(self.slot_roles.items())},
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ConcealmentState":
        state = cls(data.get("shuffle", "side"))
        state.concealed = {int(sq) for sq in data.get("concealed", [])}
        state.slot_roles = {
            int(sq): Role(letter) for sq, letter in data.get("slot_roles", {}).items()
        }
        return state


def unseen_pool(position, side: Side, category: str) -> Counter:
    """
    Role -> count of the side's pieces in a category nobody has seen yet.

    Starts from the initial composition and removes every visible piece:
    revealed pieces on the board and pieces captured after being revealed.
    """
    composition = CATEGORY_COMPOSITION[category]
    pool = Counter(composition)
    concealment = position.concealment

    for row, col, piece in position.pieces():
        if piece.side is not side or piece.role not in composition:
            continue
        if concealment is not None and concealment.is_hidden(square_of(row, col)):
            continue
        pool[piece.role] -= 1

    taker = side.opponent
    for piece, was_concealed in zip(
        position.captured_by[taker], position.captured_concealed[taker]
    ):
        if not was_concealed and piece.role in composition:
            pool[piece.role] -= 1

    return +pool


def expected_value(position, side: Side, category: str, values: Dict[Role, int]) -> float:
    """Mean value of the unseen pool, or 0.0 when it is empty."""
    pool = unseen_pool(position, side, category)
    count = sum(pool.values())
    if not count:
        return 0.0
    return sum(values[role] * n for role, n in pool.items()) / count


def _deal(rng, slots: List[Tuple[int, int]], roles: Iterable[Role]) -> List[Tuple[Tuple[int, int], Role]]:
    dealt = list(roles)
    rng.shuffle(dealt)
    return list(zip(slots, dealt))


def blind_position(rng, shuffle: str = "side"):
    """
    Deal a fresh blind game.

    Each side's non-general pieces are shuffled onto that side's slots
    independently of the other side. Generals keep their square and stay
    visible.

    Args:
        rng: random.Random used for the deal
        shuffle: "side" shuffles all 15 slots together, "group" shuffles the
            back rank, the cannon pair and the soldiers separately

    Returns:
        Position with a populated ConcealmentState
    """
    state = ConcealmentState(shuffle)
    position = Position(state)

    for side in (Side.RED, Side.BLACK):
        groups = SLOT_GROUPS[side]
        slot_roles = {
            (row, col): Role(STANDARD_LAYOUT[row][col].lower())
            for slots in groups.values()
            for row, col in slots
        }

        if shuffle == "side":
            slots = [slot for group in groups.values() for slot in group]
            deal = _deal(rng, slots, [slot_roles[slot] for slot in slots])
        else:
            deal = []
            for group in groups.values():
                deal.extend(_deal(rng, group, [slot_roles[slot] for slot in group]))

        for (row, col), role in deal:
            square = square_of(row, col)
            state.concealed.add(square)
            state.slot_roles[square] = slot_roles[(row, col)]
            position.set_piece(row, col, Piece(role, side))

        general_row = 9 if side is Side.RED else 0
        position.set_piece(general_row, 4, Piece(Role.GENERAL, side))

    # Pieces were placed before the concealment keys; fold those in now
    for square in range(BOARD_COLS * 10):
        position.key ^= state.key_at(square)
    return position
