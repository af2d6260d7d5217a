"""
Rule Policies

The two variants only differ in how much is known about a piece. A policy
answers that question for the legality engine and the evaluators:

    - side_of: who owns the piece on a square
    - movement_role: which role's geometry the piece moves with
    - confined: whether river / palace confinement applies

StandardPolicy trusts the board. BlindPolicy falls back to the concealment
layer for pieces that are still hidden.
"""

from abc import ABC, abstractmethod
from typing import Optional

from xiangqi_engine.board.pieces import Role, Side, home_side, square_of


class RulePolicy(ABC):
    """Variant-specific answers about pieces on the board."""

    name = "abstract"

    @abstractmethod
    def side_of(self, position, row: int, col: int) -> Optional[Side]:
        """Owner of the piece on a square, or None if the square is empty."""

    @abstractmethod
    def movement_role(self, position, row: int, col: int) -> Optional[Role]:
        """Role whose geometry the piece on a square moves with."""

    @abstractmethod
    def is_hidden(self, position, row: int, col: int) -> bool:
        """True if the piece's true identity is not public."""

    def confined(self, role: Role, hidden: bool) -> bool:
        """Whether elephants keep to their half and advisors to the palace."""
        return True


class StandardPolicy(RulePolicy):
    """Every piece is exactly what it shows."""

    name = "standard"

    def side_of(self, position, row, col):
        piece = position.piece_at(row, col)
        return piece.side if piece else None

    def movement_role(self, position, row, col):
        piece = position.piece_at(row, col)
        return piece.role if piece else None

    def is_hidden(self, position, row, col):
        return False


class BlindPolicy(RulePolicy):
    """
    Blind variant.

    A concealed piece belongs to the side whose half it stands on and moves
    with its slot role under the standard confinement. Once revealed, a
    piece moves with its true role, and elephants and advisors are no longer
    confined.
    """

    name = "blind"

    def side_of(self, position, row, col):
        piece = position.piece_at(row, col)
        if piece is None:
            return None
        if position.is_concealed(row, col):
            return home_side(row)
        return piece.side

    def movement_role(self, position, row, col):
        piece = position.piece_at(row, col)
        if piece is None:
            return None
        if self.is_hidden(position, row, col):
            slot_role = position.concealment.slot_role(square_of(row, col))
            if slot_role is not None:
                return slot_role
        return piece.role

    def is_hidden(self, position, row, col):
        concealment = position.concealment
        return concealment is not None and concealment.is_hidden(square_of(row, col))

    def confined(self, role, hidden):
        if hidden:
            return True
        return role not in (Role.ELEPHANT, Role.ADVISOR)


def policy_for(variant: str) -> RulePolicy:
    """Build the policy for a variant name ("standard" or "blind")."""
    if variant == "standard":
        return StandardPolicy()
    if variant == "blind":
        return BlindPolicy()
    raise ValueError(f"Unknown variant: {variant!r}")
