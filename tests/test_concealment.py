"""
Unit Tests for the Blind Variant

Tests for dealing, revealing, provisional reveals and exact undo of the
concealment layer.
"""

import random
from collections import Counter

import pytest

from xiangqi_engine.board import (
    ConcealmentState,
    Move,
    Role,
    Side,
    blind_position,
    standard_position,
    zobrist_hash,
)
from xiangqi_engine.board.concealment import SLOT_GROUPS
from xiangqi_engine.board.position import STANDARD_LAYOUT


def square(row, col):
    return row * 9 + col


@pytest.fixture
def position():
    """A seeded blind deal."""
    return blind_position(random.Random(42))


class TestDeal:
    """Tests for blind_position."""

    def test_every_non_general_is_concealed(self, position):
        """Test that all 30 non-general pieces start face down."""
        state = position.concealment
        assert len(state.concealed) == 30
        assert not state.is_concealed(square(9, 4))
        assert not state.is_concealed(square(0, 4))
        assert position.piece_at(9, 4).role is Role.GENERAL
        assert position.piece_at(0, 4).role is Role.GENERAL

    def test_slot_roles_follow_standard_layout(self, position):
        """Test that slot roles are the standard roles of the squares."""
        for sq, role in position.concealment.slot_roles.items():
            row, col = divmod(sq, 9)
            assert role is Role(STANDARD_LAYOUT[row][col].lower())

    def test_composition_per_side(self, position):
        """Test that each side keeps its own standard set of pieces."""
        standard = Counter(piece for _, _, piece in standard_position().pieces())
        dealt = Counter(piece for _, _, piece in position.pieces())
        assert dealt == standard
        for row, col, piece in position.pieces():
            assert piece.side is (Side.RED if row >= 5 else Side.BLACK)

    def test_seeded_deal_is_reproducible(self):
        """Test that the same seed deals the same layout."""
        first = blind_position(random.Random(7))
        second = blind_position(random.Random(7))
        assert first.board_state() == second.board_state()
        assert first.key == second.key

    def test_group_shuffle_keeps_groups(self):
        """Test that the group shuffle only permutes within slot groups."""
        for seed in range(5):
            position = blind_position(random.Random(seed), shuffle="group")
            for groups in SLOT_GROUPS.values():
                for row, col in groups["cannon"]:
                    assert position.piece_at(row, col).role is Role.CANNON
                for row, col in groups["soldier"]:
                    assert position.piece_at(row, col).role is Role.SOLDIER

    def test_fingerprint_matches_recomputation(self, position):
        """Test that the dealt key includes the concealment state."""
        assert position.key == zobrist_hash(position)
        assert position.key != standard_position().key

    def test_invalid_shuffle_raises(self):
        """Test that an unknown shuffle scope is rejected."""
        with pytest.raises(ValueError):
            ConcealmentState("board")


class TestReveal:
    """Tests for revealing on move and exact undo."""

    def test_first_move_reveals(self, position):
        """Test that a moved piece leaves the concealed set with its slot role."""
        state = position.concealment
        record = position.move_piece(6, 4, 5, 4)

        assert not state.is_concealed(square(5, 4))
        assert not state.is_hidden(square(5, 4))
        assert state.slot_role(square(5, 4)) is Role.SOLDIER
        assert state.slot_role(square(6, 4)) is None
        assert len(state.concealed) == 29
        assert record.fingerprint == zobrist_hash(position)

    def test_undo_restores_concealment(self, position):
        """Test that undo restores concealed set, slot roles and key."""
        state = position.concealment
        concealed = set(state.concealed)
        slot_roles = dict(state.slot_roles)
        key = position.key

        position.move_piece(6, 4, 5, 4)
        position.undo()

        assert state.concealed == concealed
        assert state.slot_roles == slot_roles
        assert position.key == key

    def test_capture_of_concealed_piece_is_marked(self, position):
        """Test that the capture list records the victim was still concealed."""
        state = position.concealment
        # Cannon slot takes the horse slot over the black cannon slot
        victim = position.piece_at(0, 1)
        position.move_piece(7, 1, 0, 1)

        assert position.captured_by[Side.RED][-1] == victim
        assert position.captured_concealed[Side.RED][-1] is True
        assert not state.is_concealed(square(0, 1))
        assert state.slot_role(square(0, 1)) is Role.CANNON

        position.undo()
        assert state.is_concealed(square(0, 1))
        assert state.slot_role(square(0, 1)) is Role.HORSE
        assert position.captured_by[Side.RED] == []

    def test_provisional_move(self, position):
        """Test that a search move keeps the piece hidden from the evaluator."""
        state = position.concealment
        key = position.key

        token = position.apply(Move(6, 4, 5, 4), provisional=True)

        assert not state.is_concealed(square(5, 4))
        assert state.is_hidden(square(5, 4))
        assert square(5, 4) in state.provisional
        assert position.key == zobrist_hash(position)

        position.revert(token)

        assert state.is_concealed(square(6, 4))
        assert state.provisional == set()
        assert position.key == key

    def test_provisional_stays_with_piece(self, position):
        """Test that a provisional piece stays hidden over further moves."""
        state = position.concealment
        first = position.apply(Move(6, 4, 5, 4), provisional=True)
        second = position.apply(Move(5, 4, 4, 4), provisional=True)

        assert state.is_hidden(square(4, 4))
        assert square(5, 4) not in state.provisional

        position.revert(second)
        position.revert(first)
        assert state.provisional == set()


class TestSerialization:
    """Tests for ConcealmentState snapshots."""

    def test_dict_round_trip(self, position):
        """Test that to_dict / from_dict keep the concealed set and slot roles."""
        state = position.concealment
        restored = ConcealmentState.from_dict(state.to_dict())
        assert restored.shuffle == state.shuffle
        assert restored.concealed == state.concealed
        assert restored.slot_roles == state.slot_roles

    def test_copy_is_independent(self, position):
        """Test that copies do not share sets."""
        clone = position.copy()
        clone.move_piece(6, 0, 5, 0)
        assert position.concealment.is_concealed(square(6, 0))
        assert not clone.concealment.is_concealed(square(6, 0))
