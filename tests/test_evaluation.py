"""
Unit Tests for Position Evaluation

Tests for the classical, extended and concealment-aware evaluators.
"""

import random

import pytest

from xiangqi_engine.board import (
    ConcealmentState,
    Role,
    Side,
    blind_position,
    position_from_fen,
    standard_position,
)
from xiangqi_engine.board.concealment import expected_value, unseen_pool
from xiangqi_engine.evaluation import (
    PIECE_VALUES,
    ClassicalEvaluator,
    ConcealedEvaluator,
    ExtendedEvaluator,
)
from xiangqi_engine.evaluation.classical import pst_value
from xiangqi_engine.rules import LegalityEngine

NO_BLACK_ROOK = "1nbakabnr/9/1c5c1/p1p1p1p1p/9/9/P1P1P1P1P/1C5C1/9/RNBAKABNR w"


class TestClassicalEvaluator:
    """Tests for material + piece-square evaluation."""

    @pytest.fixture
    def evaluator(self):
        return ClassicalEvaluator()

    def test_start_position_is_balanced(self, evaluator):
        """Test that the symmetric start position scores 0."""
        assert evaluator.evaluate(standard_position()) == 0

    def test_returns_float(self, evaluator):
        """Test that scores are floats."""
        assert isinstance(evaluator.evaluate(standard_position()), float)

    def test_missing_black_rook(self, evaluator):
        """Test that Red is up a rook minus the rook's corner table value."""
        position, _ = position_from_fen(NO_BLACK_ROOK)
        assert evaluator.evaluate(position) == 900 + pst_value(Role.ROOK, Side.BLACK, 0, 0)
        assert evaluator.evaluate(position) > 0

    def test_tables_mirror_for_black(self):
        """Test that Black reads the tables upside down."""
        assert pst_value(Role.SOLDIER, Side.RED, 4, 4) == pst_value(Role.SOLDIER, Side.BLACK, 5, 4)
        assert pst_value(Role.HORSE, Side.RED, 7, 2) == pst_value(Role.HORSE, Side.BLACK, 2, 2)

    def test_crossed_soldier_is_worth_more(self):
        """Test that the soldier table rewards crossing the river."""
        assert pst_value(Role.SOLDIER, Side.RED, 4, 4) > pst_value(Role.SOLDIER, Side.RED, 6, 4)

    def test_flat_tables(self):
        """Test that general, advisor and elephant have no positional term."""
        for role in (Role.GENERAL, Role.ADVISOR, Role.ELEPHANT):
            assert pst_value(role, Side.RED, 9, 4) == 0

    def test_piece_values(self):
        """Test the piece value scale."""
        assert PIECE_VALUES[Role.GENERAL] == 10000
        assert PIECE_VALUES[Role.ROOK] == 900
        assert PIECE_VALUES[Role.HORSE] == PIECE_VALUES[Role.CANNON] == 450
        assert PIECE_VALUES[Role.ELEPHANT] == PIECE_VALUES[Role.ADVISOR] == 200
        assert PIECE_VALUES[Role.SOLDIER] == 100


class TestExtendedEvaluator:
    """Tests for the mobility / king safety / coordination / center terms."""

    @pytest.fixture
    def position(self):
        return standard_position()

    @pytest.fixture
    def evaluator(self, position):
        return ExtendedEvaluator(LegalityEngine(position))

    def test_start_position_is_balanced(self, evaluator, position):
        """Test that every term cancels out at the start."""
        assert evaluator.evaluate(position) == pytest.approx(0.0)

    def test_unknown_weight_raises(self, position):
        """Test that misspelled weights are rejected."""
        with pytest.raises(ValueError):
            ExtendedEvaluator(LegalityEngine(position), weights={"mobilty": 1.0})

    def test_weight_override(self, position):
        """Test that overrides replace only the named weights."""
        evaluator = ExtendedEvaluator(LegalityEngine(position), weights={"center": 0.0})
        assert evaluator.weights["center"] == 0.0
        assert evaluator.weights["mobility"] == 0.3

    def test_coordination_at_start(self, evaluator, position):
        """Test rook pair, cannon pair and rook-horse bonuses."""
        assert evaluator.coordination(position, Side.RED) == 45
        assert evaluator.coordination(position, Side.BLACK) == 45

    def test_missing_general_penalty(self):
        """Test that a side without a general gets the flat penalty."""
        position, _ = position_from_fen("9/9/9/9/9/9/9/9/9/3K5 w")
        evaluator = ExtendedEvaluator(LegalityEngine(position))
        assert evaluator.king_safety(position, Side.BLACK, []) == -1000

    def test_mobility_advantage(self):
        """Test that the extra-rook side gains on top of material."""
        position, _ = position_from_fen(NO_BLACK_ROOK)
        classical = ClassicalEvaluator().evaluate(position)
        extended = ExtendedEvaluator(LegalityEngine(position)).evaluate(position)
        assert extended > classical


class TestConcealedEvaluator:
    """Tests for expected-value scoring of hidden pieces."""

    @pytest.fixture
    def evaluator(self):
        return ConcealedEvaluator()

    def test_negative_fraction_raises(self):
        """Test that a negative bonus fraction is rejected."""
        with pytest.raises(ValueError):
            ConcealedEvaluator(bonus_fraction=-0.1)

    def test_matches_classical_without_concealment(self, evaluator):
        """Test that a fully visible board scores like the classical evaluator."""
        position, _ = position_from_fen(NO_BLACK_ROOK, ConcealmentState())
        assert evaluator.evaluate(position) == ClassicalEvaluator().evaluate(position)

    def test_blind_start_is_balanced(self, evaluator):
        """Test that a fresh blind deal scores 0 whatever the deal."""
        for seed in range(3):
            position = blind_position(random.Random(seed))
            assert evaluator.evaluate(position) == pytest.approx(0.0, abs=1e-6)

    def test_hidden_piece_score(self, evaluator):
        """Test expected value + slot bonus + slot table for one hidden piece."""
        state = ConcealmentState()
        square = 6 * 9 + 0
        state.concealed.add(square)
        state.slot_roles[square] = Role.SOLDIER
        position, _ = position_from_fen("4k4/9/9/9/9/9/R8/9/9/3K5 w", state)

        expected = 4900 / 15 + 0.1 * 100 + pst_value(Role.SOLDIER, Side.RED, 6, 0)
        assert evaluator.hidden_piece_score(position, 6, 0, {}) == pytest.approx(expected)
        assert evaluator.evaluate(position) == pytest.approx(expected)


class TestUnseenPool:
    """Tests for the expected value of concealed pieces."""

    # Red rook on a soldier slot (concealed), red cannon visible, black rook
    # able to take either
    FEN = "4k4/9/9/9/9/9/R7r/1C7/9/3K5 b"

    @pytest.fixture
    def position(self):
        state = ConcealmentState()
        square = 6 * 9 + 0
        state.concealed.add(square)
        state.slot_roles[square] = Role.SOLDIER
        position, _ = position_from_fen(self.FEN, state)
        return position

    def test_full_pool_at_blind_start(self):
        """Test that a fresh deal expects the average non-general piece."""
        position = blind_position(random.Random(0))
        assert sum(unseen_pool(position, Side.RED, "all").values()) == 15
        assert expected_value(position, Side.RED, "all", PIECE_VALUES) == pytest.approx(4900 / 15)

    def test_visible_pieces_leave_the_pool(self, position):
        """Test that the revealed cannon is removed from the pool."""
        pool = unseen_pool(position, Side.RED, "all")
        assert pool[Role.CANNON] == 1
        assert pool[Role.ROOK] == 2
        assert expected_value(position, Side.RED, "all", PIECE_VALUES) == pytest.approx(4450 / 14)

    def test_reveal_updates_pool(self, position):
        """Test that moving the concealed rook reveals it."""
        position.move_piece(6, 0, 5, 0)
        pool = unseen_pool(position, Side.RED, "all")
        assert pool[Role.ROOK] == 1
        assert expected_value(position, Side.RED, "all", PIECE_VALUES) == pytest.approx(3550 / 13)

    def test_concealed_capture_stays_unseen(self, position):
        """Test that a piece captured while concealed is never counted as seen."""
        position.move_piece(6, 8, 6, 0)
        assert position.captured_concealed[Side.BLACK] == [True]
        assert expected_value(position, Side.RED, "all", PIECE_VALUES) == pytest.approx(4450 / 14)

    def test_visible_capture_stays_seen(self, position):
        """Test that capturing a revealed piece keeps it out of the pool."""
        position.move_piece(6, 8, 7, 8)
        position.move_piece(7, 8, 7, 1)
        assert position.captured_concealed[Side.BLACK] == [False]
        assert unseen_pool(position, Side.RED, "all")[Role.CANNON] == 1
