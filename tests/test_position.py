"""
Unit Tests for the Position Model

Tests for paired apply/revert, game history, captured lists, fingerprints
and FEN conversion.
"""

import pytest

from xiangqi_engine.board import (
    START_FEN,
    Move,
    Piece,
    Role,
    Side,
    position_from_fen,
    position_to_fen,
    standard_position,
    zobrist_hash,
)
from xiangqi_engine.board.pieces import coordinates_of, square_of


class TestStartPosition:
    """Tests for the standard layout."""

    @pytest.fixture
    def position(self):
        return standard_position()

    def test_generals_on_home_squares(self, position):
        """Test that both generals start in the middle of their back rank."""
        assert position.piece_at(9, 4) == Piece(Role.GENERAL, Side.RED)
        assert position.piece_at(0, 4) == Piece(Role.GENERAL, Side.BLACK)
        assert position.general_square(Side.RED) == (9, 4)
        assert position.general_square(Side.BLACK) == (0, 4)

    def test_piece_count(self, position):
        """Test that 16 pieces per side are on the board."""
        pieces = list(position.pieces())
        assert len(pieces) == 32
        assert sum(1 for _, _, p in pieces if p.side is Side.RED) == 16

    def test_piece_at_out_of_range(self, position):
        """Test that off-board queries return None instead of raising."""
        assert position.piece_at(-1, 0) is None
        assert position.piece_at(10, 0) is None
        assert position.piece_at(0, 9) is None
        assert position.piece_at(4, 4) is None

    def test_board_state_snapshot(self, position):
        """Test that board_state returns immutable symbol rows."""
        state = position.board_state()
        assert isinstance(state, tuple)
        assert state[9] == ("R", "N", "B", "A", "K", "A", "B", "N", "R")
        assert state[2][1] == "c"
        assert state[4] == (None,) * 9

    def test_fingerprint_matches_recomputation(self, position):
        """Test that the incremental key equals the from-scratch hash."""
        assert position.key == zobrist_hash(position)


class TestMoveAndUndo:
    """Tests for move_piece / undo and the paired apply / revert."""

    @pytest.fixture
    def position(self):
        return standard_position()

    def test_quiet_move_and_undo(self, position):
        """Test that a quiet move is recorded and fully reversed."""
        before = position.board_state()
        key = position.key

        record = position.move_piece(7, 7, 7, 4)

        assert record.piece == Piece(Role.CANNON, Side.RED)
        assert record.captured is None
        assert record.fingerprint == position.key
        assert position.piece_at(7, 4) == Piece(Role.CANNON, Side.RED)
        assert position.piece_at(7, 7) is None
        assert len(position.history) == 1

        undone = position.undo()

        assert undone is record
        assert position.board_state() == before
        assert position.key == key
        assert position.history == []

    def test_capture_updates_captured_lists(self, position):
        """Test that a capture is credited to the capturing side and undone."""
        # Cannon takes the horse over the black cannon screen
        record = position.move_piece(7, 7, 0, 7)

        assert record.captured == Piece(Role.HORSE, Side.BLACK)
        assert position.captured_by[Side.RED] == [Piece(Role.HORSE, Side.BLACK)]
        assert position.captured_concealed[Side.RED] == [False]
        assert position.captured_by[Side.BLACK] == []

        position.undo()

        assert position.captured_by[Side.RED] == []
        assert position.captured_concealed[Side.RED] == []
        assert position.piece_at(0, 7) == Piece(Role.HORSE, Side.BLACK)

    def test_undo_empty_history(self, position):
        """Test that undo without history returns None."""
        assert position.undo() is None

    def test_move_from_empty_square_raises(self, position):
        """Test that moving nothing is a ValueError."""
        with pytest.raises(ValueError):
            position.move_piece(4, 4, 5, 4)

    def test_incremental_key_after_many_moves(self, position):
        """Test that the key tracks the recomputed hash across moves and undos."""
        line = ["h2e2", "h9g7", "h0g2", "i9h9", "e2e6", "h7h0"]
        for text in line:
            position.move_piece(*Move.from_iccs(text))
            assert position.key == zobrist_hash(position)
        for _ in line:
            position.undo()
            assert position.key == zobrist_hash(position)
        assert position.key == zobrist_hash(standard_position())

    def test_moved_context_manager_reverts(self, position):
        """Test that moved() restores the board even when the body raises."""
        before = position.board_state()
        with pytest.raises(RuntimeError):
            with position.moved(Move(6, 4, 5, 4)):
                assert position.piece_at(5, 4) == Piece(Role.SOLDIER, Side.RED)
                raise RuntimeError("boom")
        assert position.board_state() == before
        assert position.history == []

    def test_apply_does_not_touch_history(self, position):
        """Test that search-style apply leaves the game history alone."""
        token = position.apply(Move(9, 1, 7, 2))
        assert position.history == []
        position.revert(token)
        assert position.piece_at(9, 1) == Piece(Role.HORSE, Side.RED)

    def test_general_square_tracks_moves(self, position):
        """Test that general squares follow general moves and captures."""
        position.move_piece(9, 4, 8, 4)
        assert position.general_square(Side.RED) == (8, 4)
        position.undo()
        assert position.general_square(Side.RED) == (9, 4)

    def test_repetition_count(self, position):
        """Test that fingerprints are counted over the real history."""
        record = position.move_piece(9, 7, 7, 6)
        assert position.repetition_count(record.fingerprint) == 1
        position.undo()
        assert position.repetition_count(record.fingerprint) == 0

    def test_copy_is_independent(self, position):
        """Test that copies do not share board or history."""
        position.move_piece(7, 7, 7, 4)
        clone = position.copy()
        clone.move_piece(0, 7, 2, 6)

        assert position.piece_at(2, 6) is None
        assert len(position.history) == 1
        assert len(clone.history) == 2
        clone.undo()
        clone.undo()
        assert clone.board_state() == standard_position().board_state()


class TestFen:
    """Tests for FEN parsing and serialization."""

    def test_start_fen_round_trip(self):
        """Test that the start position serializes to the standard FEN."""
        assert position_to_fen(standard_position(), Side.RED) == START_FEN

    def test_parse_start_fen(self):
        """Test that parsing the start FEN gives the standard layout."""
        position, side = position_from_fen(START_FEN)
        assert side is Side.RED
        assert position.board_state() == standard_position().board_state()
        assert position.key == standard_position().key

    def test_black_to_move(self):
        """Test that 'b' selects Black as the side to move."""
        _, side = position_from_fen("4k4/9/9/9/9/9/9/9/9/3K5 b")
        assert side is Side.BLACK

    @pytest.mark.parametrize(
        "fen",
        [
            "",
            "4k4/9/9/9/9/9/9/9/3K5 w",
            "4k4/9/9/9/9/9/9/9/9/3K6 w",
            "4k4/9/9/9/9/9/9/9/9/3X5 w",
            "4k4/9/9/9/9/9/9/9/9/3K5 x",
        ],
    )
    def test_malformed_fen_raises(self, fen):
        """Test that malformed FEN text is a ValueError."""
        with pytest.raises(ValueError):
            position_from_fen(fen)


class TestIccs:
    """Tests for ICCS move text."""

    def test_round_trip(self):
        """Test that a move prints and parses as the same ICCS text."""
        move = Move(7, 7, 7, 4)
        assert move.iccs() == "h2e2"
        assert Move.from_iccs("h2e2") == move
        assert str(Move.from_iccs("a0a9")) == "a0a9"

    @pytest.mark.parametrize("text", ["", "h2e", "z2e2", "h2ee", "h2e2e"])
    def test_invalid_text_raises(self, text):
        """Test that malformed ICCS text is a ValueError."""
        with pytest.raises(ValueError):
            Move.from_iccs(text)


class TestSquares:
    """Tests for square index helpers."""

    def test_corners(self):
        """Test that squares count row by row from Black's left corner."""
        assert square_of(0, 0) == 0
        assert square_of(9, 8) == 89
        assert coordinates_of(square_of(6, 4)) == (6, 4)

    def test_move_squares_agree(self):
        """Test that Move square properties use the same numbering."""
        move = Move.from_iccs("h2e2")
        assert coordinates_of(move.from_square) == (move.from_row, move.from_col)
        assert coordinates_of(move.to_square) == (move.to_row, move.to_col)
