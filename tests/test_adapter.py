"""
Unit Tests for the Background Search Adapter
"""

import logging
import threading
import time

import pytest

from xiangqi_engine import EngineConfig, Move, Side, ThreadedEngineAdapter, XiangqiEngine

WAIT = 10.0


class Recorder:
    """Callback that remembers every call."""

    def __init__(self):
        self.calls = []
        self.done = threading.Event()

    def __call__(self, move):
        self.calls.append(move)
        self.done.set()


@pytest.fixture
def engine():
    engine = XiangqiEngine(EngineConfig(difficulty=1, seed=2))
    engine.move_piece(*Move.from_iccs("h2e2"))
    return engine


class TestThreadedEngineAdapter:
    """Tests for ThreadedEngineAdapter."""

    def test_invalid_timeout(self, engine):
        """Test that a non-positive timeout is rejected."""
        with pytest.raises(ValueError):
            ThreadedEngineAdapter(engine, timeout=0)

    def test_callback_receives_legal_move(self, engine):
        """Test that the callback gets a legal move exactly once."""
        adapter = ThreadedEngineAdapter(engine, timeout=WAIT)
        recorder = Recorder()

        worker = adapter.request_move(recorder, Side.BLACK)

        assert recorder.done.wait(WAIT), "Callback should fire"
        worker.join(WAIT)
        assert len(recorder.calls) == 1
        assert recorder.calls[0] in engine.get_all_legal_moves(Side.BLACK)
        assert not adapter.searching

    def test_original_game_untouched(self, engine):
        """Test that the search runs on a copy of the game."""
        before = engine.get_board_state()
        history = len(engine.position.history)

        ThreadedEngineAdapter(engine, timeout=WAIT).get_best_move(Side.BLACK)

        assert engine.get_board_state() == before
        assert len(engine.position.history) == history

    def test_timeout_delivers_none_once(self, engine, monkeypatch):
        """Test that a slow search yields None and is not delivered again."""

        def slow_search(self, side=Side.BLACK):
            time.sleep(0.5)
            return Move(0, 7, 2, 6)

        monkeypatch.setattr(XiangqiEngine, "get_best_move", slow_search)
        adapter = ThreadedEngineAdapter(engine, timeout=0.05)
        recorder = Recorder()

        worker = adapter.request_move(recorder, Side.BLACK)
        assert recorder.done.wait(WAIT)
        worker.join(WAIT)

        assert recorder.calls == [None]

    def test_search_error_delivers_none(self, engine, monkeypatch, caplog):
        """Test that an exception in the search is logged and yields None."""

        def broken_search(self, side=Side.BLACK):
            raise RuntimeError("search exploded")

        monkeypatch.setattr(XiangqiEngine, "get_best_move", broken_search)
        adapter = ThreadedEngineAdapter(engine, timeout=WAIT)

        with caplog.at_level(logging.ERROR, logger="xiangqi_engine.adapter"):
            move = adapter.get_best_move(Side.BLACK)

        assert move is None
        assert "search exploded" in caplog.text

    def test_no_legal_moves_delivers_none(self, engine):
        """Test that a mated side gets None."""
        engine.load_fen("5k3/9/9/9/4r4/9/9/9/9/3BKB3 w")
        adapter = ThreadedEngineAdapter(engine, timeout=WAIT)
        assert adapter.get_best_move(Side.RED) is None
