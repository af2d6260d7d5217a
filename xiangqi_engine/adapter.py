"""
Background Search Adapter

Runs XiangqiEngine.get_best_move() on a worker thread so a host's UI thread
stays responsive.

Threading:
    - Caller thread: clones the engine and starts the worker
    - Worker thread: searches the clone, never the caller's position
    - Timer thread: fires the timeout fallback

The callback is invoked exactly once per request, with the chosen Move, or
with None on timeout, search error, or when the side has no legal moves.
"""

import logging
import threading
from typing import Callable, Optional

from xiangqi_engine.board.pieces import Move, Side

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 2.0


class ThreadedEngineAdapter:
    """
    Asynchronous wrapper around a XiangqiEngine.

    Args:
        engine: Engine whose current game is searched
        timeout: Seconds before the callback receives None
    """

    def __init__(self, engine, timeout: float = DEFAULT_TIMEOUT):
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.engine = engine
        self.timeout = timeout
        self.search_thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def searching(self) -> bool:
        return self.search_thread is not None and self.search_thread.is_alive()

    def request_move(
        self,
        callback: Callable[[Optional[Move]], None],
        side: Side = Side.BLACK,
    ) -> threading.Thread:
        """
        Start a background search.

        Args:
            callback: Called once with the move (or None)
            side: Side to search for

        Returns:
            The worker thread (already started)
        """
        snapshot = self.engine.clone()
        delivered = threading.Event()

        def deliver(move: Optional[Move]):
            with self._lock:
                if delivered.is_set():
                    return
                delivered.set()
            callback(move)

        def on_timeout():
            logger.warning("Search timed out after %.1fs, falling back to no move", self.timeout)
            deliver(None)

        timer = threading.Timer(self.timeout, on_timeout)
        timer.daemon = True

        def worker():
            try:
                move = snapshot.get_best_move(side)
            except Exception as e:
                logger.error(f"Background search failed: {e}", exc_info=True)
                move = None
            finally:
                timer.cancel()
            deliver(move)

        self.search_thread = threading.Thread(target=worker, name="xiangqi-search", daemon=True)
        timer.start()
        self.search_thread.start()
        return self.search_thread

    def get_best_move(self, side: Side = Side.BLACK) -> Optional[Move]:
        """Blocking convenience wrapper around request_move()."""
        result = {}
        done = threading.Event()

        def callback(move):
            result["move"] = move
            done.set()

        self.request_move(callback, side)
        done.wait()
        return result["move"]
