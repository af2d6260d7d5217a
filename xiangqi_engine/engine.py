"""
Engine Facade

XiangqiEngine is the single object a host (GUI, CLI, test) talks to. It owns
the position, the variant policy, the evaluator, the search cache and the
random source, and rebuilds them consistently on reset().

Usage:
    engine = XiangqiEngine(EngineConfig(difficulty=1, seed=7))
    engine.move_piece(7, 7, 7, 4)          # Red: h2e2
    reply = engine.get_best_move()         # Black to move
    engine.move_piece(*reply)
"""

import dataclasses
import logging
import random
from typing import List, Optional, Tuple

from xiangqi_engine.board.concealment import ConcealmentState, blind_position
from xiangqi_engine.board.pieces import Move, Piece, Side, coordinates_of
from xiangqi_engine.board.position import MoveRecord, standard_position
from xiangqi_engine.board.representation import position_from_fen, position_to_fen
from xiangqi_engine.config import EngineConfig, profile_for
from xiangqi_engine.evaluation.classical import ClassicalEvaluator
from xiangqi_engine.evaluation.concealed import ConcealedEvaluator
from xiangqi_engine.evaluation.extended import ExtendedEvaluator
from xiangqi_engine.rules.legality import LegalityEngine
from xiangqi_engine.rules.policy import policy_for
from xiangqi_engine.search.alphabeta import SearchCache, Searcher, SearchResult
from xiangqi_engine.search.book import OpeningBook

logger = logging.getLogger(__name__)


class XiangqiEngine:
    """
    Host-facing engine for standard xiangqi and its blind variant.

    Attributes:
        config: EngineConfig the engine was built with
        position: Current Position (owned; do not mutate during a search)
        cache: SearchCache shared by all searches of the current game
        last_search: SearchResult of the most recent get_best_move()
    """

    def __init__(self, config: Optional[EngineConfig] = None, book: Optional[OpeningBook] = None):
        self.config = config or EngineConfig()
        self.rng = random.Random(self.config.seed)
        self.policy = policy_for(self.config.variant)
        self.book = book
        if self.book is None and self.config.use_book:
            self.book = OpeningBook.standard()
        self.cache = SearchCache(self.config.tt_size, self.rng)
        self.last_search: Optional[SearchResult] = None
        self.reset()

    @property
    def blind(self) -> bool:
        return self.config.variant == "blind"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self):
        """Fresh game: new layout, empty history, empty caches."""
        if self.blind:
            self.position = blind_position(self.rng, self.config.blind_shuffle)
        else:
            self.position = standard_position()
        self._initial_fen = position_to_fen(self.position, Side.RED)
        self._initial_concealment = (
            self.position.concealment.to_dict() if self.blind else None
        )
        self.cache.clear()
        self.last_search = None
        self._bind()
        logger.info("New %s game (difficulty %d)", self.config.variant, self.config.difficulty)

    def _bind(self):
        """(Re)build the components that hold a reference to the position."""
        self.legality = LegalityEngine(self.position, self.policy)
        self.evaluator = self._build_evaluator()
        self.searcher = Searcher(
            self.legality,
            self.evaluator,
            book=self.book,
            rng=self.rng,
            quiescence_depth=self.config.quiescence_depth,
            provisional=self.blind,
        )

    def _build_evaluator(self):
        if self.blind:
            base = ConcealedEvaluator(self.config.concealed_bonus_fraction)
        else:
            base = ClassicalEvaluator()
        if self.config.evaluator == "extended":
            return ExtendedEvaluator(self.legality, base, self.config.extended_weights)
        return base

    def set_difficulty(self, level: int):
        """
        Select the search profile for a difficulty level (1-3).

        Raises:
            ValueError: If the level is out of range
        """
        profile_for(level)
        self.config.difficulty = level
        logger.info("Difficulty set to %d", level)

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def is_valid_move(self, fr: int, fc: int, tr: int, tc: int) -> bool:
        return self.legality.is_valid_move(fr, fc, tr, tc)

    def move_piece(self, fr: int, fc: int, tr: int, tc: int) -> MoveRecord:
        """Play a move without validating it. See is_valid_move()."""
        return self.position.move_piece(fr, fc, tr, tc)

    def undo(self) -> Optional[MoveRecord]:
        return self.position.undo()

    def get_best_move(self, side: Side = Side.BLACK) -> Optional[Move]:
        """
        Search for a move for `side` (Black by default).

        Returns:
            The chosen Move, or None if the side has no legal moves
        """
        self.last_search = self.searcher.get_best_move(
            side, self.config.profile, self.cache, use_book=self.config.use_book
        )
        return self.last_search.move

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def check_win(self) -> Optional[Side]:
        """The winner if a general has been captured, else None."""
        if self.position.general_square(Side.RED) is None:
            return Side.BLACK
        if self.position.general_square(Side.BLACK) is None:
            return Side.RED
        return None

    def get_board_state(self) -> Tuple[Tuple[Optional[str], ...], ...]:
        return self.position.board_state()

    def get_last_move(self) -> Optional[MoveRecord]:
        return self.position.last_move()

    def get_all_legal_moves(self, side: Side) -> List[Move]:
        return self.legality.legal_moves(side)

    def get_piece_at(self, row: int, col: int) -> Optional[Piece]:
        return self.position.piece_at(row, col)

    def is_in_check(self, side: Side) -> bool:
        return self.legality.is_in_check(side)

    def concealed_squares(self) -> List[Tuple[int, int]]:
        """(row, col) of every concealed piece; empty in standard games."""
        concealment = self.position.concealment
        if concealment is None:
            return []
        return [coordinates_of(square) for square in sorted(concealment.concealed)]

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def load_fen(self, fen: str) -> Side:
        """
        Start a game from a FEN position (every piece visible).

        Returns:
            Side to move given by the FEN

        Raises:
            ValueError: If the FEN is malformed
        """
        concealment = ConcealmentState(self.config.blind_shuffle) if self.blind else None
        self.position, side = position_from_fen(fen, concealment)
        self._initial_fen = position_to_fen(self.position, side)
        self._initial_concealment = concealment.to_dict() if concealment else None
        self.cache.clear()
        self.last_search = None
        self._bind()
        return side

    def export_state(self) -> dict:
        """
        Plain-dict snapshot of the game.

        Contains the starting FEN (true identities), the starting concealment
        state in blind games and the moves played so far in ICCS.
        """
        return {
            "variant": self.config.variant,
            "fen": self._initial_fen,
            "concealment": self._initial_concealment,
            "moves": [record.move.iccs() for record in self.position.history],
        }

    def restore_state(self, state: dict):
        """
        Rebuild a game from export_state() output by replaying its moves.

        Raises:
            ValueError: If the snapshot is for another variant or is malformed
        """
        if state.get("variant", "standard") != self.config.variant:
            raise ValueError(
                f"Snapshot is for variant {state.get('variant')!r}, "
                f"engine plays {self.config.variant!r}"
            )
        concealment = None
        if self.blind:
            concealment = ConcealmentState.from_dict(state.get("concealment") or {})
        position, _ = position_from_fen(state["fen"], concealment)
        for text in state.get("moves", []):
            position.move_piece(*Move.from_iccs(text))

        self.position = position
        self._initial_fen = state["fen"]
        self._initial_concealment = state.get("concealment")
        self.cache.clear()
        self.last_search = None
        self._bind()

    def clone(self) -> "XiangqiEngine":
        """Independent engine with the same config, game and random state."""
        clone = XiangqiEngine(dataclasses.replace(self.config), book=self.book)
        clone.restore_state(self.export_state())
        clone.rng.setstate(self.rng.getstate())
        return clone

    def __repr__(self) -> str:
        return (
            f"XiangqiEngine(variant={self.config.variant}, "
            f"difficulty={self.config.difficulty}, moves={len(self.position.history)})"
        )
