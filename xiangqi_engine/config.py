"""
Engine configuration.
"""

from dataclasses import dataclass, field
from typing import Dict, NamedTuple, Optional

MAX_DEPTH = 8
"""Hard cap on iterative-deepening depth, whatever the profile says"""

VARIANTS = ("standard", "blind")
EVALUATORS = ("classical", "extended")
BLIND_SHUFFLES = ("side", "group")


class SearchProfile(NamedTuple):
    """
    Search limits for one difficulty level.

    Attributes:
        depth_floor: Depth that always completes, whatever the clock says
        max_depth: Deepest iteration attempted
        time_budget: Seconds after which no new iteration is started
    """

    depth_floor: int
    max_depth: int
    time_budget: float

    def validate(self) -> "SearchProfile":
        """
        Check that at least one iteration will complete.

        Raises:
            ValueError: Unless 1 <= depth_floor <= max_depth and the budget is non-negative
        """
        if not 1 <= self.depth_floor <= self.max_depth:
            raise ValueError(
                f"need 1 <= depth_floor <= max_depth, got {self.depth_floor} and {self.max_depth}"
            )
        if self.time_budget < 0:
            raise ValueError(f"time_budget must be non-negative, got {self.time_budget}")
        return self


DIFFICULTY_PROFILES: Dict[int, SearchProfile] = {
    1: SearchProfile(depth_floor=1, max_depth=2, time_budget=0.5),
    2: SearchProfile(depth_floor=2, max_depth=3, time_budget=1.5),
    3: SearchProfile(depth_floor=2, max_depth=5, time_budget=3.0),
}


def profile_for(level: int) -> SearchProfile:
    """
    Search profile for a difficulty level.

    Raises:
        ValueError: If the level is not 1, 2 or 3
    """
    if level not in DIFFICULTY_PROFILES:
        raise ValueError(
            f"difficulty must be one of {sorted(DIFFICULTY_PROFILES)}, got {level!r}"
        )
    return DIFFICULTY_PROFILES[level]


@dataclass
class EngineConfig:
    """Configuration for a XiangqiEngine.

    Groups the variant, strength and evaluation settings in one place so a
    game can be reproduced from its config and seed.
    """

    # Game
    variant: str = "standard"
    """Rule set: "standard" or "blind" """

    difficulty: int = 2
    """Difficulty level 1-3, see DIFFICULTY_PROFILES"""

    # Evaluation
    evaluator: str = "classical"
    """Static evaluator: "classical" or "extended" """

    extended_weights: Dict[str, float] = field(default_factory=dict)
    """Overrides for the extended evaluator's term weights"""

    concealed_bonus_fraction: float = 0.1
    """Fraction of a slot role's value added to a concealed piece"""

    blind_shuffle: str = "side"
    """Blind deal scope: "side" (all 15 slots) or "group" (per slot group)"""

    # Search
    quiescence_depth: int = 6
    """Maximum number of captures in a quiescence line"""

    tt_size: int = 1_000_000
    """Maximum number of transposition-table entries"""

    use_book: bool = True
    """Consult the opening book before searching"""

    # Reproducibility
    seed: Optional[int] = None
    """Seed for the blind deal and book choices (None for random)"""

    def __post_init__(self):
        """Validate configuration after initialization."""
        if self.variant not in VARIANTS:
            raise ValueError(f"variant should be one of {VARIANTS}, got {self.variant!r}")

        profile_for(self.difficulty)

        if self.evaluator not in EVALUATORS:
            raise ValueError(
                f"evaluator should be one of {EVALUATORS}, got {self.evaluator!r}"
            )

        if self.concealed_bonus_fraction < 0:
            raise ValueError(
                f"concealed_bonus_fraction must be non-negative, got {self.concealed_bonus_fraction}"
            )

        if self.blind_shuffle not in BLIND_SHUFFLES:
            raise ValueError(
                f"blind_shuffle should be one of {BLIND_SHUFFLES}, got {self.blind_shuffle!r}"
            )

        if self.quiescence_depth < 0:
            raise ValueError(f"quiescence_depth must be non-negative, got {self.quiescence_depth}")

        if self.tt_size <= 0:
            raise ValueError(f"tt_size must be positive, got {self.tt_size}")

    @property
    def profile(self) -> SearchProfile:
        return DIFFICULTY_PROFILES[self.difficulty]

    def __repr__(self) -> str:
        """String representation of config."""
        return (
            f"EngineConfig(\n"
            f"  Game: variant={self.variant}, difficulty={self.difficulty}\n"
            f"  Evaluation: {self.evaluator}, concealed bonus={self.concealed_bonus_fraction}, "
            f"shuffle={self.blind_shuffle}\n"
            f"  Search: quiescence={self.quiescence_depth}, tt_size={self.tt_size}, "
            f"book={self.use_book}\n"
            f"  Seed: {self.seed}\n"
            f")"
        )
