"""
Strategy interface - abstract base class for all placement strategies.

A strategy owns the two policy decisions of the greedy loop:

    generate_candidates()  - WHERE the skid could go (feasible positions only)
    score()                - HOW desirable each candidate is (higher is better)

``select()`` combines them: the candidate with the maximum score wins and
ties go to the first candidate in generation order, so every strategy is
deterministic for a given input.

Creating a strategy
~~~~~~~~~~~~~~~~~~~
1. Create ``strategies/my_strategy/strategy.py``
2. Subclass ``PlacementStrategy``, set ``name``, implement
   ``generate_candidates()`` and ``score()``
3. Decorate with ``@register_strategy``
4. Import the module in ``strategies/__init__.py``
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Type

import numpy as np

from truckload.config import EngineConfig, Position, Skid, TruckDimensions
from truckload.simulator.validator import PlacedLike


class PlacementStrategy(ABC):
    """
    Abstract base for placement strategies.

    The optimiser drives a strategy through one run:

    +------------------------------+------------------------------------------+
    | Hook                         | When                                     |
    +==============================+==========================================+
    | ``on_episode_start()``       | once, before the first skid              |
    | ``generate_candidates()``    | once per skid                            |
    | ``select()``                 | once per skid with at least 1 candidate  |
    | ``on_placement()``           | after the pipeline commits a skid        |
    | ``on_episode_end()``         | once, with the pipeline summary          |
    +------------------------------+------------------------------------------+

    ``placed`` arguments accept a ``LoadState``, its ``PlacedBoxes`` view or
    a plain list of positioned skids.  Strategies must not mutate them.
    """

    name: str = "unnamed"

    def __init__(self) -> None:
        self._config: Optional[EngineConfig] = None
        self._truck: Optional[TruckDimensions] = None

    @property
    def config(self) -> EngineConfig:
        """Engine config, available after ``on_episode_start()``."""
        if self._config is None:
            raise RuntimeError("Strategy not initialised - call on_episode_start() first")
        return self._config

    @property
    def truck(self) -> TruckDimensions:
        if self._truck is None:
            raise RuntimeError("Strategy not initialised - call on_episode_start() first")
        return self._truck

    def on_episode_start(self, truck: TruckDimensions, config: EngineConfig) -> None:
        """Called once before the first skid.  Override to initialise state."""
        self._truck = truck
        self._config = config

    def on_placement(self, skid: Skid) -> None:
        """Called with the positioned copy of every committed skid."""
        pass

    def on_episode_end(self, summary: dict) -> None:
        """Called after the last skid.  Override for cleanup / logging."""
        pass

    @abstractmethod
    def generate_candidates(
        self,
        skid: Skid,
        placed: PlacedLike,
        truck: TruckDimensions,
    ) -> List[Position]:
        """
        Enumerate feasible positions for *skid*.

        Every returned position must pass ``can_place``.  An empty list
        means the skid cannot be loaded; this is never an error.
        """
        ...

    @abstractmethod
    def score(
        self,
        skid: Skid,
        position: Position,
        placed: PlacedLike,
        truck: TruckDimensions,
    ) -> float:
        """Desirability of *position* for *skid*.  Higher is better."""
        ...

    def score_many(
        self,
        skid: Skid,
        candidates: Sequence[Position],
        placed: PlacedLike,
        truck: TruckDimensions,
    ) -> np.ndarray:
        """Scores for a batch of candidates.  Override to vectorise."""
        return np.array(
            [self.score(skid, p, placed, truck) for p in candidates],
            dtype=np.float64,
        )

    def select(
        self,
        skid: Skid,
        candidates: Sequence[Position],
        placed: PlacedLike,
        truck: TruckDimensions,
    ) -> Optional[Position]:
        """Best-scoring candidate; the earliest one wins a tie."""
        if not candidates:
            return None
        scores = self.score_many(skid, candidates, placed, truck)
        return candidates[int(np.argmax(scores))]


# ─────────────────────────────────────────────────────────────────────────────
# Strategy registry
# ─────────────────────────────────────────────────────────────────────────────

STRATEGY_REGISTRY: Dict[str, Type[PlacementStrategy]] = {}


def register_strategy(cls: Type[PlacementStrategy]) -> Type[PlacementStrategy]:
    """Class decorator - registers a strategy in the global registry."""
    STRATEGY_REGISTRY[cls.name] = cls
    return cls


def get_strategy(name: str) -> PlacementStrategy:
    """Look up a strategy by name and return a new instance."""
    if name not in STRATEGY_REGISTRY:
        available = ", ".join(sorted(STRATEGY_REGISTRY.keys()))
        raise ValueError(f"Unknown strategy '{name}'.  Available: [{available}]")
    return STRATEGY_REGISTRY[name]()
