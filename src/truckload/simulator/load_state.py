"""
Load state - the set of skids already committed to the truck.

The LoadState is the primary data object exchanged between the pipeline
and strategies.  It provides:

  Queries:
    .placed_skids          - List[Skid], each carrying a Position
    .boxes                 - PlacedBoxes numpy view for vectorised checks
    .total_weight          - payload committed so far
    .get_fill_rate()       - loaded volume / usable volume
    .get_max_height()      - tallest point of the load

  Safe cloning:
    .copy()                - shallow copy (Skid is frozen)
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Union

import numpy as np

from truckload.config import EngineConfig, Skid, TruckDimensions


@dataclass(frozen=True)
class PlacedBoxes:
    """
    Column-oriented view of placed skids.

    Attributes:
        lo:        (N, 3) array of (x0, y0, z0) corners.
        hi:        (N, 3) array of (x1, y1, z1) corners.
        can_carry: (N,) bool - stackable and not fragile.
        capacity:  (N,) weight each box can carry over its whole top face.
        area:      (N,) footprint area.
    """
    lo: np.ndarray
    hi: np.ndarray
    can_carry: np.ndarray
    capacity: np.ndarray
    area: np.ndarray

    def __len__(self) -> int:
        return int(self.lo.shape[0])

    @classmethod
    def from_skids(
        cls,
        skids: Iterable[Skid],
        capacity_ratio: float = 0.8,
    ) -> "PlacedBoxes":
        placed = [s for s in skids if s.position is not None]
        if not placed:
            empty = np.zeros((0, 3), dtype=np.float64)
            flat = np.zeros(0, dtype=np.float64)
            return cls(empty, empty.copy(), np.zeros(0, dtype=bool), flat, flat.copy())

        bounds = np.array([s.bounds() for s in placed], dtype=np.float64)
        lo, hi = bounds[:, :3], bounds[:, 3:]
        can_carry = np.array([s.is_stackable and not s.is_fragile for s in placed])
        capacity = np.array([
            s.max_weight_on_top if s.max_weight_on_top is not None
            else s.weight * capacity_ratio
            for s in placed
        ], dtype=np.float64)
        area = (hi[:, 0] - lo[:, 0]) * (hi[:, 2] - lo[:, 2])
        return cls(lo, hi, can_carry, capacity, area)

    @classmethod
    def coerce(
        cls,
        placed: Union["PlacedBoxes", "LoadState", Sequence[Skid]],
        config: Optional[EngineConfig] = None,
    ) -> "PlacedBoxes":
        if isinstance(placed, PlacedBoxes):
            return placed
        if isinstance(placed, LoadState):
            return placed.boxes
        ratio = (config or EngineConfig()).stacking_capacity_ratio
        return cls.from_skids(placed, capacity_ratio=ratio)


class LoadState:
    """
    Manages the committed placements of a single optimisation run.

    ``boxes`` is rebuilt lazily after each commit so strategies can run
    vectorised checks without re-packing the list per candidate.
    """

    __slots__ = ("truck", "config", "_placed", "_boxes", "_total_weight")

    def __init__(self, truck: TruckDimensions, config: Optional[EngineConfig] = None) -> None:
        self.truck = truck
        self.config = config or EngineConfig()
        self._placed: List[Skid] = []
        self._boxes: Optional[PlacedBoxes] = None
        self._total_weight: float = 0.0

    @property
    def placed_skids(self) -> List[Skid]:
        return list(self._placed)

    @property
    def boxes(self) -> PlacedBoxes:
        if self._boxes is None:
            self._boxes = PlacedBoxes.from_skids(
                self._placed, capacity_ratio=self.config.stacking_capacity_ratio,
            )
        return self._boxes

    @property
    def total_weight(self) -> float:
        return self._total_weight

    @property
    def step_count(self) -> int:
        return len(self._placed)

    def remaining_payload(self) -> Optional[float]:
        if self.truck.max_weight is None:
            return None
        return self.truck.max_weight - self._total_weight

    def get_fill_rate(self) -> float:
        volume = self.truck.usable_volume
        if volume <= 0:
            return 0.0
        return sum(s.volume for s in self._placed) / volume

    def get_max_height(self) -> float:
        if not self._placed:
            return 0.0
        return float(np.max(self.boxes.hi[:, 1]))

    # ── State mutation (pipeline only - NOT for strategies) ──────────────

    def apply_placement(self, skid: Skid) -> None:
        if skid.position is None:
            raise ValueError(f"Cannot commit skid {skid.id!r} without a position")
        self._placed.append(skid)
        self._total_weight += skid.weight
        self._boxes = None

    def copy(self) -> "LoadState":
        clone = LoadState(self.truck, self.config)
        clone._placed = list(self._placed)
        clone._boxes = self._boxes
        clone._total_weight = self._total_weight
        return clone

    def __repr__(self) -> str:
        return (
            f"LoadState(skids={len(self._placed)}, "
            f"fill={self.get_fill_rate():.1%}, "
            f"weight={self._total_weight:.1f})"
        )
