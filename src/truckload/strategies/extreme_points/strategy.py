"""
Extreme Points Strategy for truck loading.

Algorithm overview:
    Instead of sweeping a grid, this strategy only evaluates "extreme
    points" (EPs) generated from the corners of already-placed skids.
    The set starts at the origin, offset by the safety margin m from the
    side and end walls.  After each placement three points are proposed
    from the new skid:
      - Right:  (x + w + m, y, z) -- beside the skid
      - Deeper: (x, y, z + l + m) -- behind the skid
      - Top:    (x, y + h, z)     -- on top of the skid

    The set is updated in two phases from an immutable snapshot:
      1. propose: old points plus the three new corners
      2. filter:  drop points outside the usable space or inside the new
                  skid, then drop every point dominated by another point
                  (component-wise <= on all three axes)
    The old set is never edited in place.

    Candidates are the surviving points in (y, z, x) order, each tried at
    rotation 0 and then 90, filtered by the full feasibility checker.

Scoring:
    The negative distance from the origin corner, with x and z normalised
    by the usable width and length:  -sqrt((x/W)^2 + (z/L)^2 + y^2).
    Height stays unnormalised so stacking is only chosen when nothing on
    the floor is closer to the front-left corner.

References:
    Crainic, T.G., Perboli, G., & Tadei, R. (2008).
    "Extreme Point-Based Heuristics for Three-Dimensional Bin Packing."
    INFORMS Journal on Computing, 20(3), 368-384.
"""

import logging
import math
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Sequence, Tuple

import numpy as np

from truckload.config import ROTATIONS, EngineConfig, Position, Skid, TruckDimensions
from truckload.simulator.validator import PlacedLike, can_place
from truckload.strategies.base_strategy import PlacementStrategy, register_strategy

logger = logging.getLogger(__name__)

Point = Tuple[float, float, float]

# Rounding applied to generated corners so equal points compare equal
POINT_DECIMALS: int = 9


def _pt(x: float, y: float, z: float) -> Point:
    return (round(x, POINT_DECIMALS), round(y, POINT_DECIMALS), round(z, POINT_DECIMALS))


def dominates(q: Point, p: Point) -> bool:
    """True if *q* is a different point that is <= *p* on every axis."""
    return q != p and q[0] <= p[0] and q[1] <= p[1] and q[2] <= p[2]


# ─────────────────────────────────────────────────────────────────────────────
# Extreme point set
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ExtremePointSet:
    """Immutable frontier of candidate corners."""
    points: FrozenSet[Point] = frozenset()

    @classmethod
    def seeded(cls, margin: float = 0.0) -> "ExtremePointSet":
        """Single point at the front-left floor corner, *margin* off both walls."""
        return cls(frozenset({_pt(margin, 0.0, margin)}))

    def __len__(self) -> int:
        return len(self.points)

    def __contains__(self, point: object) -> bool:
        return point in self.points

    def ordered(self) -> List[Point]:
        """Points sorted floor first, then front to back, then left to right."""
        return sorted(self.points, key=lambda p: (p[1], p[2], p[0]))

    def after_placement(
        self, skid: Skid, truck: TruckDimensions, margin: float = 0.0,
    ) -> "ExtremePointSet":
        """
        New set reflecting the commit of positioned *skid*.

        The right and deeper corners are pushed *margin* away from the skid,
        and points closer than *margin* to the far walls are dropped.
        """
        x0, y0, z0, x1, y1, z1 = skid.bounds()
        proposed = set(self.points)
        proposed.update((
            _pt(x1 + margin, y0, z0),
            _pt(x0, y0, z1 + margin),
            _pt(x0, y1, z0),
        ))

        W, H, L = truck.usable_width, truck.usable_height, truck.usable_length
        kept = [
            p for p in proposed
            if p[0] < W - margin and p[1] < H and p[2] < L - margin
            and not _inside(p, (x0, y0, z0, x1, y1, z1))
        ]
        return ExtremePointSet(frozenset(_undominated(kept)))


def _inside(p: Point, box: Tuple[float, float, float, float, float, float]) -> bool:
    x0, y0, z0, x1, y1, z1 = box
    return x0 <= p[0] < x1 and y0 <= p[1] < y1 and z0 <= p[2] < z1


def _undominated(points: Iterable[Point]) -> List[Point]:
    snapshot = list(points)
    return [p for p in snapshot if not any(dominates(q, p) for q in snapshot)]


# ─────────────────────────────────────────────────────────────────────────────
# Strategy implementation
# ─────────────────────────────────────────────────────────────────────────────

@register_strategy
class ExtremePointsStrategy(PlacementStrategy):
    """
    Extreme Points heuristic with a corner-distance score.

    Maintains an ``ExtremePointSet`` across the run through the
    ``on_episode_start`` / ``on_placement`` hooks.

    Attributes:
        name: Strategy identifier for the registry ("extreme_points").
    """

    name: str = "extreme_points"

    def __init__(self) -> None:
        super().__init__()
        self._points = ExtremePointSet.seeded()

    @property
    def extreme_points(self) -> ExtremePointSet:
        return self._points

    def on_episode_start(self, truck: TruckDimensions, config: EngineConfig) -> None:
        super().on_episode_start(truck, config)
        self._points = ExtremePointSet.seeded(config.safety_margin)

    def on_placement(self, skid: Skid) -> None:
        self._points = self._points.after_placement(
            skid, self.truck, self.config.safety_margin,
        )
        logger.debug("%d extreme points after %s", len(self._points), skid.label)

    def generate_candidates(
        self,
        skid: Skid,
        placed: PlacedLike,
        truck: TruckDimensions,
    ) -> List[Position]:
        cfg = self.config
        out: List[Position] = []
        for x, y, z in self._points.ordered():
            if skid.is_fragile and y > cfg.touch_tolerance:
                continue
            for rot in ROTATIONS:
                pos = Position(x, y, z, rot)
                if can_place(skid, pos, placed, truck, cfg):
                    out.append(pos)
        return out

    def score(
        self,
        skid: Skid,
        position: Position,
        placed: PlacedLike,
        truck: TruckDimensions,
    ) -> float:
        W, L = truck.usable_width, truck.usable_length
        nx = position.x / W if W > 0 else 0.0
        nz = position.z / L if L > 0 else 0.0
        return -math.sqrt(nx * nx + nz * nz + position.y * position.y)

    def score_many(
        self,
        skid: Skid,
        candidates: Sequence[Position],
        placed: PlacedLike,
        truck: TruckDimensions,
    ) -> np.ndarray:
        W, L = truck.usable_width, truck.usable_length
        xs = np.array([p.x for p in candidates], dtype=np.float64)
        ys = np.array([p.y for p in candidates], dtype=np.float64)
        zs = np.array([p.z for p in candidates], dtype=np.float64)
        nx = xs / W if W > 0 else np.zeros_like(xs)
        nz = zs / L if L > 0 else np.zeros_like(zs)
        return -np.sqrt(nx * nx + nz * nz + ys * ys)
