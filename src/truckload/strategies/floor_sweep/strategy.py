"""
Floor Sweep Strategy - grid scan of the floor and of every load-bearing top.

Algorithm overview:
    Floor level:
        Sweep z (outer) and x (inner) over the usable floor at
        ``floor_sweep_step``, starting at the wall margin and stopping at
        ``usable - min(width, length)`` so both rotations share one grid.
        Every grid point is tried at rotation 0 and then 90.

    Stacked level (non-fragile skids only):
        For every placed skid that can carry load, sweep offsets across its
        top face, from ``-footprint + step`` to the supporter's footprint,
        at y = supporter top.  The same offsets relative to the same
        supporter are only tried once.

    All candidates of one (height, rotation) row are checked in a single
    vectorised ``feasible_mask`` call.

Scoring (weighted sum, higher is better):
    - Depth: priority <= threshold  -> (1 - z/L) * 10 * priority_weight
             otherwise              -> (z/L) * 5
    - Floor:                        +3 when resting on the floor
    - Side wall (x == 0 or flush):  +2
    - End wall (z == 0 or flush):   +2
    - Contact:                      +1 per placed skid sharing a side face
    - Balance:                      -0.5 * |skid centre x - truck centre x|

The sweep is quadratic-ish per skid; the extreme-point strategy is the
cheaper alternative for large loads.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

from truckload.config import ROTATIONS, Position, Skid, TruckDimensions
from truckload.simulator.load_state import PlacedBoxes
from truckload.simulator.validator import PlacedLike, feasible_mask
from truckload.strategies.base_strategy import PlacementStrategy, register_strategy


# ─────────────────────────────────────────────────────────────────────────────
# Scoring weights
# ─────────────────────────────────────────────────────────────────────────────

DEPTH_WEIGHT_HIGH: float = 10.0    # multiplied by config.priority_weight
DEPTH_WEIGHT_LOW: float = 5.0
FLOOR_BONUS: float = 3.0
SIDE_WALL_BONUS: float = 2.0
END_WALL_BONUS: float = 2.0
CONTACT_BONUS: float = 1.0
BALANCE_PENALTY: float = 0.5


def sweep_axis(start: float, stop: float, step: float) -> np.ndarray:
    """Grid ``start, start+step, ...`` up to and including *stop*."""
    if stop < start - 1e-9:
        return np.zeros(0, dtype=np.float64)
    n = int(math.floor((stop - start) / step + 1e-9))
    return np.round(start + np.arange(n + 1) * step, 9)


@register_strategy
class FloorSweepStrategy(PlacementStrategy):
    """
    Grid sweep over floor and stack tops with a weighted multi-term score.

    Attributes:
        name: Strategy identifier for the registry ("floor_sweep").
    """

    name: str = "floor_sweep"

    # ── Candidate generation ─────────────────────────────────────────────────

    def generate_candidates(
        self,
        skid: Skid,
        placed: PlacedLike,
        truck: TruckDimensions,
    ) -> List[Position]:
        cfg = self.config
        boxes = PlacedBoxes.coerce(placed, cfg)
        candidates = self._floor_candidates(skid, boxes, truck)
        if not skid.is_fragile:
            candidates.extend(self._stacked_candidates(skid, boxes, truck))
        return candidates

    def _floor_candidates(
        self, skid: Skid, boxes: PlacedBoxes, truck: TruckDimensions,
    ) -> List[Position]:
        cfg = self.config
        step = cfg.floor_sweep_step
        shortest = min(skid.width, skid.length)
        xs = sweep_axis(cfg.safety_margin, truck.usable_width - shortest, step)
        zs = sweep_axis(cfg.safety_margin, truck.usable_length - shortest, step)
        if xs.size == 0 or zs.size == 0:
            return []

        # z outer, x inner
        gz, gx = np.meshgrid(zs, xs, indexing="ij")
        gx, gz = gx.ravel(), gz.ravel()
        masks = [
            feasible_mask(skid, gx, 0.0, gz, rot, boxes, truck, cfg)
            for rot in ROTATIONS
        ]
        # rotation 0 then 90 at each grid point
        out: List[Position] = []
        for i in range(gx.size):
            for rot, mask in zip(ROTATIONS, masks):
                if mask[i]:
                    out.append(Position(float(gx[i]), 0.0, float(gz[i]), rot))
        return out

    def _stacked_candidates(
        self, skid: Skid, boxes: PlacedBoxes, truck: TruckDimensions,
    ) -> List[Position]:
        cfg = self.config
        step = cfg.floor_sweep_step
        out: List[Position] = []
        seen = set()
        for j in range(len(boxes)):
            if not boxes.can_carry[j]:
                continue
            x0, y_top, z0 = boxes.lo[j, 0], boxes.hi[j, 1], boxes.lo[j, 2]
            sup_w = boxes.hi[j, 0] - x0
            sup_l = boxes.hi[j, 2] - z0

            rows: List[Tuple[np.ndarray, np.ndarray, np.ndarray]] = []
            for rot in ROTATIONS:
                w, l = skid.footprint(rot)
                dx = sweep_axis(-w + step, sup_w, step)
                dz = sweep_axis(-l + step, sup_l, step)
                if dx.size == 0 or dz.size == 0:
                    rows.append((np.zeros(0), np.zeros(0), np.zeros(0, dtype=bool)))
                    continue
                gz, gx = np.meshgrid(np.round(z0 + dz, 9), np.round(x0 + dx, 9), indexing="ij")
                gx, gz = gx.ravel(), gz.ravel()
                mask = feasible_mask(skid, gx, float(y_top), gz, rot, boxes, truck, cfg)
                rows.append((gx, gz, mask))

            for rot, (gx, gz, mask) in zip(ROTATIONS, rows):
                for i in np.flatnonzero(mask):
                    key = (float(gx[i]), float(y_top), float(gz[i]), rot)
                    if key in seen:
                        continue
                    seen.add(key)
                    out.append(Position(*key))
        return out

    # ── Scoring ──────────────────────────────────────────────────────────────

    def score(
        self,
        skid: Skid,
        position: Position,
        placed: PlacedLike,
        truck: TruckDimensions,
    ) -> float:
        return float(self.score_many(skid, [position], placed, truck)[0])

    def score_many(
        self,
        skid: Skid,
        candidates: Sequence[Position],
        placed: PlacedLike,
        truck: TruckDimensions,
    ) -> np.ndarray:
        cfg = self.config
        tol = cfg.touch_tolerance
        n = len(candidates)
        if n == 0:
            return np.zeros(0, dtype=np.float64)

        xs = np.fromiter((p.x for p in candidates), dtype=np.float64, count=n)
        ys = np.fromiter((p.y for p in candidates), dtype=np.float64, count=n)
        zs = np.fromiter((p.z for p in candidates), dtype=np.float64, count=n)
        rotated = np.fromiter((p.rotation == 90 for p in candidates), dtype=bool, count=n)
        ws = np.where(rotated, skid.length, skid.width)
        ls = np.where(rotated, skid.width, skid.length)
        h = skid.height
        W, L = truck.usable_width, truck.usable_length

        score = np.zeros(n, dtype=np.float64)

        if L > 0:
            if skid.priority <= cfg.high_priority_threshold:
                score += (1.0 - zs / L) * DEPTH_WEIGHT_HIGH * cfg.priority_weight
            else:
                score += (zs / L) * DEPTH_WEIGHT_LOW

        score += np.where(ys <= tol, FLOOR_BONUS, 0.0)
        score += np.where((xs <= tol) | (xs + ws >= W - tol), SIDE_WALL_BONUS, 0.0)
        score += np.where((zs <= tol) | (zs + ls >= L - tol), END_WALL_BONUS, 0.0)
        score += CONTACT_BONUS * self._contact_counts(xs, ys, zs, ws, ls, h, placed)
        score -= BALANCE_PENALTY * np.abs(xs + ws / 2.0 - W / 2.0)
        return score

    def _contact_counts(
        self,
        xs: np.ndarray, ys: np.ndarray, zs: np.ndarray,
        ws: np.ndarray, ls: np.ndarray, h: float,
        placed: PlacedLike,
    ) -> np.ndarray:
        """Number of placed skids touching each candidate on an X or Z face."""
        cfg = self.config
        tol = cfg.touch_tolerance
        boxes = PlacedBoxes.coerce(placed, cfg)
        if len(boxes) == 0:
            return np.zeros(xs.shape, dtype=np.float64)

        lo, hi = boxes.lo[None, :, :], boxes.hi[None, :, :]
        x, y, z = xs[:, None], ys[:, None], zs[:, None]
        w, l = ws[:, None], ls[:, None]

        overlap_x = (x < hi[..., 0] - tol) & (x + w > lo[..., 0] + tol)
        overlap_y = (y < hi[..., 1] - tol) & (y + h > lo[..., 1] + tol)
        overlap_z = (z < hi[..., 2] - tol) & (z + l > lo[..., 2] + tol)
        touch_x = (np.abs(x - hi[..., 0]) <= tol) | (np.abs(x + w - lo[..., 0]) <= tol)
        touch_z = (np.abs(z - hi[..., 2]) <= tol) | (np.abs(z + l - lo[..., 2]) <= tol)

        contact = overlap_y & ((touch_x & overlap_z) | (touch_z & overlap_x))
        return contact.sum(axis=1).astype(np.float64)
