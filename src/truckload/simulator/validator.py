"""
Placement validator - pure-function physical constraint checking.

All checks are stateless functions: they take the placed skids (or their
PlacedBoxes array view), the truck and a proposed placement, and either
return a boolean mask / True, or raise a PlacementError.

Checks (always enforced):
  1. Bounds    - rotated footprint and height inside the usable space,
                 kept ``safety_margin`` away from side and end walls
  2. Collision - no overlap with any placed box on all three axes; boxes
                 sharing a vertical range keep ``safety_margin`` apart
  3. Support   - a stacked base (y > 0) rests on ≥ ``min_support_ratio``
                 of its area on stackable, non-fragile tops at exactly y
  4. Weight    - the skid's weight fits the capacity contributed by its
                 supporters, pro rata to the share of each supporter's top
                 face it covers

The vectorised ``feasible_mask`` evaluates a whole row of candidate
positions at one height; ``validate_placement`` runs the same checks on a
single position and reports which one failed.
"""

import math
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from truckload.config import EngineConfig, Position, Skid, TruckDimensions
from truckload.plan import LoadingPlan
from truckload.simulator.load_state import LoadState, PlacedBoxes


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────

class PlacementError(Exception):
    """Base class for placement validation errors."""


class OutOfBoundsError(PlacementError):
    """Skid extends outside the usable loading space."""


class CollisionError(PlacementError):
    """Skid would intersect an already-placed skid."""


class InsufficientSupportError(PlacementError):
    """Stacked skid rests on too little load-bearing surface."""


class StackWeightError(PlacementError):
    """Skid is heavier than its supporters can carry."""


class InvalidContainerError(ValueError):
    """Container descriptor cannot describe a loading space."""


PlacedLike = Union[PlacedBoxes, LoadState, Sequence[Skid]]


def validate_truck(truck: TruckDimensions) -> None:
    """Raise InvalidContainerError for non-positive outer dimensions."""
    for name in ("length", "width", "height"):
        value = getattr(truck, name)
        if value is None or not value > 0:
            raise InvalidContainerError(
                f"Truck {name} must be positive, got {value!r}"
            )


# ─────────────────────────────────────────────────────────────────────────────
# Vectorised building blocks
# ─────────────────────────────────────────────────────────────────────────────

def bounds_mask(
    xs: np.ndarray, y: float, zs: np.ndarray,
    w: float, l: float, h: float,
    truck: TruckDimensions, margin: float = 0.0, tol: float = 1e-6,
) -> np.ndarray:
    """True where the box lies inside the usable space (with wall margin)."""
    if y < -tol or y + h > truck.usable_height + tol:
        return np.zeros(xs.shape, dtype=bool)
    return (
        (xs >= margin - tol)
        & (zs >= margin - tol)
        & (xs + w <= truck.usable_width - margin + tol)
        & (zs + l <= truck.usable_length - margin + tol)
    )


def collision_mask(
    xs: np.ndarray, y: float, zs: np.ndarray,
    w: float, l: float, h: float,
    boxes: PlacedBoxes, margin: float = 0.0, tol: float = 1e-6,
) -> np.ndarray:
    """True where the box intersects (or crowds) any placed box."""
    if len(boxes) == 0:
        return np.zeros(xs.shape, dtype=bool)
    lo, hi = boxes.lo, boxes.hi
    # Boxes that do not share the vertical range can never collide; resting
    # exactly on a top face is not a shared range.
    vertical = (y < hi[:, 1] - tol) & (y + h > lo[:, 1] + tol)
    if not vertical.any():
        return np.zeros(xs.shape, dtype=bool)
    xs_ = xs[:, None]
    zs_ = zs[:, None]
    hit = (
        vertical[None, :]
        & (xs_ < hi[None, :, 0] + margin - tol)
        & (xs_ + w > lo[None, :, 0] - margin + tol)
        & (zs_ < hi[None, :, 2] + margin - tol)
        & (zs_ + l > lo[None, :, 2] - margin + tol)
    )
    return hit.any(axis=1)


def support_metrics(
    xs: np.ndarray, y: float, zs: np.ndarray,
    w: float, l: float,
    boxes: PlacedBoxes, tol: float = 1e-6,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Supported area fraction and carrying capacity for each candidate.

    Only stackable, non-fragile boxes whose top face is at *y* count.
    Returns ``(ratio, capacity)`` arrays shaped like *xs*.
    """
    zeros = np.zeros(xs.shape, dtype=np.float64)
    base_area = w * l
    if len(boxes) == 0 or base_area <= 0:
        return zeros, zeros.copy()

    touching = boxes.can_carry & (np.abs(boxes.hi[:, 1] - y) <= tol)
    if not touching.any():
        return zeros, zeros.copy()

    lo = boxes.lo[touching]
    hi = boxes.hi[touching]
    overlap_x = np.clip(
        np.minimum(xs[:, None] + w, hi[None, :, 0]) - np.maximum(xs[:, None], lo[None, :, 0]),
        0.0, None,
    )
    overlap_z = np.clip(
        np.minimum(zs[:, None] + l, hi[None, :, 2]) - np.maximum(zs[:, None], lo[None, :, 2]),
        0.0, None,
    )
    overlap = overlap_x * overlap_z

    ratio = overlap.sum(axis=1) / base_area
    area = boxes.area[touching]
    share = np.divide(overlap, area[None, :], out=np.zeros_like(overlap),
                      where=area[None, :] > 0)
    capacity = (share * boxes.capacity[touching][None, :]).sum(axis=1)
    return ratio, capacity


def feasible_mask(
    skid: Skid,
    xs: np.ndarray,
    y: float,
    zs: np.ndarray,
    rotation: int,
    placed: PlacedLike,
    truck: TruckDimensions,
    config: Optional[EngineConfig] = None,
) -> np.ndarray:
    """
    Evaluate all checks for candidates ``(xs[i], y, zs[i])`` at *rotation*.

    Returns a bool array; True means the placement is feasible.
    """
    cfg = config or EngineConfig()
    tol = cfg.touch_tolerance
    xs = np.asarray(xs, dtype=np.float64)
    zs = np.asarray(zs, dtype=np.float64)
    w, l = skid.footprint(rotation)
    h = skid.height
    boxes = PlacedBoxes.coerce(placed, cfg)

    ok = bounds_mask(xs, y, zs, w, l, h, truck, cfg.safety_margin, tol)
    if not ok.any():
        return ok
    ok &= ~collision_mask(xs, y, zs, w, l, h, boxes, cfg.safety_margin, tol)
    if y > tol and ok.any():
        ratio, capacity = support_metrics(xs, y, zs, w, l, boxes, tol)
        ok &= ratio >= cfg.min_support_ratio - 1e-9
        ok &= skid.weight <= capacity + 1e-9
    return ok


# ─────────────────────────────────────────────────────────────────────────────
# Single-position API
# ─────────────────────────────────────────────────────────────────────────────

def validate_placement(
    skid: Skid,
    position: Position,
    placed: PlacedLike,
    truck: TruckDimensions,
    config: Optional[EngineConfig] = None,
) -> bool:
    """
    Validate one proposed placement against all physical constraints.

    Returns:
        True if all checks pass.

    Raises:
        OutOfBoundsError:         outside the usable space or wall margin.
        CollisionError:           intersects a placed skid.
        InsufficientSupportError: supported fraction below the minimum.
        StackWeightError:         heavier than the supporters can carry.
    """
    cfg = config or EngineConfig()
    tol = cfg.touch_tolerance
    boxes = PlacedBoxes.coerce(placed, cfg)
    w, l = skid.footprint(position.rotation)
    h = skid.height
    xs = np.array([position.x], dtype=np.float64)
    zs = np.array([position.z], dtype=np.float64)
    y = position.y

    if not bounds_mask(xs, y, zs, w, l, h, truck, cfg.safety_margin, tol)[0]:
        raise OutOfBoundsError(
            f"{skid.label}: {w:.2f}x{l:.2f}x{h:.2f} at "
            f"({position.x:.2f}, {y:.2f}, {position.z:.2f}) exceeds usable space "
            f"{truck.usable_width:.2f}x{truck.usable_length:.2f}x{truck.usable_height:.2f}"
        )
    if collision_mask(xs, y, zs, w, l, h, boxes, cfg.safety_margin, tol)[0]:
        raise CollisionError(
            f"{skid.label}: intersects a placed skid at "
            f"({position.x:.2f}, {y:.2f}, {position.z:.2f})"
        )
    if y > tol:
        ratio, capacity = support_metrics(xs, y, zs, w, l, boxes, tol)
        if ratio[0] < cfg.min_support_ratio - 1e-9:
            raise InsufficientSupportError(
                f"{skid.label}: only {ratio[0]:.0%} of base supported at y={y:.2f} "
                f"(need ≥{cfg.min_support_ratio:.0%})"
            )
        if skid.weight > capacity[0] + 1e-9:
            raise StackWeightError(
                f"{skid.label}: weight {skid.weight:.1f} exceeds supporting "
                f"capacity {capacity[0]:.1f}"
            )
    return True


def can_place(
    skid: Skid,
    position: Position,
    placed: PlacedLike,
    truck: TruckDimensions,
    config: Optional[EngineConfig] = None,
) -> bool:
    """Pure feasibility predicate over one position."""
    try:
        return validate_placement(skid, position, placed, truck, config)
    except PlacementError:
        return False


def support_ratio(
    skid: Skid,
    position: Position,
    placed: PlacedLike,
    config: Optional[EngineConfig] = None,
) -> float:
    """Fraction of the base supported at *position*; 1.0 on the floor."""
    cfg = config or EngineConfig()
    if position.y <= cfg.touch_tolerance:
        return 1.0
    w, l = skid.footprint(position.rotation)
    ratio, _ = support_metrics(
        np.array([position.x]), position.y, np.array([position.z]),
        w, l, PlacedBoxes.coerce(placed, cfg), cfg.touch_tolerance,
    )
    return float(ratio[0])


# ─────────────────────────────────────────────────────────────────────────────
# Plan audit
# ─────────────────────────────────────────────────────────────────────────────

def audit_plan(
    plan: LoadingPlan,
    config: Optional[EngineConfig] = None,
    input_skids: Optional[Sequence[Skid]] = None,
) -> List[str]:
    """
    Check a finished plan against the loading invariants.

    Returns one message per violation; an empty list means the plan is
    clean.  When *input_skids* is given, conservation against the input
    is checked as well.
    """
    cfg = config or EngineConfig()
    tol = cfg.touch_tolerance
    truck = plan.truck
    problems: List[str] = []

    loaded_ids = [s.id for s in plan.loaded_skids]
    unloaded_ids = [s.id for s in plan.unloaded_skids]
    both = set(loaded_ids) & set(unloaded_ids)
    if both:
        problems.append(f"Skids both loaded and unloaded: {sorted(both)}")
    if len(set(loaded_ids)) != len(loaded_ids):
        problems.append("Duplicate skid ids among loaded skids")
    if input_skids is not None:
        expected = sorted(s.id for s in input_skids)
        if sorted(loaded_ids + unloaded_ids) != expected:
            problems.append(
                f"Conservation broken: {len(loaded_ids)} loaded + "
                f"{len(unloaded_ids)} unloaded != {len(expected)} input"
            )

    for s in plan.unloaded_skids:
        if s.position is not None:
            problems.append(f"Unloaded skid {s.id} carries a position")

    loaded = [s for s in plan.loaded_skids if s.position is not None]
    if len(loaded) != len(plan.loaded_skids):
        problems.append("Loaded skid without a position")

    for s in loaded:
        x0, y0, z0, x1, y1, z1 = s.bounds()
        if (x0 < -tol or y0 < -tol or z0 < -tol
                or x1 > truck.usable_width + tol
                or y1 > truck.usable_height + tol
                or z1 > truck.usable_length + tol):
            problems.append(f"Skid {s.id} exceeds the usable space")

    for i, a in enumerate(loaded):
        ab = a.bounds()
        for b in loaded[i + 1:]:
            bb = b.bounds()
            if all(ab[k] < bb[k + 3] - tol and ab[k + 3] > bb[k] + tol for k in range(3)):
                problems.append(f"Skids {a.id} and {b.id} overlap")

    for s in loaded:
        if s.position.y <= tol:
            continue
        others = [o for o in loaded if o.id != s.id]
        boxes = PlacedBoxes.from_skids(others, capacity_ratio=cfg.stacking_capacity_ratio)
        w, l = s.footprint()
        ratio, capacity = support_metrics(
            np.array([s.position.x]), s.position.y, np.array([s.position.z]),
            w, l, boxes, tol,
        )
        if ratio[0] < cfg.min_support_ratio - 1e-9:
            problems.append(f"Skid {s.id} supported on {ratio[0]:.0%} of its base")
        if s.weight > capacity[0] + 1e-9:
            problems.append(f"Skid {s.id} heavier than its supporters can carry")

    wd = plan.weight_distribution
    if loaded and sum(s.weight for s in loaded) > 0:
        if not math.isclose(wd.front + wd.middle + wd.back, 100.0, abs_tol=1e-6):
            problems.append("front/middle/back weight shares do not sum to 100")
        if not math.isclose(wd.left + wd.right, 100.0, abs_tol=1e-6):
            problems.append("left/right weight shares do not sum to 100")
    elif not loaded and any((wd.front, wd.middle, wd.back, wd.left, wd.right)):
        problems.append("Weight distribution must be all zero for an empty load")

    return problems
