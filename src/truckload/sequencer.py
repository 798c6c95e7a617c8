"""
Ordering of skids before placement and of the physical loading steps after.

    sort_skids_for_loading()    priority asc, weight desc, volume desc (stable)
    generate_loading_sequence() floor first, then front to back, one
                                instruction per loaded skid
"""

from typing import Iterable, List, Optional, Sequence

from truckload.config import EngineConfig, Skid, TruckDimensions
from truckload.plan import LoadingSequence, LoadingStep


def sort_skids_for_loading(skids: Iterable[Skid]) -> List[Skid]:
    """Placement order for the greedy loop; equal keys keep input order."""
    return sorted(skids, key=lambda s: (s.priority, -s.weight, -s.volume))


def describe_side(
    skid: Skid,
    truck: Optional[TruckDimensions] = None,
    config: Optional[EngineConfig] = None,
) -> str:
    """
    "left side", "right side" or "center" for a positioned skid.

    With ``side_reference="item"`` x is compared with half the skid's own
    width.  With ``"container"`` the skid centre is compared with the
    truck centre line (needs *truck*).
    """
    cfg = config or EngineConfig()
    tol = cfg.touch_tolerance
    pos = skid.position
    if cfg.side_reference == "container" and truck is not None:
        fw, _ = skid.footprint()
        offset = (pos.x + fw / 2.0) - truck.usable_width / 2.0
    else:
        offset = pos.x - skid.width / 2.0

    if offset < -tol:
        return "left side"
    if offset > tol:
        return "right side"
    return "center"


def loading_order(skids: Iterable[Skid]) -> List[Skid]:
    """Positioned skids sorted by (y, z); ties keep placement order."""
    placed = [s for s in skids if s.position is not None]
    return sorted(placed, key=lambda s: (s.position.y, s.position.z))


def format_instruction(
    index: int,
    skid: Skid,
    truck: Optional[TruckDimensions] = None,
    config: Optional[EngineConfig] = None,
) -> str:
    cfg = config or EngineConfig()
    pos = skid.position
    orientation = "length-wise" if pos.rotation == 0 else "width-wise"
    side = describe_side(skid, truck, cfg)
    level = (
        "stacked on top of other skids"
        if pos.y > cfg.touch_tolerance else "on the floor"
    )
    unit = cfg.length_unit
    return (
        f"Step {index}: Load {skid.label} {orientation} on the {side} at "
        f"{pos.z:.2f} {unit} from the front, {pos.x:.2f} {unit} from the left side, "
        f"and {level}."
    )


def generate_loading_sequence(
    loaded_skids: Sequence[Skid],
    truck: Optional[TruckDimensions] = None,
    config: Optional[EngineConfig] = None,
) -> LoadingSequence:
    """One LoadingStep per positioned skid, in physical loading order."""
    steps = [
        LoadingStep(
            skid_id=skid.id,
            position=skid.position,
            instruction=format_instruction(i, skid, truck, config),
        )
        for i, skid in enumerate(loading_order(loaded_skids), start=1)
    ]
    return LoadingSequence(steps=steps)
