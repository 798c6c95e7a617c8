"""
Demo data - skid lists and the default truck for demonstrations.

Generators:
    generate_demo_skids   - cycle through six standard sizes with random
                            weight, priority and handling flags
    predefined_demo_skids - fixed six-skid set for consistent demos

Usage:
    from truckload.dataset.generator import generate_demo_skids
    skids = generate_demo_skids(24, seed=7, save_path="datasets/demo24.json")
"""

import random
import string
import uuid
from typing import List, Optional

from truckload.config import Skid, TruckDimensions
from truckload.dataset.loader import save_dataset

# Default 53-foot trailer, metric
DEFAULT_TRUCK_METRIC = TruckDimensions(
    length=16.15, width=2.591, height=4.267,
    max_weight=20000.0,
    inside_length=16.15, inside_width=2.54, inside_height=2.946,
    frame_width=2.591, cubic_capacity=120.91,
)

# (width, length, height)
STANDARD_SIZES = [
    (1.2, 0.8, 1.0),   # Euro pallet + typical load
    (1.0, 1.2, 1.5),   # Industrial pallet + tall load
    (0.7, 0.9, 0.8),   # Small box
    (1.5, 1.2, 0.6),   # Wide flat load
    (0.6, 0.6, 1.2),   # Tall narrow load
    (1.0, 1.0, 1.0),   # Cube-shaped load
]

FRAGILE_PROBABILITY = 0.2
STACKABLE_PROBABILITY = 0.7
ON_TOP_RATIO = 0.8


def _label(i: int) -> str:
    """A, B, ..., Z, AA, AB, ..."""
    letters = string.ascii_uppercase
    out = ""
    i += 1
    while i > 0:
        i, rem = divmod(i - 1, 26)
        out = letters[rem] + out
    return f"Skid {out}"


def generate_demo_skids(
    count: int = 6,
    seed: Optional[int] = None,
    save_path: Optional[str] = None,
    truck: Optional[TruckDimensions] = None,
) -> List[Skid]:
    """
    Generate *count* demo skids.

    Args:
        count:     Number of skids.
        seed:      Random seed; the same seed gives the same skids and ids.
        save_path: If given, save the dataset JSON here (with *truck*).
        truck:     Truck stored alongside the skids, defaults to the
                   53 ft trailer.

    Returns:
        List of Skid objects; stackable skids carry
        ``max_weight_on_top = floor(0.8 * weight)``, the others 0.
    """
    rng = random.Random(seed)
    skids: List[Skid] = []
    for i in range(count):
        width, length, height = STANDARD_SIZES[i % len(STANDARD_SIZES)]
        weight = float(rng.randrange(100, 500))
        priority = rng.randint(1, 3)
        is_fragile = rng.random() < FRAGILE_PROBABILITY
        is_stackable = rng.random() < STACKABLE_PROBABILITY
        skids.append(Skid(
            id=str(uuid.UUID(int=rng.getrandbits(128), version=4)),
            label=_label(i),
            width=width, length=length, height=height,
            weight=weight, priority=priority,
            is_stackable=is_stackable,
            is_fragile=is_fragile,
            max_weight_on_top=float(int(weight * ON_TOP_RATIO)) if is_stackable else 0.0,
            description=f"Demo skid {i + 1}",
        ))

    if save_path:
        save_dataset(save_path, truck or DEFAULT_TRUCK_METRIC, skids,
                     generator="demo", params={"count": count, "seed": seed})
    return skids


def predefined_demo_skids() -> List[Skid]:
    """The fixed demo set: two fragile, three stackable, one plain skid."""
    rows = [
        ("fragile-electronics", "Fragile Electronics", 1.2, 0.8, 0.9, 150, 1, False, 0, True,
         "Boxes of electronic equipment - fragile"),
        ("machine-parts", "Machine Parts", 1.2, 1.0, 1.1, 450, 2, True, 200, False,
         "Heavy machine parts - can support weight"),
        ("kitchen-supplies", "Kitchen Supplies", 1.0, 1.2, 1.5, 220, 1, True, 100, False,
         "Kitchen equipment and supplies"),
        ("paint-cans", "Paint Cans", 0.8, 0.8, 0.6, 180, 3, True, 150, False,
         "Boxes of paint cans"),
        ("glass-panels", "Glass Panels", 1.5, 1.0, 0.4, 200, 1, False, 0, True,
         "Fragile glass panels - do not stack"),
        ("furniture", "Furniture", 1.2, 2.0, 0.8, 320, 2, False, 0, False,
         "Disassembled furniture pieces"),
    ]
    return [
        Skid(id=sid, label=label, width=w, length=l, height=h,
             weight=float(weight), priority=prio, is_stackable=stack,
             max_weight_on_top=float(on_top), is_fragile=fragile,
             description=desc)
        for sid, label, w, l, h, weight, prio, stack, on_top, fragile, desc in rows
    ]
