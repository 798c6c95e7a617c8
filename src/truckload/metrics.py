"""
Derived plan metrics: space utilisation and weight distribution.

Both are pure functions of the loaded skids and the truck, so recomputing
them over the same plan always gives the same numbers.
"""

from typing import Iterable, Sequence

from truckload.config import Skid, TruckDimensions
from truckload.plan import WeightDistribution

# Relative depth boundaries of the front / middle / back sections
FRONT_BOUNDARY: float = 0.33
MIDDLE_BOUNDARY: float = 0.66
# Relative width boundary of the left / right halves
SIDE_BOUNDARY: float = 0.5


def total_weight(skids: Iterable[Skid]) -> float:
    return float(sum(s.weight for s in skids))


def calculate_space_utilization(skids: Iterable[Skid], truck: TruckDimensions) -> float:
    """Loaded volume as % of usable volume; 0 for a degenerate truck."""
    volume = truck.usable_volume
    if not volume > 0:
        return 0.0
    return sum(s.volume for s in skids) / volume * 100.0


def calculate_weight_distribution(
    skids: Sequence[Skid], truck: TruckDimensions,
) -> WeightDistribution:
    """
    Share of loaded weight per truck section, by rotated skid centre.

    Depth thirds use the usable length, halves use the usable width.
    All shares are 0 when the loaded weight is 0.
    """
    L, W = truck.usable_length, truck.usable_width
    front = middle = back = left = right = 0.0
    total = 0.0

    for skid in skids:
        if skid.position is None:
            continue
        weight = skid.weight
        total += weight
        fw, fl = skid.footprint()

        rel_z = (skid.position.z + fl / 2.0) / L if L > 0 else 0.0
        if rel_z < FRONT_BOUNDARY:
            front += weight
        elif rel_z < MIDDLE_BOUNDARY:
            middle += weight
        else:
            back += weight

        rel_x = (skid.position.x + fw / 2.0) / W if W > 0 else 0.0
        if rel_x < SIDE_BOUNDARY:
            left += weight
        else:
            right += weight

    if total <= 0:
        return WeightDistribution()
    return WeightDistribution(
        front=front / total * 100.0,
        middle=middle / total * 100.0,
        back=back / total * 100.0,
        left=left / total * 100.0,
        right=right / total * 100.0,
    )
