"""
Pre-flight checks on a skid list, reported as human-readable messages.

The engine assumes clean input; callers run ``validate_skids`` first and
show the messages to the user instead of optimising.
"""

from typing import List, Sequence

from truckload.config import Skid


def validate_skids(skids: Sequence[Skid]) -> List[str]:
    """Every problem found in *skids*; an empty list means they are usable."""
    errors: List[str] = []

    if not skids:
        errors.append("No skids to load.")
        return errors

    for index, skid in enumerate(skids, start=1):
        prefix = f"Skid #{index} ({skid.label})"
        if skid.width <= 0 or skid.length <= 0 or skid.height <= 0:
            errors.append(f"{prefix}: Dimensions must be greater than zero.")
        if skid.weight < 0:
            errors.append(f"{prefix}: Weight cannot be negative.")
        if skid.priority <= 0:
            errors.append(f"{prefix}: Priority must be greater than zero.")
        if (skid.is_stackable and skid.max_weight_on_top is not None
                and skid.max_weight_on_top < 0):
            errors.append(f"{prefix}: Max weight on top cannot be negative.")

    seen = set()
    for index, skid in enumerate(skids, start=1):
        if skid.id in seen:
            errors.append(f"Skid #{index} ({skid.label}): Duplicate id {skid.id!r}.")
        seen.add(skid.id)

    return errors
