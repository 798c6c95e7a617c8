"""
simulator - committed load state, feasibility checks and the commit pipeline.

Public API:
    from truckload.simulator.load_state import LoadState, PlacedBoxes
    from truckload.simulator.validator import can_place, validate_placement, audit_plan
    from truckload.simulator.pipeline import LoadingPipeline, StepRecord
"""

from truckload.simulator.load_state import LoadState, PlacedBoxes
from truckload.simulator.validator import (
    CollisionError,
    InsufficientSupportError,
    InvalidContainerError,
    OutOfBoundsError,
    PlacementError,
    StackWeightError,
    audit_plan,
    can_place,
    feasible_mask,
    support_ratio,
    validate_placement,
    validate_truck,
)
from truckload.simulator.pipeline import LoadingPipeline, StepRecord

__all__ = [
    "LoadState", "PlacedBoxes",
    "PlacementError", "OutOfBoundsError", "CollisionError",
    "InsufficientSupportError", "StackWeightError", "InvalidContainerError",
    "can_place", "validate_placement", "feasible_mask", "support_ratio",
    "audit_plan", "validate_truck",
    "LoadingPipeline", "StepRecord",
]
