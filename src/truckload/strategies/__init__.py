"""
strategies -- pluggable placement strategy interface.

Public API:
    from truckload.strategies.base_strategy import PlacementStrategy, get_strategy, register_strategy
    from truckload.strategies.floor_sweep import FloorSweepStrategy
    from truckload.strategies.extreme_points import ExtremePointsStrategy, ExtremePointSet
"""

from truckload.strategies.base_strategy import (
    PlacementStrategy, get_strategy, register_strategy, STRATEGY_REGISTRY,
)
import truckload.strategies.floor_sweep  # registers FloorSweepStrategy
import truckload.strategies.extreme_points  # registers ExtremePointsStrategy

__all__ = [
    "PlacementStrategy", "get_strategy", "register_strategy", "STRATEGY_REGISTRY",
]
