from truckload.strategies.extreme_points.strategy import (
    ExtremePointSet,
    ExtremePointsStrategy,
    dominates,
)

__all__ = ["ExtremePointSet", "ExtremePointsStrategy", "dominates"]
