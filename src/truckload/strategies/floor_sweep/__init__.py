from truckload.strategies.floor_sweep.strategy import FloorSweepStrategy, sweep_axis

__all__ = ["FloorSweepStrategy", "sweep_axis"]
