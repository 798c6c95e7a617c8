"""
truckload - greedy 3D truck loading engine for palletised skids.

Public API:
    from truckload.config import Skid, Position, TruckDimensions, EngineConfig
    from truckload.optimizer import optimize_loading, generate_loading_instructions
    from truckload.simulator.validator import can_place, audit_plan
    from truckload.strategies import get_strategy
    from truckload.dataset import load_dataset, generate_demo_skids
"""

from truckload.config import EngineConfig, Position, Skid, TruckDimensions
from truckload.plan import LoadingPlan, LoadingSequence, LoadingStep, WeightDistribution
from truckload.optimizer import generate_loading_instructions, optimize_loading

__version__ = "0.1.0"

__all__ = [
    "EngineConfig", "Position", "Skid", "TruckDimensions",
    "LoadingPlan", "LoadingSequence", "LoadingStep", "WeightDistribution",
    "optimize_loading", "generate_loading_instructions",
]
