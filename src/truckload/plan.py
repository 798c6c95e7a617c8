"""
Result types returned by the optimiser.

    WeightDistribution - percentage of loaded weight per truck section
    LoadingPlan        - loaded / unloaded partition plus derived metrics
    LoadingStep        - one physical loading action with its instruction
    LoadingSequence    - ordered steps for the loading crew
"""

from dataclasses import dataclass, field
from typing import List

from truckload.config import Position, Skid, TruckDimensions


@dataclass(frozen=True)
class WeightDistribution:
    """front + middle + back == 100 and left + right == 100 unless empty."""
    front: float = 0.0
    middle: float = 0.0
    back: float = 0.0
    left: float = 0.0
    right: float = 0.0

    def to_dict(self) -> dict:
        return {"front": self.front, "middle": self.middle, "back": self.back,
                "left": self.left, "right": self.right}


@dataclass(frozen=True)
class LoadingPlan:
    """
    Outcome of one optimisation run.

    Attributes:
        truck:               Container the plan was computed for.
        loaded_skids:        Copies of the input skids carrying a position,
                             in placement order.
        unloaded_skids:      Skids for which no feasible position was found,
                             in sorted order, without a position.
        space_utilization:   Loaded volume as % of usable volume.
        total_weight:        Sum of loaded weights.
        weight_distribution: See ``WeightDistribution``.
    """
    truck: TruckDimensions
    loaded_skids: List[Skid] = field(default_factory=list)
    unloaded_skids: List[Skid] = field(default_factory=list)
    space_utilization: float = 0.0
    total_weight: float = 0.0
    weight_distribution: WeightDistribution = field(default_factory=WeightDistribution)

    def to_dict(self) -> dict:
        return {
            "truckDimensions": self.truck.to_dict(),
            "loadedSkids": [s.to_dict() for s in self.loaded_skids],
            "unloadedSkids": [s.to_dict() for s in self.unloaded_skids],
            "spaceUtilization": round(self.space_utilization, 6),
            "totalWeight": self.total_weight,
            "weightDistribution": self.weight_distribution.to_dict(),
        }


@dataclass(frozen=True)
class LoadingStep:
    skid_id: str
    position: Position
    instruction: str

    def to_dict(self) -> dict:
        return {"skidId": self.skid_id, "position": self.position.to_dict(),
                "instruction": self.instruction}


@dataclass(frozen=True)
class LoadingSequence:
    steps: List[LoadingStep] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self):
        return iter(self.steps)

    def to_dict(self) -> dict:
        return {"steps": [s.to_dict() for s in self.steps]}
