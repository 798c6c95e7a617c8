"""
Central configuration and data models for the truck loading engine.

All modules import their core types from here to ensure consistency
across the simulator, strategy, sequencing, and reporting layers.

Classes:
    Position        - where a skid sits inside the truck (x, y, z, rotation)
    Skid            - input cargo unit with dimensions, weight and handling flags
    TruckDimensions - outer and usable container dimensions
    EngineConfig    - all tuneable parameters for a single optimisation run

Axes (all lengths in one consistent unit):
    x - lateral offset from the left side wall
    y - height above the floor
    z - depth from the front of the truck
"""

from dataclasses import dataclass, fields, replace
from typing import Optional, Tuple

import yaml


# ─────────────────────────────────────────────────────────────────────────────
# Position
# ─────────────────────────────────────────────────────────────────────────────

ROTATIONS: Tuple[int, ...] = (0, 90)


@dataclass(frozen=True)
class Position:
    """
    Placement of a skid's left-bottom-front corner.

    Attributes:
        x:        Lateral offset from the left wall.
        y:        Height above the floor.
        z:        Depth from the front of the truck.
        rotation: 0 or 90 degrees around the vertical axis.  A 90° turn
                  swaps the skid's width and length footprint.
    """
    x: float
    y: float
    z: float
    rotation: int = 0

    def __post_init__(self) -> None:
        if self.rotation not in ROTATIONS:
            raise ValueError(
                f"Unsupported rotation {self.rotation!r}; expected one of {ROTATIONS}"
            )

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z, "rotation": self.rotation}

    @classmethod
    def from_dict(cls, d: dict) -> "Position":
        return cls(x=d["x"], y=d["y"], z=d["z"], rotation=d.get("rotation") or 0)


# ─────────────────────────────────────────────────────────────────────────────
# Skid
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Skid:
    """
    A palletised cargo unit to be loaded.

    Frozen: the engine never edits an input skid, it only returns copies
    carrying a ``position`` (see ``with_position``).

    Attributes:
        id:                Unique identifier.
        label:             Human-readable name used in instructions.
        width:             Lateral extent at rotation 0.
        length:            Depth extent at rotation 0.
        height:            Vertical extent.
        weight:            Non-negative weight.
        priority:          1 = highest.
        is_stackable:      Whether other skids may rest on this one.
        is_fragile:        Fragile skids never carry load and are never stacked.
        max_weight_on_top: Load capacity; ``None`` derives it from ``weight``.
        position:          Assigned by the engine, ``None`` until placed.
    """
    id: str
    label: str
    width: float
    length: float
    height: float
    weight: float
    priority: int = 1
    is_stackable: bool = False
    is_fragile: bool = False
    max_weight_on_top: Optional[float] = None
    description: str = ""
    special_handling: str = ""
    position: Optional[Position] = None

    @property
    def volume(self) -> float:
        return self.width * self.length * self.height

    @property
    def is_placed(self) -> bool:
        return self.position is not None

    def footprint(self, rotation: Optional[int] = None) -> Tuple[float, float]:
        """(x-extent, z-extent) of the skid's base for *rotation*.

        Defaults to the rotation of the assigned position, or 0.
        """
        if rotation is None:
            rotation = self.position.rotation if self.position is not None else 0
        if rotation == 90:
            return self.length, self.width
        return self.width, self.length

    def with_position(self, position: Optional[Position]) -> "Skid":
        return replace(self, position=position)

    def bounds(self) -> Tuple[float, float, float, float, float, float]:
        """(x0, y0, z0, x1, y1, z1) of a placed skid."""
        if self.position is None:
            raise ValueError(f"Skid {self.id!r} has no position")
        fw, fl = self.footprint()
        p = self.position
        return p.x, p.y, p.z, p.x + fw, p.y + self.height, p.z + fl

    def to_dict(self) -> dict:
        d = {
            "id": self.id,
            "label": self.label,
            "width": self.width,
            "length": self.length,
            "height": self.height,
            "weight": self.weight,
            "priority": self.priority,
            "isStackable": self.is_stackable,
            "isFragile": self.is_fragile,
            "maxWeightOnTop": self.max_weight_on_top,
            "description": self.description,
            "specialHandling": self.special_handling,
        }
        if self.position is not None:
            d["position"] = self.position.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Skid":
        pos = d.get("position")
        return cls(
            id=str(d["id"]), label=d.get("label", str(d["id"])),
            width=d["width"], length=d["length"], height=d["height"],
            weight=d.get("weight", 0.0), priority=d.get("priority", 1),
            is_stackable=d.get("isStackable", False),
            is_fragile=d.get("isFragile", False),
            max_weight_on_top=d.get("maxWeightOnTop"),
            description=d.get("description", ""),
            special_handling=d.get("specialHandling", ""),
            position=Position.from_dict(pos) if pos else None,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Truck / container
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TruckDimensions:
    """
    Outer and usable dimensions of the loading space.

    When the inside dimensions are missing (or not positive) the usable
    space falls back to a fixed fraction of the outer dimensions.  The
    fractions are a compatibility heuristic, not a physical constant.
    """
    length: float
    width: float
    height: float
    max_weight: Optional[float] = None
    inside_length: Optional[float] = None
    inside_width: Optional[float] = None
    inside_height: Optional[float] = None
    frame_width: Optional[float] = None
    cubic_capacity: Optional[float] = None

    FALLBACK_LENGTH_RATIO = 0.95
    FALLBACK_WIDTH_RATIO = 0.95
    FALLBACK_HEIGHT_RATIO = 0.75

    @staticmethod
    def _usable(inside: Optional[float], outer: float, ratio: float) -> float:
        if inside is not None and inside > 0:
            return inside
        return outer * ratio

    @property
    def usable_length(self) -> float:
        return self._usable(self.inside_length, self.length, self.FALLBACK_LENGTH_RATIO)

    @property
    def usable_width(self) -> float:
        return self._usable(self.inside_width, self.width, self.FALLBACK_WIDTH_RATIO)

    @property
    def usable_height(self) -> float:
        return self._usable(self.inside_height, self.height, self.FALLBACK_HEIGHT_RATIO)

    @property
    def usable_volume(self) -> float:
        """Stated cubic capacity if given, else the usable box volume."""
        if self.cubic_capacity is not None and self.cubic_capacity > 0:
            return self.cubic_capacity
        return self.usable_length * self.usable_width * self.usable_height

    def to_dict(self) -> dict:
        return {
            "length": self.length, "width": self.width, "height": self.height,
            "maxWeight": self.max_weight,
            "insideLength": self.inside_length,
            "insideWidth": self.inside_width,
            "insideHeight": self.inside_height,
            "frameWidth": self.frame_width,
            "cubicCapacity": self.cubic_capacity,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "TruckDimensions":
        return cls(
            length=d["length"], width=d["width"], height=d["height"],
            max_weight=d.get("maxWeight"),
            inside_length=d.get("insideLength"),
            inside_width=d.get("insideWidth"),
            inside_height=d.get("insideHeight"),
            frame_width=d.get("frameWidth"),
            cubic_capacity=d.get("cubicCapacity"),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Engine configuration
# ─────────────────────────────────────────────────────────────────────────────

SIDE_REFERENCES = ("item", "container")

# camelCase keys accepted in config files and request payloads
_CONFIG_ALIASES = {
    "floorSweepStep": "floor_sweep_step",
    "safetyMargin": "safety_margin",
    "minSupportRatio": "min_support_ratio",
    "priorityWeight": "priority_weight",
    "stackingCapacityRatio": "stacking_capacity_ratio",
    "highPriorityThreshold": "high_priority_threshold",
    "touchTolerance": "touch_tolerance",
    "respectMaxWeight": "respect_max_weight",
    "sideReference": "side_reference",
    "lengthUnit": "length_unit",
    "strategy": "strategy_name",
    "strategyName": "strategy_name",
}


@dataclass(frozen=True)
class EngineConfig:
    """
    All tuneable parameters for a single optimisation run.

    Attributes:
        floor_sweep_step:        Grid step of the floor/stack sweep.
        safety_margin:           Clearance from side/end walls and from boxes
                                 sharing a vertical range.
        min_support_ratio:       Minimum supported fraction of a stacked base.
        priority_weight:         Scale of the back-of-truck reward for
                                 high-priority skids.
        stacking_capacity_ratio: Fraction of a supporter's own weight it may
                                 carry when ``max_weight_on_top`` is unset.
        high_priority_threshold: Priorities at or below this go to the back.
        touch_tolerance:         Absolute tolerance for touching surfaces.
        respect_max_weight:      Enforce the truck's payload limit.
        side_reference:          "item" compares x with half the skid's own
                                 width (legacy), "container" compares the
                                 skid centre with the truck centre line.
        length_unit:             Unit name used in loading instructions.
        strategy_name:           Registered placement strategy.
    """
    floor_sweep_step: float = 0.1
    safety_margin: float = 0.0
    min_support_ratio: float = 0.7
    priority_weight: float = 0.7
    stacking_capacity_ratio: float = 0.8
    high_priority_threshold: int = 2
    touch_tolerance: float = 1e-6
    respect_max_weight: bool = True
    side_reference: str = "item"
    length_unit: str = "meters"
    strategy_name: str = "floor_sweep"

    def __post_init__(self) -> None:
        if self.floor_sweep_step <= 0:
            raise ValueError(f"floor_sweep_step must be positive, got {self.floor_sweep_step}")
        if self.safety_margin < 0:
            raise ValueError(f"safety_margin cannot be negative, got {self.safety_margin}")
        if not 0.0 <= self.min_support_ratio <= 1.0:
            raise ValueError(f"min_support_ratio must be in [0, 1], got {self.min_support_ratio}")
        if self.stacking_capacity_ratio < 0:
            raise ValueError("stacking_capacity_ratio cannot be negative")
        if self.touch_tolerance < 0:
            raise ValueError("touch_tolerance cannot be negative")
        if self.side_reference not in SIDE_REFERENCES:
            raise ValueError(
                f"side_reference must be one of {SIDE_REFERENCES}, got {self.side_reference!r}"
            )

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> "EngineConfig":
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in (d or {}).items():
            name = _CONFIG_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown engine option '{key}'")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, path: str) -> "EngineConfig":
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping of engine options")
        return cls.from_dict(data)

    def to_yaml(self, path: str) -> None:
        with open(path, "w") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)

    def evolve(self, **changes) -> "EngineConfig":
        return replace(self, **changes)
