"""
Metric / imperial conversion for trucks and skids.

The engine works in one consistent unit; callers convert their inputs
with these helpers before optimising.  Unit systems are "metric"
(meters, kilograms, cubic meters) and "imperial" (feet, pounds, cubic
feet).
"""

from dataclasses import replace
from typing import Callable, Optional

from truckload.config import Skid, TruckDimensions

METRIC = "metric"
IMPERIAL = "imperial"
UNIT_SYSTEMS = (METRIC, IMPERIAL)

METER_TO_FEET = 3.28084
FEET_TO_METER = 0.3048
KG_TO_LB = 2.20462
LB_TO_KG = 0.453592
CUBIC_METER_TO_CUBIC_FEET = 35.3147
CUBIC_FEET_TO_CUBIC_METER = 0.0283168

LENGTH_UNIT_NAMES = {METRIC: "meters", IMPERIAL: "feet"}


def meter_to_feet(value: float) -> float:
    return value * METER_TO_FEET


def feet_to_meter(value: float) -> float:
    return value * FEET_TO_METER


def kg_to_lb(value: float) -> float:
    return value * KG_TO_LB


def lb_to_kg(value: float) -> float:
    return value * LB_TO_KG


def cubic_meter_to_cubic_feet(value: float) -> float:
    return value * CUBIC_METER_TO_CUBIC_FEET


def cubic_feet_to_cubic_meter(value: float) -> float:
    return value * CUBIC_FEET_TO_CUBIC_METER


def _check(system: str) -> None:
    if system not in UNIT_SYSTEMS:
        raise ValueError(f"Unknown unit system {system!r}; expected one of {UNIT_SYSTEMS}")


def _opt(value: Optional[float], fn: Callable[[float], float]) -> Optional[float]:
    return fn(value) if value is not None else None


def _converters(from_unit: str, to_unit: str):
    if from_unit == METRIC:
        return meter_to_feet, kg_to_lb, cubic_meter_to_cubic_feet
    return feet_to_meter, lb_to_kg, cubic_feet_to_cubic_meter


def convert_truck_dimensions(
    truck: TruckDimensions, from_unit: str, to_unit: str,
) -> TruckDimensions:
    """Copy of *truck* expressed in *to_unit*."""
    _check(from_unit)
    _check(to_unit)
    if from_unit == to_unit:
        return truck
    length, weight, volume = _converters(from_unit, to_unit)
    return TruckDimensions(
        length=length(truck.length),
        width=length(truck.width),
        height=length(truck.height),
        max_weight=_opt(truck.max_weight, weight),
        inside_length=_opt(truck.inside_length, length),
        inside_width=_opt(truck.inside_width, length),
        inside_height=_opt(truck.inside_height, length),
        frame_width=_opt(truck.frame_width, length),
        cubic_capacity=_opt(truck.cubic_capacity, volume),
    )


def convert_skid(skid: Skid, from_unit: str, to_unit: str) -> Skid:
    """Copy of *skid* (dimensions, weights, position) expressed in *to_unit*."""
    _check(from_unit)
    _check(to_unit)
    if from_unit == to_unit:
        return skid
    length, weight, _ = _converters(from_unit, to_unit)
    pos = skid.position
    if pos is not None:
        pos = replace(pos, x=length(pos.x), y=length(pos.y), z=length(pos.z))
    return replace(
        skid,
        width=length(skid.width),
        length=length(skid.length),
        height=length(skid.height),
        weight=weight(skid.weight),
        max_weight_on_top=_opt(skid.max_weight_on_top, weight),
        position=pos,
    )


def format_length(value: float, system: str) -> str:
    return f"{value:.2f} m" if system == METRIC else f"{value:.2f} ft"


def format_weight(value: float, system: str) -> str:
    return f"{value:.2f} kg" if system == METRIC else f"{value:.2f} lb"


def format_volume(value: float, system: str) -> str:
    return f"{value:.2f} m³" if system == METRIC else f"{value:.2f} ft³"
