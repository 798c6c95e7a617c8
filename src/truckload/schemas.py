"""
Validated input schemas for skids, trucks and whole load requests.

These models accept the camelCase wire shape used by datasets and imports
(``isStackable``, ``maxWeightOnTop``, ``insideLength``, ...) as well as
snake_case, and convert into the frozen engine types via ``to_domain()``.

Legacy inputs are tolerated:
    - ``canBeStacked`` is read when ``isStackable`` is missing
    - booleans may be given as "yes"/"no"/"true"/"false"
    - missing ids get a uuid4, missing labels ``Skid-xxxxxxxx``
"""

import uuid
from typing import Any, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from truckload.config import EngineConfig, Skid, TruckDimensions

_TRUE_STRINGS = {"yes", "y", "true", "1"}
_FALSE_STRINGS = {"no", "n", "false", "0", ""}


def parse_flag(value: Any) -> Any:
    """Map "yes"/"no" style strings onto bools; leave other values alone."""
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    return value


def _new_id() -> str:
    return str(uuid.uuid4())


# ----Skid-----
class SkidModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(default_factory=_new_id)
    label: str = ""
    width: float = Field(gt=0)
    length: float = Field(gt=0)
    height: float = Field(gt=0)
    weight: float = Field(default=0.0, ge=0)
    priority: int = Field(default=1, gt=0)
    # isStackable wins over the legacy canBeStacked when both are present
    is_stackable: bool = Field(
        default=False,
        validation_alias=AliasChoices("isStackable", "is_stackable", "canBeStacked"),
    )
    is_fragile: bool = Field(
        default=False, validation_alias=AliasChoices("isFragile", "is_fragile"),
    )
    max_weight_on_top: Optional[float] = Field(
        default=None, ge=0,
        validation_alias=AliasChoices("maxWeightOnTop", "max_weight_on_top"),
    )
    description: str = ""
    special_handling: str = Field(
        default="", validation_alias=AliasChoices("specialHandling", "special_handling"),
    )

    @field_validator("is_stackable", "is_fragile", mode="before")
    @classmethod
    def _parse_flags(cls, value: Any) -> Any:
        return parse_flag(value)

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        if value is None or value == "":
            return _new_id()
        return str(value)

    @model_validator(mode="after")
    def _default_label(self) -> "SkidModel":
        if not self.label:
            self.label = f"Skid-{uuid.uuid4().hex[:8]}"
        return self

    def to_domain(self) -> Skid:
        return Skid(
            id=self.id, label=self.label,
            width=self.width, length=self.length, height=self.height,
            weight=self.weight, priority=self.priority,
            is_stackable=self.is_stackable, is_fragile=self.is_fragile,
            max_weight_on_top=self.max_weight_on_top,
            description=self.description, special_handling=self.special_handling,
        )


# ----Truck-----
class TruckModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    length: float = Field(gt=0)
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    max_weight: Optional[float] = Field(
        default=None, ge=0, validation_alias=AliasChoices("maxWeight", "max_weight"),
    )
    inside_length: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("insideLength", "inside_length"),
    )
    inside_width: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("insideWidth", "inside_width"),
    )
    inside_height: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("insideHeight", "inside_height"),
    )
    frame_width: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("frameWidth", "frame_width"),
    )
    cubic_capacity: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("cubicCapacity", "cubic_capacity"),
    )

    def to_domain(self) -> TruckDimensions:
        return TruckDimensions(
            length=self.length, width=self.width, height=self.height,
            max_weight=self.max_weight,
            inside_length=self.inside_length,
            inside_width=self.inside_width,
            inside_height=self.inside_height,
            frame_width=self.frame_width,
            cubic_capacity=self.cubic_capacity,
        )


# ----Request-----
class LoadRequest(BaseModel):
    """A truck, its skids and optional engine options."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    truck: TruckModel = Field(
        validation_alias=AliasChoices("truck", "truckDimensions"),
    )
    skids: List[SkidModel] = Field(default_factory=list)
    config: Optional[dict] = None

    def to_domain(self):
        """(skids, truck, config) ready for ``optimize_loading``."""
        return (
            [s.to_domain() for s in self.skids],
            self.truck.to_domain(),
            EngineConfig.from_dict(self.config),
        )
