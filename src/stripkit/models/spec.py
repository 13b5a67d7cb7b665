"""Pydantic models for engine configuration and command script parsing."""

from __future__ import annotations

import math
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from .geometry import PartType

DEFAULT_COLORS: dict[PartType, str] = {
    PartType.STRIP: "#bdc3c7",
    PartType.SCREW: "#bdc3c7",
    PartType.NUT: "#bdc3c7",
    PartType.CORNER_BRACKET: "#bdc3c7",
    PartType.ANGLE_BRACKET: "#e74c3c",
}


class EngineConfig(BaseModel):
    """Tunable constants of the assembly engine."""

    hole_spacing: float = Field(default=12.7, gt=0, description="Hole pitch shared by all part types")
    thickness: float = Field(default=1.0, gt=0, description="Material thickness used for stacking offsets")
    min_strip_holes: int = Field(default=3, ge=2, description="Shortest strip (hole count)")
    max_strip_holes: int = Field(default=25, ge=2, description="Longest strip (hole count)")
    default_strip_holes: int = Field(default=5, ge=2, description="Hole count when none is given")
    mover_policy: Literal["prefer-strip", "clicked"] = Field(
        default="prefer-strip",
        description="Tie-break when both parts are equally anchored",
    )
    remove_orphan_fasteners: bool = Field(
        default=False,
        description="Delete a joint's screw and nut when the joint is destroyed",
    )
    colors: dict[PartType, str] = Field(default_factory=lambda: dict(DEFAULT_COLORS))

    @model_validator(mode="after")
    def validate_strip_range(self) -> "EngineConfig":
        if self.min_strip_holes > self.max_strip_holes:
            raise ValueError("min_strip_holes cannot exceed max_strip_holes")
        if not self.min_strip_holes <= self.default_strip_holes <= self.max_strip_holes:
            raise ValueError("default_strip_holes must lie within [min_strip_holes, max_strip_holes]")
        return self

    def color_for(self, part_type: PartType) -> str:
        return self.colors.get(part_type, DEFAULT_COLORS[part_type])


Vector3 = tuple[float, float, float]


class AddCommand(BaseModel):
    """Add a part."""

    op: Literal["add"]
    type: PartType
    id: Optional[str] = None
    length: Optional[int] = None
    position: Optional[Vector3] = None
    euler: Optional[Vector3] = Field(default=None, description="Intrinsic XYZ Euler angles in radians")
    color: Optional[str] = None


class UpdateCommand(BaseModel):
    """Overwrite placement or cosmetic properties of a part."""

    op: Literal["update"]
    part: str
    position: Optional[Vector3] = None
    euler: Optional[Vector3] = None
    length: Optional[int] = None
    color: Optional[str] = None


class RemoveCommand(BaseModel):
    op: Literal["remove"]
    part: str


class RotateCommand(BaseModel):
    """Rotate a part about its local Z axis by degrees or radians."""

    op: Literal["rotate"]
    part: str
    degrees: Optional[float] = None
    radians: Optional[float] = None

    @model_validator(mode="after")
    def validate_single_angle(self) -> "RotateCommand":
        if (self.degrees is None) == (self.radians is None):
            raise ValueError("rotate requires exactly one of degrees or radians")
        return self

    @property
    def angle(self) -> float:
        """Rotation angle in radians."""
        if self.radians is not None:
            return self.radians
        return math.radians(self.degrees)


class SelectPartCommand(BaseModel):
    op: Literal["select-part"]
    part: Optional[str] = None


class SelectHoleCommand(BaseModel):
    op: Literal["select-hole"]
    part: str
    hole: int = Field(ge=0)


class ResetSelectionCommand(BaseModel):
    op: Literal["reset-selection"]


class ClearCommand(BaseModel):
    op: Literal["clear"]


Command = Annotated[
    Union[
        AddCommand,
        UpdateCommand,
        RemoveCommand,
        RotateCommand,
        SelectPartCommand,
        SelectHoleCommand,
        ResetSelectionCommand,
        ClearCommand,
    ],
    Field(discriminator="op"),
]


class AssemblyScript(BaseModel):
    """A sequence of store commands with optional configuration overrides."""

    config: EngineConfig = Field(default_factory=EngineConfig)
    commands: list[Command] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_part_references(self) -> "AssemblyScript":
        # Explicit ids must be unique; anonymous parts cannot be referenced later
        known: set[str] = set()
        for index, command in enumerate(self.commands):
            if isinstance(command, AddCommand):
                if command.id is not None:
                    if command.id in known:
                        raise ValueError(f"command {index}: duplicate part id '{command.id}'")
                    known.add(command.id)
            elif isinstance(command, ClearCommand):
                known.clear()
            else:
                part = getattr(command, "part", None)
                if part is not None and part not in known:
                    raise ValueError(f"command {index}: unknown part id '{part}'")
                if isinstance(command, RemoveCommand):
                    known.discard(command.part)
        return self
