"""Internal geometric models for hole-pairing assembly."""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from scipy.spatial.transform import Rotation

from ..errors import JointError

IDENTITY_QUAT: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)


class PartType(str, Enum):
    """Types of parts in the assembly."""

    STRIP = "strip"
    SCREW = "screw"
    NUT = "nut"
    CORNER_BRACKET = "corner-bracket"
    ANGLE_BRACKET = "angle-bracket"

    @property
    def is_structural(self) -> bool:
        """Structural parts carry holes and can bear joints."""
        return self not in (PartType.SCREW, PartType.NUT)


@dataclass(frozen=True)
class Part:
    """Placement of a part in the world frame."""

    id: str
    type: PartType
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: tuple[float, float, float, float] = IDENTITY_QUAT  # Quaternion (x, y, z, w)
    length: Optional[int] = None  # Hole count, strips only
    color: Optional[str] = None

    @property
    def orientation(self) -> Rotation:
        """World orientation of the part's local frame."""
        return Rotation.from_quat(self.rotation)

    @property
    def euler(self) -> tuple[float, float, float]:
        """Intrinsic XYZ Euler angles (radians) for display.

        At gimbal lock (middle angle of +-90 degrees) scipy picks one of the
        equivalent splits and warns; the warning is suppressed.
        """
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", UserWarning)
            x, y, z = self.orientation.as_euler("XYZ")
        return (float(x), float(y), float(z))


@dataclass(frozen=True)
class Joint:
    """Structural link between a hole on part A and a hole on part B."""

    id: str
    part_a: str
    hole_a: int
    part_b: str
    hole_b: int
    gap: float = 0.0  # Stacking distance between the two holes, fixed at snap time
    fasteners: tuple[str, ...] = ()  # Screw and nut placed with this joint

    def __post_init__(self):
        if self.part_a == self.part_b:
            raise JointError(f"cannot join part {self.part_a} to itself")

    def involves(self, part_id: str) -> bool:
        return part_id in (self.part_a, self.part_b)

    def other(self, part_id: str) -> tuple[str, int]:
        """Return (part id, hole index) of the end opposite ``part_id``."""
        if part_id == self.part_a:
            return self.part_b, self.hole_b
        if part_id == self.part_b:
            return self.part_a, self.hole_a
        raise KeyError(part_id)

    def hole_of(self, part_id: str) -> int:
        """Hole index this joint uses on ``part_id``."""
        if part_id == self.part_a:
            return self.hole_a
        if part_id == self.part_b:
            return self.hole_b
        raise KeyError(part_id)


@dataclass(frozen=True)
class HoleRef:
    """A (part, hole) pair; the pending end of a hole pairing."""

    part_id: str
    hole_index: int


@dataclass(frozen=True)
class AssemblyState:
    """Complete snapshot of parts, joints and selection."""

    parts: tuple[Part, ...] = ()
    joints: tuple[Joint, ...] = ()
    selected_part_id: Optional[str] = None
    selected_hole: Optional[HoleRef] = None
    version: int = 0

    def get_part(self, part_id: Optional[str]) -> Optional[Part]:
        for part in self.parts:
            if part.id == part_id:
                return part
        return None

    def joints_of(self, part_id: str) -> list[Joint]:
        """Joints in which ``part_id`` is an endpoint."""
        return [joint for joint in self.joints if joint.involves(part_id)]

    def is_anchored(self, part_id: str) -> bool:
        return any(joint.involves(part_id) for joint in self.joints)


@dataclass
class PartMetadata:
    """Metadata for BOM generation."""

    part_type: PartType
    name: str
    count: int = 1
    dimensions: dict[str, float] = field(default_factory=dict)
    notes: Optional[str] = None
