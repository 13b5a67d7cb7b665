"""Hole geometry for each part type.

Every structural part carries a row of holes at a fixed pitch. A hole is
described by its offset from the part origin and by the orientation of its
axis, both in the part's local frame. The hole axis is the local Z axis
carried through the hole orientation.

    strip           holes along local X at index * HOLE_SPACING
    corner-bracket  (0, 0, 0), (S, 0, 0), (0, S, 0) on one flat flange
    angle-bracket   base hole at the origin; upright hole at (S/2, 0, S/2),
                    turned 90 degrees about Y so its axis points along X
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from scipy.spatial.transform import Rotation

from ..errors import InvalidHoleError
from ..models.geometry import Part, PartType

HOLE_SPACING = 12.7  # mm
THICKNESS = 1.0  # mm

# Angle bracket hole on the bent-up flange
ANGLE_BRACKET_UPRIGHT_HOLE = 1

_CORNER_BRACKET_HOLES = ((0.0, 0.0), (1.0, 0.0), (0.0, 1.0))  # In units of hole spacing
_UPRIGHT = Rotation.from_euler("y", 90, degrees=True)


def hole_count(part_type: PartType, length: Optional[int] = None) -> int:
    """Number of holes on a part; fasteners have none."""
    if part_type == PartType.STRIP:
        return length or 0
    if part_type == PartType.CORNER_BRACKET:
        return len(_CORNER_BRACKET_HOLES)
    if part_type == PartType.ANGLE_BRACKET:
        return 2
    return 0


def _check_fixed_range(part_type: PartType, index: int) -> None:
    if part_type == PartType.STRIP:
        if index < 0:
            raise InvalidHoleError(f"strip hole index must be non-negative, got {index}")
        return
    count = hole_count(part_type)
    if not 0 <= index < count:
        raise InvalidHoleError(f"{part_type.value} has no hole {index}")


def hole_offset(part_type: PartType, index: int, spacing: float = HOLE_SPACING) -> np.ndarray:
    """Local position of hole ``index`` relative to the part origin."""
    _check_fixed_range(part_type, index)

    if part_type == PartType.STRIP:
        return np.array([index * spacing, 0.0, 0.0])
    if part_type == PartType.CORNER_BRACKET:
        u, v = _CORNER_BRACKET_HOLES[index]
        return np.array([u * spacing, v * spacing, 0.0])
    # Angle bracket
    if index == ANGLE_BRACKET_UPRIGHT_HOLE:
        return np.array([spacing / 2, 0.0, spacing / 2])
    return np.zeros(3)


def hole_orientation(part_type: PartType, index: int) -> Rotation:
    """Local orientation of hole ``index``; identity means the axis is local Z."""
    _check_fixed_range(part_type, index)

    if is_upright_hole(part_type, index):
        return _UPRIGHT
    return Rotation.identity()


def hole_axis(part_type: PartType, index: int) -> np.ndarray:
    """Local unit direction of the hole axis."""
    return hole_orientation(part_type, index).apply([0.0, 0.0, 1.0])


def is_upright_hole(part_type: PartType, index: int) -> bool:
    """True for the angle bracket hole on its bent-up flange."""
    return part_type == PartType.ANGLE_BRACKET and index == ANGLE_BRACKET_UPRIGHT_HOLE


def validate_hole(part: Part, index: int) -> None:
    """Raise InvalidHoleError unless ``part`` has a hole ``index``."""
    if not part.type.is_structural:
        raise InvalidHoleError(f"{part.type.value} parts have no holes")
    count = hole_count(part.type, part.length)
    if not 0 <= index < count:
        raise InvalidHoleError(
            f"hole {index} out of range for {part.type.value} {part.id} ({count} holes)"
        )
