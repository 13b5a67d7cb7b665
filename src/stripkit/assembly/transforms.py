"""World-frame composition helpers for part and hole placements."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.spatial.transform import Rotation

from ..errors import InvalidPartError
from ..models.geometry import Part
from .holes import HOLE_SPACING, hole_offset, hole_orientation

Z_AXIS = np.array([0.0, 0.0, 1.0])


def as_vector3(values: Sequence[float]) -> tuple[float, float, float]:
    """Convert an array-like to a plain float triple."""
    x, y, z = (float(v) for v in values)
    return (x, y, z)


def as_quat(rotation: Rotation) -> tuple[float, float, float, float]:
    """Scalar-last quaternion tuple for storage on a Part."""
    x, y, z, w = (float(v) for v in rotation.as_quat())
    return (x, y, z, w)


def normalize_quat(values: Sequence[float]) -> tuple[float, float, float, float]:
    """Normalize a user-supplied quaternion, rejecting malformed input."""
    q = np.asarray(values, dtype=float)
    if q.shape != (4,) or not np.all(np.isfinite(q)):
        raise InvalidPartError(f"rotation must be a finite quaternion (x, y, z, w), got {values!r}")
    norm = np.linalg.norm(q)
    if norm < 1e-12:
        raise InvalidPartError("rotation quaternion has zero length")
    return as_quat(Rotation.from_quat(q / norm))


def quat_from_euler(euler: Sequence[float]) -> tuple[float, float, float, float]:
    """Quaternion for intrinsic XYZ Euler angles in radians."""
    return as_quat(Rotation.from_euler("XYZ", list(euler)))


def hole_world_position(part: Part, index: int, spacing: float = HOLE_SPACING) -> np.ndarray:
    """World position of a hole centre."""
    offset = part.orientation.apply(hole_offset(part.type, index, spacing))
    return np.asarray(part.position, dtype=float) + offset


def hole_world_orientation(part: Part, index: int) -> Rotation:
    """World orientation of a hole: part rotation composed with the hole's local rotation."""
    return part.orientation * hole_orientation(part.type, index)


def hole_world_axis(part: Part, index: int) -> np.ndarray:
    """World unit vector along a hole axis."""
    return hole_world_orientation(part, index).apply(Z_AXIS)


def spin_about_local_z(rotation: Rotation, angle: float) -> Rotation:
    """Rotate a frame about its own Z axis by ``angle`` radians."""
    return rotation * Rotation.from_rotvec(angle * Z_AXIS)


def origin_for_hole(
    hole_position: np.ndarray,
    rotation: Rotation,
    local_offset: np.ndarray,
) -> np.ndarray:
    """Part origin that puts a hole with ``local_offset`` at ``hole_position``."""
    return np.asarray(hole_position, dtype=float) - rotation.apply(local_offset)
