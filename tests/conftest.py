"""Shared fixtures and geometry checks for assembly tests."""

import numpy as np
import pytest
from scipy.spatial.transform import Rotation

from stripkit.assembly.store import AssemblyStore
from stripkit.assembly.transforms import hole_world_axis, hole_world_position
from stripkit.models.spec import EngineConfig


@pytest.fixture
def config():
    return EngineConfig()


@pytest.fixture
def store(config):
    return AssemblyStore(config)


def rotation_distance(q1, q2) -> float:
    """Angle (radians) between two quaternion orientations."""
    return (Rotation.from_quat(q1) * Rotation.from_quat(q2).inv()).magnitude()


def joint_gap(store, joint):
    """Return (along-axis distance, perpendicular error, axis alignment) for a joint."""
    part_a = store.get_part(joint.part_a)
    part_b = store.get_part(joint.part_b)
    pos_a = hole_world_position(part_a, joint.hole_a)
    pos_b = hole_world_position(part_b, joint.hole_b)
    axis_a = hole_world_axis(part_a, joint.hole_a)
    axis_b = hole_world_axis(part_b, joint.hole_b)

    delta = pos_b - pos_a
    along = float(np.dot(delta, axis_a))
    perpendicular = float(np.linalg.norm(delta - along * axis_a))
    return along, perpendicular, float(np.dot(axis_a, axis_b))
