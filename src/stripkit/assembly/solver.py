"""Placement solves for snapping parts together and for pivoting jointed parts."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.spatial.transform import Rotation

from ..models.geometry import Part, PartType
from ..models.spec import EngineConfig
from .holes import hole_offset, hole_orientation, is_upright_hole
from .transforms import (
    Z_AXIS,
    as_quat,
    as_vector3,
    hole_world_axis,
    hole_world_orientation,
    hole_world_position,
    origin_for_hole,
)


@dataclass(frozen=True)
class Placement:
    """Position and quaternion for one part."""

    position: tuple[float, float, float]
    rotation: tuple[float, float, float, float]


@dataclass(frozen=True)
class SnapResult:
    """Outcome of snapping one part onto another."""

    mover_id: str
    stationary_id: str
    mover: Placement
    screw: Placement
    nut: Placement
    gap: float


def stacking_offset(stationary: Part, hole_index: int, thickness: float) -> float:
    """Gap between joined holes along the stationary hole axis.

    The angle bracket's upright hole sits on an exposed face, so parts are
    mounted flush against it; every other hole stacks one thickness away.
    """
    if is_upright_hole(stationary.type, hole_index):
        return 0.0
    return thickness


def choose_mover(
    part_a: Part,
    part_b: Part,
    anchored_a: bool,
    anchored_b: bool,
    policy: str = "prefer-strip",
) -> Part:
    """Pick which of the pending part (A) and the clicked part (B) moves.

    An unanchored part always moves onto an anchored one. Otherwise B moves,
    except that under the ``prefer-strip`` policy a strip A moves onto a
    non-strip B so brackets stay put as assembly bases.
    """
    if not anchored_a and anchored_b:
        return part_a
    if anchored_a == anchored_b and policy == "prefer-strip":
        if part_a.type == PartType.STRIP and part_b.type != PartType.STRIP:
            return part_a
    return part_b


class AssemblySolver:
    """Computes placements that keep joined holes coincident."""

    def __init__(self, config: EngineConfig):
        self.config = config

    def snap(
        self,
        part_a: Part,
        hole_a: int,
        part_b: Part,
        hole_b: int,
        anchored_a: bool,
        anchored_b: bool,
    ) -> SnapResult:
        """Solve the placement that joins ``hole_a`` on A with ``hole_b`` on B.

        Returns:
            New placement of the mover plus screw and nut placements
        """
        mover = choose_mover(part_a, part_b, anchored_a, anchored_b, self.config.mover_policy)
        if mover.id == part_a.id:
            stationary, stationary_hole, mover_hole = part_b, hole_b, hole_a
        else:
            stationary, stationary_hole, mover_hole = part_a, hole_a, hole_b

        spacing = self.config.hole_spacing
        thickness = self.config.thickness

        target = hole_world_orientation(stationary, stationary_hole)
        normal = target.apply(Z_AXIS)
        interface = hole_world_position(stationary, stationary_hole, spacing)
        gap = stacking_offset(stationary, stationary_hole, thickness)

        # mover_rotation * local_hole_rotation == target
        mover_rotation = target * hole_orientation(mover.type, mover_hole).inv()
        mover_position = origin_for_hole(
            interface + normal * gap,
            mover_rotation,
            hole_offset(mover.type, mover_hole, spacing),
        )

        fastener_rotation = as_quat(target)
        return SnapResult(
            mover_id=mover.id,
            stationary_id=stationary.id,
            mover=Placement(as_vector3(mover_position), as_quat(mover_rotation)),
            screw=Placement(as_vector3(interface - normal * thickness), fastener_rotation),
            nut=Placement(as_vector3(interface + normal * thickness), fastener_rotation),
            gap=gap,
        )

    def pivot(
        self,
        part: Part,
        own_hole: int,
        pivot: Part,
        pivot_hole: int,
        rotation: Rotation,
        gap: float,
    ) -> Placement:
        """Re-solve the origin of ``part`` under a new rotation about a joined hole.

        The pivot part stays fixed. ``gap`` is the stacking distance recorded
        on the joint when it was made; it is applied on the side of the pivot
        hole the rotating part currently sits on.
        """
        spacing = self.config.hole_spacing
        anchor = hole_world_position(pivot, pivot_hole, spacing)
        axis = hole_world_axis(pivot, pivot_hole)
        current = hole_world_position(part, own_hole, spacing)
        if np.dot(current - anchor, axis) < -1e-9:
            gap = -gap

        position = origin_for_hole(
            anchor + axis * gap,
            rotation,
            hole_offset(part.type, own_hole, spacing),
        )
        return Placement(as_vector3(position), as_quat(rotation))
