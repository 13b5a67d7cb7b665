"""Authoritative assembly state and the commands that change it."""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Union

from ..errors import InvalidPartError, StripkitError
from ..models.geometry import (
    IDENTITY_QUAT,
    AssemblyState,
    HoleRef,
    Joint,
    Part,
    PartType,
)
from ..models.spec import EngineConfig
from .holes import validate_hole
from .solver import AssemblySolver, SnapResult
from .transforms import as_quat, as_vector3, normalize_quat, quat_from_euler, spin_about_local_z

logger = logging.getLogger(__name__)

Subscriber = Callable[[AssemblyState], None]

_UPDATABLE = frozenset({"position", "rotation", "euler", "length", "color"})


class SelectionOutcome(Enum):
    """What a hole click did."""

    SELECTED = "selected"
    DESELECTED = "deselected"
    REPLACED = "replaced"
    ASSEMBLED = "assembled"
    IGNORED = "ignored"


class RotationOutcome(Enum):
    """How a rotate command was resolved."""

    FREE = "free"
    PIVOTED = "pivoted"
    LOCKED = "locked"
    IGNORED = "ignored"


def _new_id() -> str:
    return str(uuid.uuid4())


class AssemblyStore:
    """Owns the parts, joints and selection of one assembly.

    Every command reads the current snapshot, computes a new one and publishes
    it in a single step, after which subscribers are notified. Commands that
    reference a part that does not exist return without changing anything.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self.solver = AssemblySolver(self.config)
        self._state = AssemblyState()
        self._subscribers: list[Subscriber] = []
        self._disposed = False

    # Queries

    @property
    def state(self) -> AssemblyState:
        return self._state

    @property
    def parts(self) -> tuple[Part, ...]:
        return self._state.parts

    @property
    def joints(self) -> tuple[Joint, ...]:
        return self._state.joints

    @property
    def selected_part_id(self) -> Optional[str]:
        return self._state.selected_part_id

    @property
    def selected_hole(self) -> Optional[HoleRef]:
        return self._state.selected_hole

    @property
    def version(self) -> int:
        return self._state.version

    def get_part(self, part_id: Optional[str]) -> Optional[Part]:
        return self._state.get_part(part_id)

    def joints_of(self, part_id: str) -> list[Joint]:
        return self._state.joints_of(part_id)

    # Lifecycle

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for every published state; returns an unsubscribe function."""
        self._check_alive()
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def dispose(self) -> None:
        """Drop all state and subscribers. Further commands raise StripkitError."""
        self._subscribers.clear()
        self._state = AssemblyState()
        self._disposed = True

    def _check_alive(self) -> None:
        if self._disposed:
            raise StripkitError("assembly store has been disposed")

    def _publish(self, state: AssemblyState) -> None:
        self._state = replace(state, version=self._state.version + 1)
        for callback in list(self._subscribers):
            callback(self._state)

    # Commands

    def add_part(
        self,
        part_type: Union[PartType, str],
        *,
        part_id: Optional[str] = None,
        length: Optional[int] = None,
        position: Optional[Sequence[float]] = None,
        rotation: Optional[Sequence[float]] = None,
        euler: Optional[Sequence[float]] = None,
        color: Optional[str] = None,
    ) -> Part:
        """Add a part and return it.

        Args:
            part_type: Part type or its hyphenated name
            part_id: Explicit id; a uuid4 string is generated when omitted
            length: Hole count, strips only (defaults to ``default_strip_holes``)
            position: World position of the part origin
            rotation: Quaternion (x, y, z, w); exclusive with ``euler``
            euler: Intrinsic XYZ Euler angles in radians
            color: Cosmetic color; defaults per part type

        Raises:
            InvalidPartError: malformed properties or duplicate id
        """
        self._check_alive()
        try:
            part_type = PartType(part_type)
        except ValueError:
            raise InvalidPartError(f"unknown part type: {part_type!r}") from None

        if part_id is not None and self.get_part(part_id) is not None:
            raise InvalidPartError(f"part id already exists: {part_id}")

        if part_type == PartType.STRIP and length is None:
            length = self.config.default_strip_holes

        part = Part(
            id=part_id or _new_id(),
            type=part_type,
            position=as_vector3(position) if position is not None else (0.0, 0.0, 0.0),
            rotation=self._resolve_rotation(rotation, euler) or IDENTITY_QUAT,
            length=self._check_length(part_type, length),
            color=color or self.config.color_for(part_type),
        )
        self._publish(replace(self._state, parts=self._state.parts + (part,)))
        logger.debug("Added %s %s", part.type.value, part.id)
        return part

    def update_part(self, part_id: str, **changes: Any) -> bool:
        """Overwrite position, rotation, euler, length or color of a part.

        Placement changes are taken as given; joints are not re-solved.
        """
        self._check_alive()
        part = self.get_part(part_id)
        if part is None:
            logger.debug("update_part: unknown part %s", part_id)
            return False

        unknown = set(changes) - _UPDATABLE
        if unknown:
            raise InvalidPartError(f"cannot update {', '.join(sorted(unknown))} on a part")

        fields: dict[str, Any] = {}
        if changes.get("position") is not None:
            fields["position"] = as_vector3(changes["position"])
        new_rotation = self._resolve_rotation(changes.get("rotation"), changes.get("euler"))
        if new_rotation is not None:
            fields["rotation"] = new_rotation
        if changes.get("color") is not None:
            fields["color"] = changes["color"]

        selected_hole = self._state.selected_hole
        if changes.get("length") is not None:
            length = self._check_length(part.type, changes["length"])
            for joint in self.joints_of(part_id):
                if joint.hole_of(part_id) >= length:
                    raise InvalidPartError(
                        f"joint {joint.id} uses hole {joint.hole_of(part_id)} beyond new length {length}"
                    )
            fields["length"] = length
            if selected_hole and selected_hole.part_id == part_id and selected_hole.hole_index >= length:
                selected_hole = None

        if not fields:
            return False

        parts = tuple(replace(p, **fields) if p.id == part_id else p for p in self._state.parts)
        self._publish(replace(self._state, parts=parts, selected_hole=selected_hole))
        return True

    def remove_part(self, part_id: str) -> bool:
        """Delete a part and every joint touching it.

        The screw and nut of a destroyed joint stay in place unless the
        ``remove_orphan_fasteners`` option is set.
        """
        self._check_alive()
        if self.get_part(part_id) is None:
            logger.debug("remove_part: unknown part %s", part_id)
            return False

        removed_joints = self.joints_of(part_id)
        doomed = {part_id}
        if self.config.remove_orphan_fasteners:
            for joint in removed_joints:
                doomed.update(joint.fasteners)

        state = self._state
        selected_hole = state.selected_hole
        if selected_hole is not None and selected_hole.part_id in doomed:
            selected_hole = None
        selected_part_id = state.selected_part_id
        if selected_part_id in doomed:
            selected_part_id = None

        self._publish(
            replace(
                state,
                parts=tuple(p for p in state.parts if p.id not in doomed),
                joints=tuple(j for j in state.joints if not j.involves(part_id)),
                selected_part_id=selected_part_id,
                selected_hole=selected_hole,
            )
        )
        logger.info(
            "Removed part %s (%d joints, %d parts)",
            part_id,
            len(removed_joints),
            len(doomed),
        )
        return True

    def rotate_part(self, part_id: str, angle_delta: float) -> RotationOutcome:
        """Rotate a part about its local Z axis by ``angle_delta`` radians.

        A part with one joint pivots about the other part's joined hole; a part
        with two or more joints is locked.
        """
        self._check_alive()
        part = self.get_part(part_id)
        if part is None:
            logger.debug("rotate_part: unknown part %s", part_id)
            return RotationOutcome.IGNORED

        joints = self.joints_of(part_id)
        if len(joints) >= 2:
            logger.debug("rotate_part: %s is locked by %d joints", part_id, len(joints))
            return RotationOutcome.LOCKED

        rotation = spin_about_local_z(part.orientation, angle_delta)
        if joints:
            joint = joints[0]
            pivot_id, pivot_hole = joint.other(part_id)
            pivot = self.get_part(pivot_id)
            placement = self.solver.pivot(
                part, joint.hole_of(part_id), pivot, pivot_hole, rotation, joint.gap
            )
            updated = replace(part, position=placement.position, rotation=placement.rotation)
            outcome = RotationOutcome.PIVOTED
        else:
            updated = replace(part, rotation=as_quat(rotation))
            outcome = RotationOutcome.FREE

        self._replace_part(updated)
        logger.debug("Rotated %s by %.4f rad (%s)", part_id, angle_delta, outcome.value)
        return outcome

    def select_part(self, part_id: Optional[str]) -> bool:
        """Select a part, or clear the part selection with None."""
        self._check_alive()
        if part_id is not None and self.get_part(part_id) is None:
            logger.debug("select_part: unknown part %s", part_id)
            return False
        self._publish(replace(self._state, selected_part_id=part_id))
        return True

    def select_hole(self, part_id: str, hole_index: int) -> SelectionOutcome:
        """Handle a click on a hole.

        With no pending hole the clicked hole becomes pending. Clicking the
        pending hole again deselects it. Clicking a hole on another part snaps
        the two together; clicking another hole on the same part replaces the
        pending hole.

        Raises:
            InvalidHoleError: the part has no such hole
        """
        self._check_alive()
        part = self.get_part(part_id)
        if part is None:
            logger.debug("select_hole: unknown part %s", part_id)
            return SelectionOutcome.IGNORED
        validate_hole(part, hole_index)

        clicked = HoleRef(part_id, hole_index)
        pending = self._state.selected_hole

        if pending == clicked:
            self._publish(replace(self._state, selected_hole=None))
            return SelectionOutcome.DESELECTED

        if pending is not None and pending.part_id != part_id:
            self._assemble(pending, clicked)
            return SelectionOutcome.ASSEMBLED

        self._publish(replace(self._state, selected_hole=clicked))
        logger.debug("Selected hole %d on part %s", hole_index, part_id)
        return SelectionOutcome.SELECTED if pending is None else SelectionOutcome.REPLACED

    def reset_selection(self) -> None:
        self._check_alive()
        self._publish(replace(self._state, selected_part_id=None, selected_hole=None))

    def clear_all(self) -> None:
        """Remove every part and joint and clear the selection."""
        self._check_alive()
        self._publish(AssemblyState())
        logger.info("Cleared assembly")

    # Internals

    def _assemble(self, pending: HoleRef, clicked: HoleRef) -> None:
        part_a = self.get_part(pending.part_id)
        part_b = self.get_part(clicked.part_id)

        logger.info(
            "Assembling %s hole %d to %s hole %d",
            part_a.id,
            pending.hole_index,
            part_b.id,
            clicked.hole_index,
        )
        result = self.solver.snap(
            part_a,
            pending.hole_index,
            part_b,
            clicked.hole_index,
            self._state.is_anchored(part_a.id),
            self._state.is_anchored(part_b.id),
        )

        screw, nut = self._fasteners(result)
        joint = Joint(
            id=_new_id(),
            part_a=part_a.id,
            hole_a=pending.hole_index,
            part_b=part_b.id,
            hole_b=clicked.hole_index,
            gap=result.gap,
            fasteners=(screw.id, nut.id),
        )

        parts = tuple(
            replace(p, position=result.mover.position, rotation=result.mover.rotation)
            if p.id == result.mover_id
            else p
            for p in self._state.parts
        )
        self._publish(
            replace(
                self._state,
                parts=parts + (screw, nut),
                joints=self._state.joints + (joint,),
                selected_hole=None,
                selected_part_id=part_b.id,
            )
        )
        logger.debug("Moved %s onto %s (gap %.3f)", result.mover_id, result.stationary_id, result.gap)

    def _fasteners(self, result: SnapResult) -> tuple[Part, Part]:
        screw = Part(
            id=_new_id(),
            type=PartType.SCREW,
            position=result.screw.position,
            rotation=result.screw.rotation,
            color=self.config.color_for(PartType.SCREW),
        )
        nut = Part(
            id=_new_id(),
            type=PartType.NUT,
            position=result.nut.position,
            rotation=result.nut.rotation,
            color=self.config.color_for(PartType.NUT),
        )
        return screw, nut

    def _replace_part(self, updated: Part) -> None:
        parts = tuple(updated if p.id == updated.id else p for p in self._state.parts)
        self._publish(replace(self._state, parts=parts))

    def _check_length(self, part_type: PartType, length: Optional[int]) -> Optional[int]:
        if part_type != PartType.STRIP:
            if length is not None:
                raise InvalidPartError(f"{part_type.value} parts do not take a length")
            return None
        low, high = self.config.min_strip_holes, self.config.max_strip_holes
        if isinstance(length, bool) or not isinstance(length, int) or not low <= length <= high:
            raise InvalidPartError(f"strip length must be an integer in [{low}, {high}], got {length!r}")
        return length

    @staticmethod
    def _resolve_rotation(
        rotation: Optional[Sequence[float]],
        euler: Optional[Sequence[float]],
    ) -> Optional[tuple[float, float, float, float]]:
        if rotation is not None and euler is not None:
            raise InvalidPartError("give either rotation or euler, not both")
        if rotation is not None:
            return normalize_quat(rotation)
        if euler is not None:
            return quat_from_euler(euler)
        return None

