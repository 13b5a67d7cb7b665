"""Assembly builder - replays a command script through an assembly store."""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..models.geometry import AssemblyState
from ..models.spec import (
    AddCommand,
    AssemblyScript,
    ClearCommand,
    Command,
    EngineConfig,
    RemoveCommand,
    ResetSelectionCommand,
    RotateCommand,
    SelectHoleCommand,
    SelectPartCommand,
    UpdateCommand,
)
from .store import AssemblyStore

logger = logging.getLogger(__name__)


class AssemblyBuilder:
    """Builds an assembly by applying each scripted command in order."""

    def __init__(self, script: AssemblyScript, config: Optional[EngineConfig] = None):
        self.script = script
        self.store = AssemblyStore(config or script.config)
        self.outcomes: list[Any] = []

    def build(self) -> AssemblyState:
        """Apply every command.

        Returns:
            The final assembly state
        """
        for index, command in enumerate(self.script.commands):
            logger.debug("Command %d: %s", index, command.op)
            self.outcomes.append(self.apply(command))
        return self.store.state

    def apply(self, command: Command) -> Any:
        """Dispatch a single command to the store and return its result."""
        store = self.store

        if isinstance(command, AddCommand):
            return store.add_part(
                command.type,
                part_id=command.id,
                length=command.length,
                position=command.position,
                euler=command.euler,
                color=command.color,
            )
        if isinstance(command, UpdateCommand):
            return store.update_part(
                command.part,
                **command.model_dump(exclude={"op", "part"}, exclude_none=True),
            )
        if isinstance(command, RemoveCommand):
            return store.remove_part(command.part)
        if isinstance(command, RotateCommand):
            return store.rotate_part(command.part, command.angle)
        if isinstance(command, SelectPartCommand):
            return store.select_part(command.part)
        if isinstance(command, SelectHoleCommand):
            return store.select_hole(command.part, command.hole)
        if isinstance(command, ResetSelectionCommand):
            return store.reset_selection()
        if isinstance(command, ClearCommand):
            return store.clear_all()
        raise TypeError(f"Unsupported command: {command!r}")
