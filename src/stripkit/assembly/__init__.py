"""Hole geometry, placement solves and the assembly store."""

from .builder import AssemblyBuilder
from .solver import AssemblySolver
from .store import AssemblyStore, RotationOutcome, SelectionOutcome

__all__ = [
    "AssemblyBuilder",
    "AssemblySolver",
    "AssemblyStore",
    "RotationOutcome",
    "SelectionOutcome",
]
