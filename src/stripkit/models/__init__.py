"""Data models for the hole-pairing assembly engine."""

from .geometry import AssemblyState, HoleRef, Joint, Part, PartMetadata, PartType
from .spec import AssemblyScript, EngineConfig

__all__ = [
    "AssemblyState",
    "HoleRef",
    "Joint",
    "Part",
    "PartMetadata",
    "PartType",
    "AssemblyScript",
    "EngineConfig",
]
