"""Snap-together assembly engine for perforated strips and brackets."""

from .assembly import AssemblyStore, RotationOutcome, SelectionOutcome
from .errors import InvalidHoleError, InvalidPartError, JointError, StripkitError
from .models import EngineConfig, Joint, Part, PartType

__version__ = "0.1.0"

__all__ = [
    "AssemblyStore",
    "RotationOutcome",
    "SelectionOutcome",
    "EngineConfig",
    "Joint",
    "Part",
    "PartType",
    "StripkitError",
    "InvalidHoleError",
    "InvalidPartError",
    "JointError",
]
