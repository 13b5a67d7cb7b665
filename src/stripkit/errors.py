"""Exceptions raised for caller bugs.

Commands that merely reference a missing part are silent no-ops; these errors
are reserved for inputs that can never be valid, such as an out-of-range hole
index or a strip with too few holes.
"""


class StripkitError(ValueError):
    """Base class for engine errors."""


class InvalidHoleError(StripkitError):
    """Hole index outside the valid range for the part type."""


class InvalidPartError(StripkitError):
    """Malformed part properties."""


class JointError(StripkitError):
    """Joint that cannot exist, e.g. a part joined to itself."""
