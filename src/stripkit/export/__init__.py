"""Export of assembly snapshots."""

from .exporter import Exporter, bill_of_materials

__all__ = ["Exporter", "bill_of_materials"]
