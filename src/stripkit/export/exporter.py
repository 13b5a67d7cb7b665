"""Export of assembly snapshots to JSON."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

from ..models.geometry import AssemblyState, PartMetadata, PartType

logger = logging.getLogger(__name__)


def bill_of_materials(state: AssemblyState) -> list[PartMetadata]:
    """Group parts by type, and by hole count for strips."""
    groups: dict[tuple[PartType, int], PartMetadata] = {}
    for part in state.parts:
        key = (part.type, part.length or 0)
        meta = groups.get(key)
        if meta is None:
            if part.type == PartType.STRIP:
                name = f"Strip, {part.length} holes"
                dimensions = {"holes": float(part.length)}
            else:
                name = part.type.value.replace("-", " ").capitalize()
                dimensions = {}
            groups[key] = PartMetadata(part_type=part.type, name=name, count=1, dimensions=dimensions)
        else:
            meta.count += 1

    order = list(PartType)
    return sorted(groups.values(), key=lambda m: (order.index(m.part_type), m.dimensions.get("holes", 0)))


class Exporter:
    """Writes the assembly manifest and bill of materials for a snapshot."""

    def __init__(self, output_dir: Path):
        """Initialize exporter.

        Args:
            output_dir: Directory to write output files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export(self, state: AssemblyState, name: str = "assembly") -> dict[str, Path]:
        """Export manifest and BOM.

        Returns:
            Dict mapping output type to file paths
        """
        outputs = {
            "assembly_manifest.json": self._export_manifest(state, name),
            "bom.json": self._export_bom(state),
        }
        logger.info("Exported %d parts to %s", len(state.parts), self.output_dir)
        return outputs

    def _export_bom(self, state: AssemblyState) -> Path:
        """Export bill of materials to JSON."""
        path = self.output_dir / "bom.json"

        bom_data = {
            "parts": [
                {
                    "type": meta.part_type.value,
                    "name": meta.name,
                    "count": meta.count,
                    "dimensions": meta.dimensions,
                }
                for meta in bill_of_materials(state)
            ]
        }

        with open(path, "w") as f:
            json.dump(bom_data, f, indent=2)

        return path

    def _export_manifest(self, state: AssemblyState, name: str) -> Path:
        """Export assembly manifest with coordinate frame, placements and joints."""
        path = self.output_dir / "assembly_manifest.json"

        manifest: dict[str, Any] = {
            "name": name,
            "version": state.version,
            "coordinate_frame": {
                "origin": [0, 0, 0],
                "x_axis": [1, 0, 0],
                "y_axis": [0, 1, 0],
                "z_axis": [0, 0, 1],
                "units": "mm",
                "euler_order": "XYZ",
            },
            "parts": {},
            "joints": [],
        }

        for part in state.parts:
            manifest["parts"][part.id] = {
                "type": part.type.value,
                "length": part.length,
                "position": list(part.position),
                "quaternion": list(part.rotation),
                "euler_degrees": [math.degrees(a) for a in part.euler],
                "color": part.color,
            }

        for joint in state.joints:
            manifest["joints"].append({
                "id": joint.id,
                "part_a": joint.part_a,
                "hole_a": joint.hole_a,
                "part_b": joint.part_b,
                "hole_b": joint.hole_b,
                "gap": joint.gap,
                "fasteners": list(joint.fasteners),
            })

        with open(path, "w") as f:
            json.dump(manifest, f, indent=2)

        return path
