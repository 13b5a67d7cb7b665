"""CLI entry point for the strip assembly engine."""

import logging
import math
from pathlib import Path
from typing import Optional

import typer
import yaml

from .errors import StripkitError
from .models.geometry import PartType

app = typer.Typer(
    name="stripkit",
    help="Snap-together assembly of perforated strips and brackets",
)


def _load_yaml(path: Path) -> dict:
    if not path.exists():
        typer.echo(f"Error: File not found: {path}", err=True)
        raise typer.Exit(1)
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _fmt(values) -> str:
    return "(" + ", ".join(f"{v:8.3f}" for v in values) + ")"


@app.command()
def run(
    script_file: Path = typer.Argument(..., help="Path to YAML command script"),
    config_file: Optional[Path] = typer.Option(
        None, "-c", "--config", help="YAML engine configuration (overrides the script's)"
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Directory for manifest and BOM"
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log every command"),
) -> None:
    """Replay a command script and print the resulting assembly."""
    from .assembly.builder import AssemblyBuilder
    from .export.exporter import Exporter
    from .models.spec import AssemblyScript, EngineConfig

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    typer.echo(f"Loading script from {script_file}...")
    script = AssemblyScript.model_validate(_load_yaml(script_file))
    config = None
    if config_file is not None:
        config = EngineConfig.model_validate(_load_yaml(config_file))

    builder = AssemblyBuilder(script, config)
    try:
        state = builder.build()
    except StripkitError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Parts: {len(state.parts)}")
    for part in state.parts:
        label = part.type.value
        if part.length:
            label += f"[{part.length}]"
        euler = [math.degrees(a) for a in part.euler]
        typer.echo(f"  {part.id:<38} {label:<16} pos {_fmt(part.position)}  rot {_fmt(euler)}")

    typer.echo(f"Joints: {len(state.joints)}")
    for joint in state.joints:
        typer.echo(f"  {joint.part_a}#{joint.hole_a} <-> {joint.part_b}#{joint.hole_b}")

    if state.selected_part_id:
        typer.echo(f"Selected part: {state.selected_part_id}")

    if output_dir is not None:
        exporter = Exporter(output_dir)
        exporter.export(state, name=script_file.stem)
        typer.echo(f"Assembly exported to {output_dir}")


@app.command()
def validate(
    script_file: Path = typer.Argument(..., help="Path to YAML command script"),
) -> None:
    """Validate a command script without running it."""
    from .models.spec import AssemblyScript

    typer.echo(f"Validating script from {script_file}...")
    data = _load_yaml(script_file)

    try:
        script = AssemblyScript.model_validate(data)
    except ValueError as e:
        typer.echo(f"Validation error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Script valid: {len(script.commands)} commands")
    adds = sum(1 for c in script.commands if c.op == "add")
    typer.echo(f"  Parts added: {adds}")
    typer.echo(f"  Hole spacing: {script.config.hole_spacing}")
    typer.echo(f"  Thickness: {script.config.thickness}")


@app.command()
def holes(
    part_type: PartType = typer.Argument(..., help="Part type"),
    length: int = typer.Option(5, "-n", "--length", help="Hole count (strips only)"),
) -> None:
    """List hole offsets and axes for a part type."""
    from .assembly.holes import hole_axis, hole_count, hole_offset

    count = hole_count(part_type, length)
    if count == 0:
        typer.echo(f"{part_type.value} has no holes")
        return

    typer.echo(f"{part_type.value}: {count} holes\n")
    for index in range(count):
        offset = hole_offset(part_type, index)
        axis = hole_axis(part_type, index)
        typer.echo(f"  {index:>2}  offset {_fmt(offset)}  axis {_fmt(axis)}")


if __name__ == "__main__":
    app()
