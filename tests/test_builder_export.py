"""Integration tests for script replay, export and the CLI."""

import json
import warnings

import pytest
import yaml
from typer.testing import CliRunner

from stripkit.assembly.builder import AssemblyBuilder
from stripkit.assembly.store import RotationOutcome, SelectionOutcome
from stripkit.cli import app
from stripkit.export.exporter import Exporter, bill_of_materials
from stripkit.models.geometry import PartType
from stripkit.models.spec import AssemblyScript, EngineConfig


@pytest.fixture
def script_data():
    return {
        "commands": [
            {"op": "add", "type": "strip", "id": "s1", "length": 5},
            {"op": "add", "type": "strip", "id": "s2", "length": 3, "position": [0, 40, 0]},
            {"op": "add", "type": "strip", "id": "s3", "length": 3, "position": [0, 80, 0]},
            {"op": "select-hole", "part": "s1", "hole": 2},
            {"op": "select-hole", "part": "s2", "hole": 0},
            {"op": "select-hole", "part": "s2", "hole": 2},
            {"op": "select-hole", "part": "s3", "hole": 0},
            {"op": "rotate", "part": "s2", "degrees": 45},
            {"op": "rotate", "part": "s3", "degrees": 45},
        ],
    }


@pytest.fixture
def script(script_data):
    return AssemblyScript.model_validate(script_data)


class TestAssemblyBuilder:
    """Replaying scripts through a store."""

    def test_build(self, script):
        builder = AssemblyBuilder(script)
        state = builder.build()

        assert len(state.joints) == 2
        assert len(state.parts) == 7
        assert builder.outcomes[4] == SelectionOutcome.ASSEMBLED
        assert builder.outcomes[7] == RotationOutcome.LOCKED
        assert builder.outcomes[8] == RotationOutcome.PIVOTED
        assert state.selected_part_id == "s3"

    def test_config_override(self, script):
        builder = AssemblyBuilder(script, EngineConfig(thickness=3.0))
        state = builder.build()
        assert state.get_part("s2").position[2] == pytest.approx(3.0)

    def test_update_command(self, script_data):
        script_data["commands"].append({"op": "update", "part": "s1", "color": "#ffffff"})
        state = AssemblyBuilder(AssemblyScript.model_validate(script_data)).build()
        assert state.get_part("s1").color == "#ffffff"


class TestExporter:
    """Manifest and BOM output."""

    def test_bill_of_materials(self, script):
        state = AssemblyBuilder(script).build()
        bom = {(m.part_type, m.dimensions.get("holes")): m.count for m in bill_of_materials(state)}
        assert bom[(PartType.STRIP, 5.0)] == 1
        assert bom[(PartType.STRIP, 3.0)] == 2
        assert bom[(PartType.SCREW, None)] == 2
        assert bom[(PartType.NUT, None)] == 2

    def test_export_files(self, script, tmp_path):
        state = AssemblyBuilder(script).build()
        outputs = Exporter(tmp_path).export(state, name="chain")

        manifest = json.loads(outputs["assembly_manifest.json"].read_text())
        assert manifest["name"] == "chain"
        assert manifest["parts"]["s1"]["type"] == "strip"
        assert len(manifest["parts"]["s1"]["quaternion"]) == 4
        assert len(manifest["joints"]) == 2
        assert manifest["joints"][0]["part_a"] == "s1"

        bom = json.loads(outputs["bom.json"].read_text())
        assert sum(entry["count"] for entry in bom["parts"]) == 7

    def test_export_upright_mount_without_warnings(self, store, tmp_path):
        store.add_part("angle-bracket", part_id="ab")
        store.add_part("strip", part_id="s", length=3, position=(30.0, 0.0, 0.0))
        store.select_hole("ab", 1)
        store.select_hole("s", 0)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            outputs = Exporter(tmp_path).export(store.state, name="upright")

        manifest = json.loads(outputs["assembly_manifest.json"].read_text())
        assert manifest["parts"]["s"]["euler_degrees"][1] == pytest.approx(90)
        assert manifest["joints"][0]["gap"] == 0.0


class TestCLI:
    """Command line entry points."""

    @pytest.fixture
    def script_file(self, script_data, tmp_path):
        path = tmp_path / "chain.yaml"
        path.write_text(yaml.safe_dump(script_data))
        return path

    def test_run(self, script_file, tmp_path):
        out_dir = tmp_path / "out"
        result = CliRunner().invoke(app, ["run", str(script_file), "-o", str(out_dir)])
        assert result.exit_code == 0, result.output
        assert "Joints: 2" in result.output
        assert (out_dir / "assembly_manifest.json").exists()
        assert (out_dir / "bom.json").exists()

    def test_run_bad_hole(self, script_data, tmp_path):
        script_data["commands"].append({"op": "select-hole", "part": "s2", "hole": 7})
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.safe_dump(script_data))
        result = CliRunner().invoke(app, ["run", str(path)])
        assert result.exit_code == 1

    def test_validate(self, script_file):
        result = CliRunner().invoke(app, ["validate", str(script_file)])
        assert result.exit_code == 0
        assert "Script valid: 9 commands" in result.output

    def test_validate_missing_file(self, tmp_path):
        result = CliRunner().invoke(app, ["validate", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1

    def test_holes(self):
        result = CliRunner().invoke(app, ["holes", "angle-bracket"])
        assert result.exit_code == 0
        assert "angle-bracket: 2 holes" in result.output

    def test_holes_for_fastener(self):
        result = CliRunner().invoke(app, ["holes", "nut"])
        assert result.exit_code == 0
        assert "has no holes" in result.output
