"""Tests for per-type hole geometry."""

import numpy as np
import pytest

from stripkit.assembly.holes import (
    HOLE_SPACING,
    hole_axis,
    hole_count,
    hole_offset,
    hole_orientation,
    is_upright_hole,
    validate_hole,
)
from stripkit.errors import InvalidHoleError
from stripkit.models.geometry import Part, PartType


class TestStripHoles:
    """Strip holes run along local X."""

    def test_offsets_follow_pitch(self):
        for index in range(5):
            np.testing.assert_allclose(
                hole_offset(PartType.STRIP, index), [index * HOLE_SPACING, 0, 0]
            )

    def test_axis_is_local_z(self):
        np.testing.assert_allclose(hole_axis(PartType.STRIP, 3), [0, 0, 1], atol=1e-12)

    def test_custom_spacing(self):
        np.testing.assert_allclose(hole_offset(PartType.STRIP, 2, spacing=10.0), [20, 0, 0])

    def test_count_is_length(self):
        assert hole_count(PartType.STRIP, 7) == 7

    def test_negative_index(self):
        with pytest.raises(InvalidHoleError):
            hole_offset(PartType.STRIP, -1)


class TestCornerBracketHoles:
    """Corner bracket has three coplanar holes."""

    def test_offsets(self):
        np.testing.assert_allclose(hole_offset(PartType.CORNER_BRACKET, 0), [0, 0, 0])
        np.testing.assert_allclose(hole_offset(PartType.CORNER_BRACKET, 1), [HOLE_SPACING, 0, 0])
        np.testing.assert_allclose(hole_offset(PartType.CORNER_BRACKET, 2), [0, HOLE_SPACING, 0])

    def test_all_axes_are_local_z(self):
        for index in range(3):
            np.testing.assert_allclose(hole_axis(PartType.CORNER_BRACKET, index), [0, 0, 1], atol=1e-12)

    def test_out_of_range(self):
        with pytest.raises(InvalidHoleError):
            hole_offset(PartType.CORNER_BRACKET, 3)


class TestAngleBracketHoles:
    """Angle bracket has a base hole and an upright hole."""

    def test_base_hole(self):
        np.testing.assert_allclose(hole_offset(PartType.ANGLE_BRACKET, 0), [0, 0, 0])
        assert hole_orientation(PartType.ANGLE_BRACKET, 0).magnitude() == pytest.approx(0)

    def test_upright_hole_position(self):
        np.testing.assert_allclose(
            hole_offset(PartType.ANGLE_BRACKET, 1),
            [HOLE_SPACING / 2, 0, HOLE_SPACING / 2],
        )

    def test_upright_hole_axis_points_along_x(self):
        np.testing.assert_allclose(hole_axis(PartType.ANGLE_BRACKET, 1), [1, 0, 0], atol=1e-12)

    def test_upright_flag(self):
        assert is_upright_hole(PartType.ANGLE_BRACKET, 1)
        assert not is_upright_hole(PartType.ANGLE_BRACKET, 0)
        assert not is_upright_hole(PartType.STRIP, 1)

    def test_count(self):
        assert hole_count(PartType.ANGLE_BRACKET) == 2


class TestValidateHole:
    """Hole validation against a concrete part."""

    def test_strip_upper_bound(self):
        part = Part(id="s", type=PartType.STRIP, length=3)
        validate_hole(part, 2)
        with pytest.raises(InvalidHoleError, match="out of range"):
            validate_hole(part, 3)

    @pytest.mark.parametrize("part_type", [PartType.SCREW, PartType.NUT])
    def test_fasteners_have_no_holes(self, part_type):
        assert hole_count(part_type) == 0
        with pytest.raises(InvalidHoleError, match="no holes"):
            validate_hole(Part(id="f", type=part_type), 0)

    def test_invalid_hole_is_value_error(self):
        with pytest.raises(ValueError):
            validate_hole(Part(id="c", type=PartType.CORNER_BRACKET), 5)
