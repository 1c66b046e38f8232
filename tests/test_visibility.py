"""
Unit tests for wedge_layout.layout.visibility.

Tests:
- "Zero or NaN" unspecified sentinel
- Symmetry tolerance frame text
"""

import math

import pytest

from wedge_layout.config import SYMMETRY_TOLERANCE_KEY
from wedge_layout.layout.visibility import (
    GtolFrame,
    geometric_tolerance_frame,
    hidden_annotations,
    is_unspecified,
    symmetry_annotations_visible,
)
from wedge_layout.model.quantity import Quantity


class TestIsUnspecified:
    """Tests for is_unspecified."""

    @pytest.mark.parametrize("value", [None, 0.0, 0, math.nan])
    def test_unspecified(self, value):
        """Test None, zero and NaN are unspecified."""
        assert is_unspecified(value)

    def test_specified(self):
        """Test a regular value is specified."""
        assert not is_unspecified(0.04)


class TestSymmetryVisibility:
    """Tests for symmetry annotation visibility."""

    def test_visible_with_tolerance(self, part):
        """Test the reference part shows the datum and tolerance frame."""
        assert symmetry_annotations_visible(part)
        assert hidden_annotations(part) == set()

    def test_unparsable_tolerance_hidden(self, part):
        """Test an unparsable tolerance reads as NaN and hides the frame."""
        part.dimensions.set(SYMMETRY_TOLERANCE_KEY, Quantity.from_text("see note"))
        assert math.isnan(part.dimensions.get(SYMMETRY_TOLERANCE_KEY).value())
        assert not symmetry_annotations_visible(part)
        assert geometric_tolerance_frame(part) is None

    def test_zero_and_nan_treated_alike(self, part_factory):
        """Test zero and NaN tolerances give the same result."""
        zero = part_factory({SYMMETRY_TOLERANCE_KEY: 0.0})
        nan = part_factory({SYMMETRY_TOLERANCE_KEY: Quantity.from_text("abc")})
        assert hidden_annotations(zero) == hidden_annotations(nan) == {"DatumFeature", "GeometricTolerance"}

    def test_absent_tolerance_hidden(self, part_factory):
        """Test a part without SymmetryTolerance hides the frame."""
        assert not symmetry_annotations_visible(part_factory({"TL": 1.0}))


class TestGeometricToleranceFrame:
    """Tests for geometric_tolerance_frame."""

    def test_default_tolerance(self, part):
        """Test the 0.04 mm default frame text."""
        assert geometric_tolerance_frame(part) == GtolFrame("0.0400", "[0.04]", "A")

    def test_rounding(self, part_factory):
        """Test four-decimal primary and trimmed secondary text."""
        frame = geometric_tolerance_frame(part_factory({SYMMETRY_TOLERANCE_KEY: 0.02543}), label="B")
        assert frame.inch_text == "0.0254"
        assert frame.mm_text == "[0.025]"
        assert frame.label == "B"
