"""
Unit tests for wedge_layout.model.parameters and the style map.

Tests:
- Throwing vs optional lookup
- Absent key vs NaN value
- Value wrapping and copies
"""

import math

import numpy as np
import pytest

from wedge_layout.errors import LayoutError, MissingParameterError
from wedge_layout.model.drawing import AnnotationStyle, AnnotationStyleMap
from wedge_layout.model.parameters import ParameterMap, as_quantity
from wedge_layout.model.quantity import Quantity
from wedge_layout.model.units import Unit


class TestParameterMap:
    """Tests for ParameterMap."""

    def test_set_numpy_scalar(self):
        """Test numpy scalars are stored as scalars, not vectors."""
        pmap = ParameterMap("ViewScales")
        pmap.set("Front_view", np.float64(2.0))
        pmap.set("Detail_view", np.array(4.0))
        pmap.set("Side_view", np.int64(3))

        assert pmap.get("Front_view").value(Unit.MILLIMETER) == 2.0
        assert not pmap.get("Front_view").is_vector
        assert pmap.get("Detail_view").value(Unit.MILLIMETER) == 4.0
        assert pmap.get("Side_view").value(Unit.MILLIMETER) == 3.0

    def test_set_numpy_vector(self):
        """Test numpy arrays with components are stored as vectors."""
        pmap = ParameterMap("ViewPositions", {"Front_view": np.array([60.0, 160.0])})
        q = pmap.get("Front_view")
        assert q.is_vector
        assert q.vector_values(Unit.MILLIMETER).tolist() == [60.0, 160.0]

    def test_get_present(self):
        """Test get returns the stored quantity."""
        pmap = ParameterMap("PartDimensions", {"TL": 40.0})
        assert pmap.get("TL").value(Unit.MILLIMETER) == 40.0

    def test_get_missing_raises(self):
        """Test get raises MissingParameterError naming map and key."""
        pmap = ParameterMap("PartDimensions")
        with pytest.raises(MissingParameterError) as exc_info:
            pmap.get("TD")
        assert exc_info.value.map_name == "PartDimensions"
        assert exc_info.value.key == "TD"
        assert "PartDimensions" in str(exc_info.value)
        assert "'TD'" in str(exc_info.value)

    def test_missing_error_is_key_error(self):
        """Test the error can be caught as KeyError or LayoutError."""
        pmap = ParameterMap("ViewScales")
        with pytest.raises(KeyError):
            pmap.get("Front_view")
        with pytest.raises(LayoutError):
            pmap.get("Front_view")

    def test_try_get_missing(self):
        """Test try_get returns None for an absent key."""
        assert ParameterMap("m").try_get("X") is None

    def test_absent_differs_from_nan(self):
        """Test a NaN value is still a present key."""
        pmap = ParameterMap("m", {"FX": float("nan")})
        assert pmap.contains("FX")
        assert "FX" in pmap
        assert math.isnan(pmap.get("FX").value(Unit.MILLIMETER))
        assert not pmap.contains("FR")

    def test_case_sensitive(self):
        """Test keys are case-sensitive."""
        pmap = ParameterMap("m", {"TL": 1.0})
        assert pmap.try_get("tl") is None

    def test_set_replaces(self):
        """Test set replaces an existing value."""
        pmap = ParameterMap("m", {"TL": 1.0})
        pmap.set("TL", 2.0)
        assert pmap.get("TL").value(Unit.MILLIMETER) == 2.0
        assert len(pmap) == 1

    def test_remove(self):
        """Test remove reports whether the key existed."""
        pmap = ParameterMap("m", {"TL": 1.0})
        assert pmap.remove("TL") is True
        assert pmap.remove("TL") is False

    def test_keys_keep_insertion_order(self):
        """Test keys() and iteration follow insertion order."""
        pmap = ParameterMap("m", {"B": 1.0, "A": 2.0, "C": 3.0})
        assert pmap.keys() == ["B", "A", "C"]
        assert list(pmap) == ["B", "A", "C"]

    def test_copy_is_independent(self):
        """Test changes to a copy do not reach the original."""
        original = ParameterMap("m", {"TL": 1.0})
        clone = original.copy()
        clone.set("TL", 5.0)
        clone.set("TD", 2.0)
        assert original.get("TL").value(Unit.MILLIMETER) == 1.0
        assert "TD" not in original
        assert clone.name == "m"


class TestAsQuantity:
    """Tests for as_quantity."""

    def test_number_becomes_scalar(self):
        """Test a number is wrapped as a scalar."""
        q = as_quantity(3.5)
        assert not q.is_vector
        assert q.value(Unit.MILLIMETER) == 3.5

    def test_list_becomes_vector(self):
        """Test a list is wrapped as a vector."""
        q = as_quantity([1.0, 2.0])
        assert q.is_vector
        assert q.vector_values(Unit.MILLIMETER).tolist() == [1.0, 2.0]

    def test_quantity_passed_through(self):
        """Test an existing Quantity is stored as is."""
        q = Quantity(1.0)
        assert as_quantity(q) is q


class TestAnnotationStyleMap:
    """Tests for AnnotationStyleMap."""

    def test_get_missing_raises(self):
        """Test get raises MissingParameterError."""
        with pytest.raises(MissingParameterError):
            AnnotationStyleMap().get("TL")

    def test_set_and_point(self):
        """Test stored styles expose their position as a point."""
        styles = AnnotationStyleMap()
        styles.set("TL", AnnotationStyle(position=Quantity.from_vector([72.5, 50.0])))
        assert styles.get("TL").point() == (72.5, 50.0)
        assert styles.keys() == ["TL"]
        assert styles.try_get("TD") is None

    def test_to_dict_omits_unset_flags(self):
        """Test to_dict includes only flags that were set."""
        style = AnnotationStyle(position=Quantity.from_vector([1.0, 2.0]), center_text=True)
        assert style.to_dict() == {"position": [1.0, 2.0], "center_text": True}
