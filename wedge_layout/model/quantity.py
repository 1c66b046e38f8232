"""
Quantity: a dimension value with optional tolerances, stored in native units.

A Quantity is either a scalar (value + upper/lower tolerance) or a vector
(e.g. an annotation position). Absent or unparsable fields are NaN, which
downstream code reads as "unspecified".
"""

import math
from typing import Any, Iterable, Optional

import numpy as np

from wedge_layout.model.units import Unit, from_native


def _parse_number(raw: Any) -> float:
    """Parse a number or numeric text; anything else is NaN."""
    if raw is None or isinstance(raw, bool):
        return math.nan
    if isinstance(raw, (int, float, np.floating, np.integer)):
        return float(raw)
    try:
        return float(str(raw).strip())
    except ValueError:
        return math.nan


def _text_of(raw: Any) -> str:
    return "NaN" if raw is None else str(raw)


def _same(a: float, b: float) -> bool:
    if math.isnan(a) and math.isnan(b):
        return True
    return a == b


class Quantity:
    """Immutable numeric value (or vector) in millimeters / degrees.

    Args:
        value: Native scalar value. Tolerances are left unspecified (NaN).
    """

    __slots__ = ('_value', '_upper', '_lower', '_vector', '_text', 'unit')

    def __init__(self, value: float = math.nan):
        self._value = _parse_number(value)
        self._upper = math.nan
        self._lower = math.nan
        self._vector: Optional[np.ndarray] = None
        self._text = str(value)
        # Provenance tag only, never used by conversions
        self.unit: Optional[Unit] = None

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def from_text(cls, value: Any, upper: Any = None, lower: Any = None) -> 'Quantity':
        """Build a toleranced scalar from numeric or textual fields.

        Unparsable text becomes NaN; this never raises.
        """
        q = cls(_parse_number(value))
        q._text = _text_of(value)
        q._upper = _parse_number(upper)
        q._lower = _parse_number(lower)
        return q

    @classmethod
    def from_vector(cls, values: Optional[Iterable[float]]) -> 'Quantity':
        """Build a vector quantity (no tolerance); None gives an empty vector."""
        q = cls()
        q._text = "NaN"
        if values is None:
            q._vector = np.zeros(0, dtype=float)
        else:
            q._vector = np.asarray(list(values), dtype=float).reshape(-1)
        return q

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def value(self, unit: Any = Unit.MILLIMETER) -> float:
        """Scalar value in ``unit``; NaN for an unknown unit."""
        return from_native(self._value, unit)

    def tolerance_plus(self, unit: Any = Unit.MILLIMETER) -> float:
        return from_native(self._upper, unit)

    def tolerance_minus(self, unit: Any = Unit.MILLIMETER) -> float:
        return from_native(self._lower, unit)

    def tolerance(self, unit: Any, sign: str) -> float:
        """Upper (``"+"``) or lower (``"-"``) tolerance; other signs give NaN."""
        if sign == "+":
            return self.tolerance_plus(unit)
        if sign == "-":
            return self.tolerance_minus(unit)
        return math.nan

    def vector_values(self, unit: Any = Unit.MILLIMETER) -> np.ndarray:
        """Copy of the vector components in ``unit``; empty for an unknown unit."""
        if Unit.lookup(unit) is None or self._vector is None:
            return np.zeros(0, dtype=float)
        return np.array([from_native(v, unit) for v in self._vector], dtype=float)

    @property
    def is_vector(self) -> bool:
        return self._vector is not None

    @property
    def text(self) -> str:
        """Value as it was supplied (``"NaN"`` when absent)."""
        return self._text

    def set_unit(self, unit: Unit) -> None:
        """Record the unit the value was originally supplied in."""
        self.unit = unit

    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quantity):
            return NotImplemented
        if self.is_vector != other.is_vector:
            return False
        if self.is_vector:
            a, b = self._vector, other._vector
            return a.shape == b.shape and bool(np.array_equal(a, b, equal_nan=True))
        return (
            _same(self._value, other._value)
            and _same(self._upper, other._upper)
            and _same(self._lower, other._lower)
        )

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        if self.is_vector:
            return f"Quantity.from_vector({self._vector.tolist()})"
        return f"Quantity({self._value}, +{self._upper}, -{self._lower})"
