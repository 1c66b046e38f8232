"""
Units of measure for part dimensions.

The native unit is the millimeter for lengths and the degree for angles.
Conversions never raise: an unknown unit yields NaN.
"""

import math
from enum import Enum
from typing import Any, Optional

from wedge_layout.config import INCH_MM


class Unit(Enum):
    """Unit a Quantity can be read in."""
    MILLIMETER = "mm"
    METER = "m"
    INCH = "in"
    RADIAN = "rad"
    DEGREE = "deg"

    @classmethod
    def lookup(cls, name: Any) -> Optional['Unit']:
        """Find a unit by enum member, name, value or common token.

        Returns None for anything unrecognized (including None).
        """
        if isinstance(name, Unit):
            return name
        if not isinstance(name, str):
            return None
        token = name.strip().lower()
        for unit in cls:
            if token == unit.value or token == unit.name.lower():
                return unit
        return _ALIASES.get(token)


_ALIASES = {
    "millimeters": Unit.MILLIMETER,
    "millimetre": Unit.MILLIMETER,
    "meters": Unit.METER,
    "metre": Unit.METER,
    "inches": Unit.INCH,
    "\"": Unit.INCH,
    "radians": Unit.RADIAN,
    "degrees": Unit.DEGREE,
    "°": Unit.DEGREE,
}


def from_native(value: float, unit: Any) -> float:
    """Convert a native value (mm / degree) into ``unit``."""
    resolved = Unit.lookup(unit)
    if resolved is None:
        return math.nan
    if resolved is Unit.MILLIMETER or resolved is Unit.DEGREE:
        return value
    if resolved is Unit.METER:
        return value / 1000.0
    if resolved is Unit.INCH:
        return value / INCH_MM
    return value * math.pi / 180.0


def to_native(value: float, unit: Any) -> float:
    """Convert a value given in ``unit`` into native mm / degree."""
    resolved = Unit.lookup(unit)
    if resolved is None:
        return math.nan
    if resolved is Unit.MILLIMETER or resolved is Unit.DEGREE:
        return value
    if resolved is Unit.METER:
        return value * 1000.0
    if resolved is Unit.INCH:
        return value * INCH_MM
    return value * 180.0 / math.pi


def format_decimal(value: float, places: int = 3) -> str:
    """Format with up to ``places`` decimals and no trailing zeros: 4, 2.5, 0.125."""
    text = f"{value:.{places}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def parse_unit_token(token: Optional[str]) -> Unit:
    """Parse the unit of a conditional rule.

    Only ``mm|millimeter``, ``m|meter`` and ``deg|degree`` are recognized;
    every other token (empty included) falls back to millimeter.
    """
    normalized = (token or "").strip().lower()
    if normalized in ("m", "meter"):
        return Unit.METER
    if normalized in ("deg", "degree"):
        return Unit.DEGREE
    return Unit.MILLIMETER
