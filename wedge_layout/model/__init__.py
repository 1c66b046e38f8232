"""Data model: units, quantities, parameter maps, parts and drawing state."""

from wedge_layout.model.drawing import (
    AnnotationStyle,
    AnnotationStyleMap,
    DrawingState,
    ExtensionLineAsCenterline,
)
from wedge_layout.model.parameters import ParameterMap, as_quantity
from wedge_layout.model.part import (
    ANGLE_KEYS,
    WEDGE_ANGLE_KEYS,
    WEDGE_DIMENSION_KEYS,
    DrawingType,
    WedgePart,
    WedgeType,
    foreign_dimension_keys,
    is_angle_key,
)
from wedge_layout.model.quantity import Quantity
from wedge_layout.model.units import (
    Unit,
    format_decimal,
    from_native,
    parse_unit_token,
    to_native,
)

__all__ = [
    'ANGLE_KEYS',
    'AnnotationStyle',
    'AnnotationStyleMap',
    'DrawingState',
    'DrawingType',
    'ExtensionLineAsCenterline',
    'ParameterMap',
    'Quantity',
    'Unit',
    'WEDGE_ANGLE_KEYS',
    'WEDGE_DIMENSION_KEYS',
    'WedgePart',
    'WedgeType',
    'as_quantity',
    'foreign_dimension_keys',
    'format_decimal',
    'from_native',
    'is_angle_key',
    'parse_unit_token',
    'to_native',
]
