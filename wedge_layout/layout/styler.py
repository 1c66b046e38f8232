"""
Dynamic styler: evaluate the rule table and store annotation styles.

apply_styles() writes one AnnotationStyle (position only) per dimension code
into the drawing's style map. apply_render_flags() adds the display flags the
CAD host needs for specific codes.
"""

import logging
import numbers
from typing import Any, Optional, Tuple

from wedge_layout.layout.rules import LayoutRuleTable, get_rules
from wedge_layout.model.drawing import (
    AnnotationStyle,
    AnnotationStyleMap,
    DrawingState,
    ExtensionLineAsCenterline,
)
from wedge_layout.model.part import WedgePart
from wedge_layout.model.quantity import Quantity

logger = logging.getLogger(__name__)

# Dimension codes drawn with their own text placement
UNCENTERED_CODES = frozenset({"ISA"})

# Flat radius dimensions: arrows and witness lines on the outside,
# first extension line drawn as a plain line
RADIUS_CODES = frozenset({"FR", "BR"})
RADIUS_ARROW_SIDE = 2
RADIUS_WITNESS_VISIBILITY = 2


def _as_point(result: Any) -> Optional[Tuple[float, float]]:
    """Return ``result`` as an (x, y) pair, or None if it is not a 2D numeric point."""
    if result is None or isinstance(result, (str, bytes)):
        return None
    try:
        values = list(result)
    except TypeError:
        return None
    if len(values) != 2:
        return None
    if not all(isinstance(v, numbers.Real) and not isinstance(v, bool) for v in values):
        return None
    return float(values[0]), float(values[1])


def apply_styles(
    part: WedgePart,
    drawing: DrawingState,
    rules: Optional[LayoutRuleTable] = None,
) -> AnnotationStyleMap:
    """Compute annotation positions for every rule in the table.

    Args:
        part: part whose dimensions drive the layout.
        drawing: sheet state; its dimension_styles map receives the results.
        rules: rule table; defaults to get_rules(drawing.drawing_type).

    Returns:
        drawing.dimension_styles

    Raises:
        MissingParameterError: a rule needed a dimension or view that is absent.
    """
    if rules is None:
        rules = get_rules(drawing.drawing_type)

    styles = drawing.dimension_styles
    written = 0
    for code, entry in rules.items():
        point = _as_point(entry.evaluate(part, drawing))
        if point is None:
            logger.info("Skipping '%s': rule did not return a 2D point", code)
            continue
        styles.set(code, AnnotationStyle(position=Quantity.from_vector(point)))
        written += 1

    logger.debug("Applied %d/%d annotation styles", written, len(rules),
                 extra={"drawing_type": drawing.drawing_type.value})
    return styles


def apply_render_flags(styles: AnnotationStyleMap) -> AnnotationStyleMap:
    """Set CAD display flags on existing styles; positions are untouched."""
    for code, style in styles.items():
        if code not in UNCENTERED_CODES:
            style.center_text = True
        if code in RADIUS_CODES:
            style.arrow_side = RADIUS_ARROW_SIDE
            style.witness_visibility = RADIUS_WITNESS_VISIBILITY
            style.extension_line_from_center = False
            style.extension_line_as_centerline = ExtensionLineAsCenterline(
                ext_index=1, centerline=False)
    return styles
