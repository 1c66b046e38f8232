"""
Centerlines and the top-view centermark.

Every segment is ``(x1, y1, x2, y2)`` in model millimeters relative to the
view origin. Overhangs are given in sheet millimeters and divided by the
view scale, so they print at the same length whatever the scale.

Production sheets draw the part axis vertically; overlay sheets draw it
horizontally and have no centermark.
"""

import logging
from typing import Dict, List, Optional, Tuple

from wedge_layout.config import DETAIL_VIEW, FRONT_VIEW, SECTION_VIEW, SIDE_VIEW, TOP_VIEW
from wedge_layout.model.drawing import DrawingState
from wedge_layout.model.part import DrawingType, WedgePart
from wedge_layout.model.units import Unit

logger = logging.getLogger(__name__)

Segment = Tuple[float, float, float, float]

# Sheet millimeters a centerline extends past the part outline
CENTERLINE_OVERHANG = 2.0
# Sheet millimeters the detail centerline stops short of the part end
DETAIL_CENTERLINE_SHORTFALL = 10.0


def _axis(half_length: float, horizontal: bool) -> Segment:
    if horizontal:
        return (-half_length, 0.0, half_length, 0.0)
    return (0.0, half_length, 0.0, -half_length)


def view_centerline(
    view: str,
    part: WedgePart,
    scale: float,
    drawing_type: DrawingType,
) -> Optional[Segment]:
    """Centerline of one view, or None for views that carry none.

    Raises:
        MissingParameterError: TL is absent.
    """
    overlay = drawing_type == DrawingType.OVERLAY
    if view not in (FRONT_VIEW, SIDE_VIEW, DETAIL_VIEW, SECTION_VIEW):
        return None

    half_tl = part.dimensions.get("TL").value(Unit.MILLIMETER) / 2
    overhang = CENTERLINE_OVERHANG / scale

    if view == DETAIL_VIEW:
        return (0.0, 0.0, 0.0, -half_tl + DETAIL_CENTERLINE_SHORTFALL / scale)
    if view == SECTION_VIEW and not overlay:
        return _axis(half_tl, horizontal=False)
    return _axis(half_tl + overhang, horizontal=overlay)


def top_view_centermark(part: WedgePart, scale: float) -> List[Segment]:
    """Cross marking the tip center in the top view.

    The vertical line is shifted by ``(TDF - TD) / 2`` to sit on the tip.

    Raises:
        MissingParameterError: TD or TDF is absent.
    """
    td = part.dimensions.get("TD").value(Unit.MILLIMETER)
    tdf = part.dimensions.get("TDF").value(Unit.MILLIMETER)
    offset = (tdf - td) / 2
    reach = td / 2 + CENTERLINE_OVERHANG / scale
    return [
        (offset, reach, offset, -reach),
        (offset + reach, 0.0, offset - reach, 0.0),
    ]


def compute_centerlines(part: WedgePart, drawing: DrawingState) -> Dict[str, List[Segment]]:
    """Centerline segments per view for a laid-out drawing.

    Views without a scale in the drawing state are skipped.
    """
    result: Dict[str, List[Segment]] = {}
    for view in (FRONT_VIEW, SIDE_VIEW, TOP_VIEW, DETAIL_VIEW, SECTION_VIEW):
        scale_q = drawing.view_scales.try_get(view)
        if scale_q is None:
            logger.debug("No scale for %s, centerline skipped", view)
            continue
        scale = scale_q.value(Unit.MILLIMETER)

        if view == TOP_VIEW:
            if drawing.drawing_type == DrawingType.PRODUCTION:
                result[view] = top_view_centermark(part, scale)
            continue

        segment = view_centerline(view, part, scale, drawing.drawing_type)
        if segment is not None:
            result[view] = [segment]
    return result
