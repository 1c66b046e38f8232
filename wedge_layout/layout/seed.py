"""
Seed a DrawingState from the layout configuration and the part.

Produces the initial view scales, view positions, breakline data, table
anchors and title block fields that the layout rules read.
"""

import logging
from datetime import date
from typing import Optional, Union

from wedge_layout.config import (
    BREAKLINE_GAP,
    DEFAULT_ADDRESS,
    DEFAULT_COMPANY_NAME,
    DEFAULT_DRAWN_BY,
    DEFAULT_W_MM,
    DETAIL_SCALE_W_THRESHOLD,
    DETAIL_VIEW,
    DIMENSION_TABLE,
    DRAWING_NUMBER_SUFFIX,
    DRAWN_ON_FORMAT,
    FRONT_VIEW,
    HOW_TO_ORDER_TABLE,
    LABEL_AS_TABLE,
    LOWER_PART_LENGTH,
    MIN_DETAIL_SCALE,
    POLISH_TABLE,
    SECTION_VIEW,
    SIDE_VIEW,
    TITLE_BLOCK_DETAIL_SCALE_KEY,
    TITLE_BLOCK_SCALE_KEY,
    TOP_VIEW,
    UPPER_PART_LENGTH,
    breakline_key,
)
from wedge_layout.errors import LayoutError
from wedge_layout.model.drawing import DrawingState
from wedge_layout.model.part import DrawingType, WedgePart
from wedge_layout.model.quantity import Quantity
from wedge_layout.model.units import Unit, format_decimal
from wedge_layout.project_config import DrawingTypeConfig, ProjectConfig

logger = logging.getLogger(__name__)


def adjusted_detail_scale(part: WedgePart, base_scale: float) -> float:
    """Detail/section scale adapted to the part width W.

    Parts at least 0.7 mm wide get ``base / W`` (never below 0.2); narrower
    parts keep the base scale. W defaults to 10 mm when absent.
    """
    w_q = part.dimensions.try_get("W")
    w = w_q.value(Unit.MILLIMETER) if w_q is not None else DEFAULT_W_MM
    scale = max(base_scale / w, MIN_DETAIL_SCALE) if w >= DETAIL_SCALE_W_THRESHOLD else base_scale
    return round(scale, 3)


def _split_metadata(part: WedgePart, key: str, separator: str = "¶"):
    raw = str(part.metadata.get(key, "") or "")
    return [item.strip() for item in raw.split(separator) if item.strip()]


def seed_drawing_state(
    part: WedgePart,
    config: Union[ProjectConfig, DrawingTypeConfig],
    drawing_type: Union[DrawingType, str],
    drawn_on: Optional[date] = None,
) -> DrawingState:
    """Build the initial drawing state for one part.

    Args:
        part: part instance; TD and TDF are required.
        config: full configuration or an already selected section.
        drawing_type: sheet kind to seed.
        drawn_on: date printed in the title block (default: today).

    Returns:
        New DrawingState

    Raises:
        ConfigError: config has no section for the drawing type.
        LayoutError: drawing_type is not a known sheet kind.
        MissingParameterError: TD or TDF is absent.
    """
    dt = DrawingType.parse(drawing_type)
    if dt is None:
        raise LayoutError(f"Unknown drawing type: {drawing_type}")
    section = config.for_drawing_type(dt) if isinstance(config, ProjectConfig) else config
    drawing = DrawingState(drawing_type=dt)

    # Scales
    fsv = section.scaling.front_side_top
    dsv = adjusted_detail_scale(part, section.scaling.detail_section)
    for view in (FRONT_VIEW, SIDE_VIEW, TOP_VIEW):
        drawing.view_scales.set(view, Quantity(fsv))
    for view in (DETAIL_VIEW, SECTION_VIEW):
        drawing.view_scales.set(view, Quantity(dsv))

    # Positions
    views = section.views
    td = part.dimensions.get("TD").value(Unit.MILLIMETER)
    tdf = part.dimensions.get("TDF").value(Unit.MILLIMETER)
    section_center_x = views.section_x + dsv * (td - tdf) / 2

    drawing.view_positions.set(FRONT_VIEW, [views.front_x, views.front_y])
    drawing.view_positions.set(SIDE_VIEW, [views.front_x + views.side_dx, views.front_y])
    drawing.view_positions.set(TOP_VIEW, [views.front_x + views.side_dx, views.front_y + views.top_dy])
    drawing.view_positions.set(DETAIL_VIEW, [views.detail_x, views.detail_y])
    drawing.view_positions.set(SECTION_VIEW, [views.detail_x + section_center_x, views.detail_y])

    # Tables
    tables = section.tables
    drawing.table_positions.set(DIMENSION_TABLE, tables.dimension.as_vector())
    drawing.table_positions.set(HOW_TO_ORDER_TABLE, tables.how_to_order.as_vector())
    drawing.table_positions.set(LABEL_AS_TABLE, tables.label_as.as_vector())
    drawing.table_positions.set(POLISH_TABLE, tables.polish.as_vector())

    # Breaklines
    bl = section.breaklines
    for view in (FRONT_VIEW, SIDE_VIEW):
        drawing.breakline_data.set(breakline_key(view, LOWER_PART_LENGTH), bl.front_lower_length)
        drawing.breakline_data.set(breakline_key(view, UPPER_PART_LENGTH), bl.front_upper_length)
        drawing.breakline_data.set(breakline_key(view, BREAKLINE_GAP), bl.front_gap)
    for view in (DETAIL_VIEW, SECTION_VIEW):
        drawing.breakline_data.set(breakline_key(view, LOWER_PART_LENGTH), bl.detail_lower_length)
        drawing.breakline_data.set(breakline_key(view, UPPER_PART_LENGTH), 0.0)
        drawing.breakline_data.set(breakline_key(view, BREAKLINE_GAP), bl.detail_gap)

    # Title block and notes
    tb = section.title_block
    number = part.drawing_number
    drawing.title = str(part.metadata.get("wedge_title", "") or "")
    drawing.title_info["info"] = str(part.metadata.get("drawing_comments") or tb.how_to_order_info)
    drawing.title_info["number"] = number

    drawing.title_block_info.update({
        "MATERIAL": tb.material,
        "AUTHOR": tb.author,
        "DRAWN_BY": DEFAULT_DRAWN_BY,
        "COMPANY_NAME": DEFAULT_COMPANY_NAME,
        "TITLE": drawing.title,
        "DRAWING_NUMBER": number + DRAWING_NUMBER_SUFFIX,
        "ADDRESS": DEFAULT_ADDRESS,
        "TYPE": dt.value.upper(),
        TITLE_BLOCK_SCALE_KEY: format_decimal(fsv),
        TITLE_BLOCK_DETAIL_SCALE_KEY: format_decimal(section.scaling.detail_section),
        "DRAWN_ON": (drawn_on or date.today()).strftime(DRAWN_ON_FORMAT),
    })

    drawing.how_to_order_info["number"] = number
    drawing.how_to_order_info["packaging"] = str(part.metadata.get("packaging") or tb.packaging)

    drawing.label_as_items = _split_metadata(part, "engrave") or list(tb.engrave)
    drawing.polish_items = _split_metadata(part, "finishing") or list(tb.polish_text)
    drawing.dimension_keys_in_table = list(tb.dimension_keys_in_table)

    logger.debug("Seeded %s drawing: fsv=%s dsv=%s", dt.value, fsv, dsv,
                 extra={"drawing_number": number})
    return drawing
