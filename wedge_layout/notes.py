"""
Sheet note text: the dimension table note and the overlay calibration note.

Dimension lines read ``KEY = <inch> <tol> [<mm> <tol>]``, e.g.::

    TL = 1.5000 ±0.0020 [38.100 ±0.051]
    TD = .0630 [1.600] (REF)
"""

import logging
import math
from typing import Iterable, List, Optional, Tuple

from wedge_layout.config import INCH_MM, OVERLAY_SHEET_SIZE
from wedge_layout.model.parameters import ParameterMap
from wedge_layout.model.quantity import Quantity
from wedge_layout.model.units import Unit

logger = logging.getLogger(__name__)

# Calibration note offset from the calibration square corner (mm)
CALIBRATION_NOTE_INSET_X = 7.0
CALIBRATION_NOTE_INSET_Y = 5.0
MICRONS_PER_INCH = 25400.0


def trim_leading_zero(text: str) -> str:
    """'0.8661' -> '.8661' (drafting convention for inch values)."""
    return text[1:] if text.startswith("0.") else text


def is_reference(upper: float, lower: float) -> bool:
    """A dimension with both tolerances zero is a reference dimension."""
    return upper == 0 and lower == 0


def format_tolerance(upper: float, decimals: int) -> str:
    return f"±{upper:.{decimals}f}"


def format_dimension_line(key: str, quantity: Quantity) -> Optional[str]:
    """Note line for one dimension, or None when its value is unspecified.

    Tolerances are omitted when either side is NaN; reference dimensions
    get a ``(REF)`` suffix instead.
    """
    value_in = quantity.value(Unit.INCH)
    if math.isnan(value_in):
        return None

    upper_in = quantity.tolerance_plus(Unit.INCH)
    lower_in = quantity.tolerance_minus(Unit.INCH)
    upper_mm = quantity.tolerance_plus(Unit.MILLIMETER)
    lower_mm = quantity.tolerance_minus(Unit.MILLIMETER)
    reference = is_reference(upper_in, lower_in)

    tol_in = ""
    if not (math.isnan(upper_in) or math.isnan(lower_in) or reference):
        tol_in = format_tolerance(upper_in, 4)
    tol_mm = ""
    if not (math.isnan(upper_mm) or math.isnan(lower_mm) or reference):
        tol_mm = format_tolerance(upper_mm, 3)

    line = f"{key} = {trim_leading_zero(f'{value_in:.4f}')} {tol_in}".strip()
    line += " [" + f"{quantity.value(Unit.MILLIMETER):.3f} {tol_mm}".strip() + "]"
    if reference:
        line += " (REF)"
    return line


def build_dimension_note(keys: Iterable[str], dimensions: ParameterMap) -> List[str]:
    """Lines for every listed key present in ``dimensions`` with a value."""
    lines = []
    for key in keys:
        quantity = dimensions.try_get(key)
        if quantity is None:
            logger.debug("Dimension note: '%s' not in part, skipped", key)
            continue
        line = format_dimension_line(key, quantity)
        if line is not None:
            lines.append(line)

    if not lines:
        logger.warning("No valid dimensions for the dimension note")
    return lines


def calibration_note(
    calibration_microns: str,
    square_side_in: float,
    sheet_size: Tuple[float, float],
) -> Tuple[str, Tuple[float, float]]:
    """Overlay calibration note text and position.

    The note sits just inside the bottom-right corner of the calibration
    square centered on the sheet.

    Args:
        calibration_microns: calibration value as printed.
        square_side_in: side of the calibration square in inches.
        sheet_size: sheet (width, height) in mm.

    Returns:
        (text, (x, y)) with the position in sheet mm
    """
    side_mm = square_side_in * INCH_MM
    width, height = sheet_size
    x = width / 2 + side_mm / 2 - CALIBRATION_NOTE_INSET_X
    y = height / 2 - side_mm / 2 + CALIBRATION_NOTE_INSET_Y
    return f"{calibration_microns}µm", (x, y)


def overlay_calibration_note(
    calibration_microns: str,
    overlay_scaling: float,
    sheet_size: Tuple[float, float] = OVERLAY_SHEET_SIZE,
) -> Optional[Tuple[str, Tuple[float, float]]]:
    """Calibration note for an overlay sheet, or None when there is none.

    The calibration square is the calibration length (µm) magnified by the
    overlay scaling.
    """
    text = str(calibration_microns or "").strip()
    if not text:
        return None
    try:
        microns = float(text)
    except ValueError:
        logger.warning("Overlay calibration '%s' is not a number, note skipped", text)
        return None
    side_in = microns / MICRONS_PER_INCH * overlay_scaling
    return calibration_note(text, side_in, sheet_size)
