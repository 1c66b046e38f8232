"""
Visibility of optional annotations.

A tolerance that is zero or NaN means "unspecified": the datum feature
symbol and the geometric tolerance frame that depend on it are hidden.
"""

import math
from dataclasses import dataclass
from typing import Optional, Set

from wedge_layout.config import DATUM_FEATURE_LABEL, SYMMETRY_TOLERANCE_KEY
from wedge_layout.model.part import WedgePart
from wedge_layout.model.units import Unit, format_decimal

# Annotations that exist only when a symmetry tolerance is specified
SYMMETRY_ANNOTATIONS = frozenset({"DatumFeature", "GeometricTolerance"})


@dataclass(frozen=True)
class GtolFrame:
    """Text of a symmetry tolerance frame.

    Attributes:
        inch_text: primary value, four decimals ("0.0400").
        mm_text: bracketed secondary value ("[0.04]").
        label: datum reference letter.
    """
    inch_text: str
    mm_text: str
    label: str


def is_unspecified(value: Optional[float]) -> bool:
    """True for None, zero and NaN."""
    return value is None or value == 0.0 or math.isnan(value)


def symmetry_tolerance(part: WedgePart) -> Optional[float]:
    q = part.dimensions.try_get(SYMMETRY_TOLERANCE_KEY)
    return q.value(Unit.MILLIMETER) if q is not None else None


def symmetry_annotations_visible(part: WedgePart) -> bool:
    return not is_unspecified(symmetry_tolerance(part))


def geometric_tolerance_frame(part: WedgePart, label: str = DATUM_FEATURE_LABEL) -> Optional[GtolFrame]:
    """Frame text for the symmetry tolerance, or None when the frame is hidden.

    The primary value is the stored tolerance rounded to four decimals,
    exactly as the drawing template prints it.
    """
    tol = symmetry_tolerance(part)
    if is_unspecified(tol):
        return None
    return GtolFrame(
        inch_text=f"{round(tol, 4):.4f}",
        mm_text=f"[{format_decimal(tol)}]",
        label=label,
    )


def hidden_annotations(part: WedgePart) -> Set[str]:
    """Dimension codes whose annotation must be hidden for this part."""
    if symmetry_annotations_visible(part):
        return set()
    return set(SYMMETRY_ANNOTATIONS)
