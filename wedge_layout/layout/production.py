"""
Production sheet layout rules.

One rule class per dimension code. Positions are relative to the anchor
view's position and scale; detail and section rules measure vertically from
the breakline midline instead of the raw view anchor.

Notation in docstrings: (fx, fy)/fsv front view position/scale, likewise
top (tsv), side (ssv), detail (dsv) and section (s).
"""

import math

from wedge_layout.config import (
    BREAKLINE_GAP,
    DETAIL_VIEW,
    ENGRAVING_START_FACTOR,
    FRONT_VIEW,
    LOWER_PART_LENGTH,
    SECTION_VIEW,
    SIDE_VIEW,
    SMALL_ANGLE_DEG,
    TOP_VIEW,
    VISIBLE_BREAKLINE_FACTOR,
    VISIBLE_ENGRAVING_FACTOR,
    VISIBLE_LENGTH_MARGIN,
    VISIBLE_LOWER_FACTOR,
    breakline_key,
)
from wedge_layout.layout.rules import (
    LayoutRule,
    LayoutRuleTable,
    Point,
    breakline,
    dim,
    make_table,
    soft_dim,
    view_position,
    view_scale,
)
from wedge_layout.model.drawing import DrawingState
from wedge_layout.model.part import WedgePart
from wedge_layout.model.units import Unit


# ---------------------------------------------------------------------------
# Shared geometry
# ---------------------------------------------------------------------------

def detail_midline(drawing: DrawingState) -> float:
    """Vertical center of the broken detail view."""
    _, dy = view_position(drawing, DETAIL_VIEW)
    gap = breakline(drawing, breakline_key(DETAIL_VIEW, BREAKLINE_GAP))
    lower = breakline(drawing, breakline_key(DETAIL_VIEW, LOWER_PART_LENGTH))
    return dy - (gap + lower) / 2


def section_midline(drawing: DrawingState) -> float:
    """Vertical center of the broken section view.

    The lower part length is taken from the detail view, which shares it.
    """
    _, sy = view_position(drawing, SECTION_VIEW)
    gap = breakline(drawing, breakline_key(SECTION_VIEW, BREAKLINE_GAP))
    lower = breakline(drawing, breakline_key(DETAIL_VIEW, LOWER_PART_LENGTH))
    return sy - (gap + lower) / 2


def section_anchor_x(part: WedgePart, drawing: DrawingState) -> float:
    """Horizontal anchor for section view dimensions.

    Uses the flat offset FX when it is present and specified (non-zero,
    not NaN); otherwise centers on the TD/TDF difference.
    """
    sx, _ = view_position(drawing, SECTION_VIEW)
    s = view_scale(drawing, SECTION_VIEW)
    fl = dim(part, "FL")
    td = dim(part, "TD")
    tdf = dim(part, "TDF")

    fx = soft_dim(part, "FX")
    if fx != 0 and not math.isnan(fx):
        return sx - s * (tdf / 2 - fx - fl / 2)
    return sx - s * (td - tdf) / 2


def visible_length(part: WedgePart, drawing: DrawingState) -> float:
    """Sheet length of the broken front view used to center long dimensions."""
    tl = dim(part, "TL")
    fsv = view_scale(drawing, FRONT_VIEW)
    return (tl * VISIBLE_LOWER_FACTOR * fsv
            + tl * VISIBLE_BREAKLINE_FACTOR * fsv
            + tl * VISIBLE_ENGRAVING_FACTOR * fsv
            + VISIBLE_LENGTH_MARGIN)


# ---------------------------------------------------------------------------
# Front view
# ---------------------------------------------------------------------------

class _FrontRule(LayoutRule):
    view = FRONT_VIEW

    def _left_edge(self, part: WedgePart, drawing: DrawingState) -> Point:
        fx, fy = view_position(drawing, FRONT_VIEW)
        fsv = view_scale(drawing, FRONT_VIEW)
        return fx - fsv * dim(part, "TD") / 2, fy


class TotalLengthRule(_FrontRule):
    """TL: (fx - fsv*TD/2 - 7.5, fy)"""

    def evaluate(self, part, drawing):
        x, y = self._left_edge(part, drawing)
        return x - 7.5, y


class EngravingStartRule(_FrontRule):
    """EngravingStart: (fx + fsv*TD/2 + 10, fy + 0.45*TL)"""

    def evaluate(self, part, drawing):
        fx, fy = view_position(drawing, FRONT_VIEW)
        fsv = view_scale(drawing, FRONT_VIEW)
        td = dim(part, "TD")
        tl = dim(part, "TL")
        return fx + fsv * td / 2 + 10, fy + tl * ENGRAVING_START_FACTOR


class D2Rule(_FrontRule):
    def evaluate(self, part, drawing):
        x, y = self._left_edge(part, drawing)
        return x + 25, y - 25


class VisibleWidthRule(_FrontRule):
    """VW: left of the front view, centered on the visible length."""

    def evaluate(self, part, drawing):
        x, y = self._left_edge(part, drawing)
        return x - 8, y - visible_length(part, drawing) / 2


# ---------------------------------------------------------------------------
# Top view
# ---------------------------------------------------------------------------

class _TopRule(LayoutRule):
    view = TOP_VIEW

    def _read(self, part: WedgePart, drawing: DrawingState):
        tx, ty = view_position(drawing, TOP_VIEW)
        tsv = view_scale(drawing, TOP_VIEW)
        return tx, ty, tsv, dim(part, "TD"), dim(part, "TDF")


class TopDiameterFlatRule(_TopRule):
    def evaluate(self, part, drawing):
        tx, ty, tsv, td, tdf = self._read(part, drawing)
        return tx + tsv * tdf / 2 + 20, ty + tsv * td / 2 + 3


class TopDiameterRule(_TopRule):
    def evaluate(self, part, drawing):
        tx, ty, tsv, td, tdf = self._read(part, drawing)
        return tx + tsv * tdf / 2 + 20, ty - tsv * td / 2


class DatumFeatureRule(_TopRule):
    """Datum feature symbol below-left of the top view."""

    def evaluate(self, part, drawing):
        tx, ty, tsv, td, tdf = self._read(part, drawing)
        return tx - tsv * tdf / 2 - 5, ty - tsv * td / 2 - 1


# ---------------------------------------------------------------------------
# Detail view
# ---------------------------------------------------------------------------

class _DetailRule(LayoutRule):
    view = DETAIL_VIEW


class InsideAngleRule(_DetailRule):
    def evaluate(self, part, drawing):
        dx, dy = view_position(drawing, DETAIL_VIEW)
        return dx + 3.5, dy


class _MidlineOffsetRule(_DetailRule):
    """Detail rule placed at (dx, midline + offset)."""

    offset = 0.0

    def evaluate(self, part, drawing):
        dx, _ = view_position(drawing, DETAIL_VIEW)
        return dx, detail_midline(drawing) + self.offset


class GrooveAngleRule(_MidlineOffsetRule):
    offset = -2.0


class BladeRule(_MidlineOffsetRule):
    offset = -10.0


class WidthRule(_MidlineOffsetRule):
    offset = -15.0


class GeometricToleranceRule(_DetailRule):
    def evaluate(self, part, drawing):
        dx, dy = view_position(drawing, DETAIL_VIEW)
        return dx - 13.5, dy - 70


class GrooveDepthRule(_DetailRule):
    """GD: (dx - W/2*dsv - 20, my + dsv*GD/2)"""

    def evaluate(self, part, drawing):
        dx, _ = view_position(drawing, DETAIL_VIEW)
        dsv = view_scale(drawing, DETAIL_VIEW)
        w = dim(part, "W")
        gd = dim(part, "GD")
        return dx - (w / 2 * dsv) - 20, detail_midline(drawing) + dsv * gd / 2


class D1Rule(GrooveDepthRule):
    """D1 shares the GD placement."""


class GrooveRadiusRule(_DetailRule):
    def evaluate(self, part, drawing):
        dx, _ = view_position(drawing, DETAIL_VIEW)
        dsv = view_scale(drawing, DETAIL_VIEW)
        return dx - 5, detail_midline(drawing) + dsv * dim(part, "GD") + 20


# ---------------------------------------------------------------------------
# Side view
# ---------------------------------------------------------------------------

class _SideRule(LayoutRule):
    view = SIDE_VIEW

    def _read(self, part: WedgePart, drawing: DrawingState):
        sx, sy = view_position(drawing, SIDE_VIEW)
        ssv = view_scale(drawing, SIDE_VIEW)
        return sx, sy, ssv * dim(part, "TD") / 2


def _is_small_angle(part: WedgePart, key: str) -> bool:
    angle = soft_dim(part, key, Unit.DEGREE)
    return not math.isnan(angle) and angle < SMALL_ANGLE_DEG


class FrontAngleRule(_SideRule):
    """FA: higher up the side view when the angle is small (< 6 deg)."""

    def evaluate(self, part, drawing):
        sx, sy, half = self._read(part, drawing)
        if _is_small_angle(part, "FA"):
            return sx - half - 4, sy + 70
        return sx - half - 4, sy + 20


class BackAngleRule(_SideRule):
    """BA: left of the side view when small (< 6 deg), right otherwise."""

    def evaluate(self, part, drawing):
        sx, sy, half = self._read(part, drawing)
        if _is_small_angle(part, "BA"):
            return sx - half + 4, sy + 55
        return sx + half + 4, sy + 15


class EngravingRule(_SideRule):
    def evaluate(self, part, drawing):
        sx, sy, half = self._read(part, drawing)
        return sx + half + 6, sy - 68


class FlatOffsetRule(_SideRule):
    """FX: left of the side view, centered on the front view visible length."""

    def evaluate(self, part, drawing):
        sx, sy, half = self._read(part, drawing)
        return sx - half - 10, sy - visible_length(part, drawing) / 2


# ---------------------------------------------------------------------------
# Section view
# ---------------------------------------------------------------------------

class _SectionRule(LayoutRule):
    view = SECTION_VIEW


class FlatRule(_SectionRule):
    def evaluate(self, part, drawing):
        return section_anchor_x(part, drawing), section_midline(drawing) - 10


class FlatLengthRule(_SectionRule):
    def evaluate(self, part, drawing):
        return section_anchor_x(part, drawing), section_midline(drawing) - 15


class _FlatRadiusRule(_SectionRule):
    side = 1.0

    def evaluate(self, part, drawing):
        s = view_scale(drawing, SECTION_VIEW)
        ax = section_anchor_x(part, drawing)
        x = ax + self.side * (s * dim(part, "FL") / 2 + 10)
        return x, section_midline(drawing) + s * dim(part, "GD") / 2


class FrontRadiusRule(_FlatRadiusRule):
    side = -1.0


class BackRadiusRule(_FlatRadiusRule):
    side = 1.0


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------

def build_production_rules() -> LayoutRuleTable:
    """Fresh production rule table in evaluation order."""
    return make_table([
        ("TL", TotalLengthRule()),
        ("EngravingStart", EngravingStartRule()),
        ("D2", D2Rule()),
        ("VW", VisibleWidthRule()),
        ("TDF", TopDiameterFlatRule()),
        ("TD", TopDiameterRule()),
        ("DatumFeature", DatumFeatureRule()),
        ("ISA", InsideAngleRule()),
        ("GA", GrooveAngleRule()),
        ("B", BladeRule()),
        ("W", WidthRule()),
        ("GeometricTolerance", GeometricToleranceRule()),
        ("GD", GrooveDepthRule()),
        ("D1", D1Rule()),
        ("GR", GrooveRadiusRule()),
        ("FA", FrontAngleRule()),
        ("BA", BackAngleRule()),
        ("E", EngravingRule()),
        ("FX", FlatOffsetRule()),
        ("F", FlatRule()),
        ("FL", FlatLengthRule()),
        ("FR", FrontRadiusRule()),
        ("BR", BackRadiusRule()),
    ])
