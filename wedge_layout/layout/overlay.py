"""
Overlay sheet layout rules.

Overlay sheets are printed at a fixed magnification on a fixed template, so
every annotation sits at a constant sheet position.
"""

from typing import Dict, Tuple

from wedge_layout.config import (
    OVERLAY_DETAIL_VIEW,
    OVERLAY_SIDE_VIEW,
    OVERLAY_SIDE_VIEW2,
    OVERLAY_TOP_VIEW,
    SECTION_VIEW,
)
from wedge_layout.layout.rules import LayoutRule, LayoutRuleTable, Point, make_table


class FixedPositionRule(LayoutRule):
    """Rule that ignores its inputs and returns a constant point."""

    def __init__(self, view: str, x: float, y: float):
        self.view = view
        self.position: Point = (x, y)

    def evaluate(self, part, drawing) -> Point:
        return self.position

    def __repr__(self) -> str:
        return f"FixedPositionRule({self.view!r}, {self.position[0]}, {self.position[1]})"


# code -> (anchor view, x, y) in sheet millimeters
OVERLAY_POSITIONS: Dict[str, Tuple[str, float, float]] = {
    "FR": (SECTION_VIEW, 10.0, 10.0),
    "BR": (SECTION_VIEW, 20.0, 10.0),
    "ISA": (OVERLAY_DETAIL_VIEW, 393.7, 148.33),
    "GA": (OVERLAY_DETAIL_VIEW, 337.82, 148.33),
    "VW": (OVERLAY_SIDE_VIEW2, 196.2244, 75.9968),
    "VR": (OVERLAY_SIDE_VIEW2, 247.0912, 54.2798),
    "E": (OVERLAY_SIDE_VIEW, 232.9086, 24.3078),
    "X": (OVERLAY_SIDE_VIEW, 189.8048, 16.9926),
    "TDF": (OVERLAY_TOP_VIEW, 408.0, 12.5062),
    "FX": (OVERLAY_SIDE_VIEW, 200.9902, 48.514),
    "D3": (OVERLAY_SIDE_VIEW, 270.0, 10.0),
    "FA": (OVERLAY_SIDE_VIEW, 324.2818, 43.307),
    "BA": (OVERLAY_SIDE_VIEW, 329.438, 23.7998),
}


def build_overlay_rules() -> LayoutRuleTable:
    return make_table([
        (code, FixedPositionRule(view, x, y))
        for code, (view, x, y) in OVERLAY_POSITIONS.items()
    ])
