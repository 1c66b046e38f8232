"""Annotation layout: rule tables, composition, styling, seeding and visibility."""

from wedge_layout.layout.centerlines import compute_centerlines, top_view_centermark, view_centerline
from wedge_layout.layout.composition import inject, override_if
from wedge_layout.layout.rules import (
    CallableRule,
    LayoutRule,
    LayoutRuleTable,
    RuleEntry,
    get_rules,
)
from wedge_layout.layout.seed import adjusted_detail_scale, seed_drawing_state
from wedge_layout.layout.styler import apply_render_flags, apply_styles
from wedge_layout.layout.visibility import (
    GtolFrame,
    geometric_tolerance_frame,
    hidden_annotations,
    is_unspecified,
    symmetry_annotations_visible,
)

__all__ = [
    'CallableRule',
    'GtolFrame',
    'LayoutRule',
    'LayoutRuleTable',
    'RuleEntry',
    'adjusted_detail_scale',
    'apply_render_flags',
    'apply_styles',
    'compute_centerlines',
    'geometric_tolerance_frame',
    'get_rules',
    'hidden_annotations',
    'inject',
    'is_unspecified',
    'override_if',
    'seed_drawing_state',
    'symmetry_annotations_visible',
    'top_view_centermark',
    'view_centerline',
]
