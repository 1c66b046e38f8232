"""
Constants shared by the wedge layout engine.

View and breakline key names follow the naming used in the drawing templates
(``Front_view``, ``Detail_viewBreaklineGap`` ...). All lengths are millimeters
on the sheet unless stated otherwise.
"""

# ---------------------------------------------------------------------------
# View names
# ---------------------------------------------------------------------------

FRONT_VIEW = "Front_view"
SIDE_VIEW = "Side_view"
TOP_VIEW = "Top_view"
DETAIL_VIEW = "Detail_view"
SECTION_VIEW = "Section_view"

OVERLAY_DETAIL_VIEW = "Overlay_detail_view"
OVERLAY_SIDE_VIEW = "Overlay_side_view"
OVERLAY_SIDE_VIEW2 = "Overlay_side_view2"
OVERLAY_TOP_VIEW = "Overlay_top_view"

# Views whose scale is printed in the title block
FRONT_SIDE_TOP_VIEWS = (FRONT_VIEW, SIDE_VIEW, TOP_VIEW)

# ---------------------------------------------------------------------------
# Breakline keys: "<view><suffix>"
# ---------------------------------------------------------------------------

LOWER_PART_LENGTH = "LowerPartLength"
UPPER_PART_LENGTH = "UpperPartLength"
BREAKLINE_GAP = "BreaklineGap"


def breakline_key(view: str, suffix: str) -> str:
    """Build a breakline data key, e.g. ``Detail_viewBreaklineGap``."""
    return f"{view}{suffix}"


# ---------------------------------------------------------------------------
# Tables and title block
# ---------------------------------------------------------------------------

DIMENSION_TABLE = "dimension"
HOW_TO_ORDER_TABLE = "how_to_order"
LABEL_AS_TABLE = "label_as"
POLISH_TABLE = "polish"

TITLE_BLOCK_SCALE_KEY = "SCALING_FRONT_SIDE_TOP_VIEW"
TITLE_BLOCK_DETAIL_SCALE_KEY = "SCALING_DETAIL_SECTION_VIEW"

DEFAULT_COMPANY_NAME = "SMALL PRECISION TOOLS"
DEFAULT_DRAWN_BY = "AUTODRAW SERVICE"
DEFAULT_ADDRESS = "1330 CLEGG STREET PETALUMA, CALIFORNIA 94954"

DRAWING_NUMBER_SUFFIX = "-DW"
DRAWN_ON_FORMAT = "%m-%d-%y"

DATUM_FEATURE_LABEL = "A"

# ---------------------------------------------------------------------------
# Layout factors
# ---------------------------------------------------------------------------

# Engraving starts at 45% of the total length
ENGRAVING_START_FACTOR = 0.45

# Visible front-view length terms (fractions of TL) used by VW / FX placement
VISIBLE_LOWER_FACTOR = 0.55
VISIBLE_BREAKLINE_FACTOR = 0.03
VISIBLE_ENGRAVING_FACTOR = 0.02
VISIBLE_LENGTH_MARGIN = 5.0

# Side-view angle annotations move when the angle is below this (degrees)
SMALL_ANGLE_DEG = 6.0

# ---------------------------------------------------------------------------
# Conditional rules
# ---------------------------------------------------------------------------

EQUALITY_EPSILON = 1e-4
COMPARISON_OPERATORS = ("<", ">", "<=", ">=", "==")

# ---------------------------------------------------------------------------
# Drawing state seeding
# ---------------------------------------------------------------------------

DEFAULT_W_MM = 10.0
DETAIL_SCALE_W_THRESHOLD = 0.7
MIN_DETAIL_SCALE = 0.2

DEFAULT_SYMMETRY_TOLERANCE_MM = 0.04
SYMMETRY_TOLERANCE_KEY = "SymmetryTolerance"

INCH_MM = 25.4

# Overlay template sheet (width, height), ANSI B landscape
OVERLAY_SHEET_SIZE = (431.8, 279.4)
