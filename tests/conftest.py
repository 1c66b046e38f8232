"""
Pytest configuration and fixtures for the wedge layout engine.

Provides:
- A reference CKVD part (dimensions in mm / degrees)
- A hand-built drawing state with round anchor positions
- A drawing state seeded from the default configuration
- A rule-file writer
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest

from wedge_layout.config import (
    BREAKLINE_GAP,
    DETAIL_VIEW,
    FRONT_VIEW,
    LOWER_PART_LENGTH,
    SECTION_VIEW,
    SIDE_VIEW,
    SYMMETRY_TOLERANCE_KEY,
    TOP_VIEW,
    UPPER_PART_LENGTH,
    breakline_key,
)
from wedge_layout.layout.seed import seed_drawing_state
from wedge_layout.logging_config import PACKAGE_LOGGER
from wedge_layout.model.drawing import DrawingState
from wedge_layout.model.parameters import ParameterMap
from wedge_layout.model.part import PART_DIMENSIONS, DrawingType, WedgePart, WedgeType
from wedge_layout.model.quantity import Quantity
from wedge_layout.project_config import ProjectConfig


# Reference CKVD wedge (mm / degrees)
REFERENCE_DIMENSIONS: Dict[str, float] = {
    "TL": 40.0,
    "TD": 20.0,
    "TDF": 16.0,
    "FL": 10.0,
    "W": 2.0,
    "GD": 1.5,
    "B": 1.0,
    "E": 3.0,
    "GR": 0.5,
    "ISA": 30.0,
    "GA": 90.0,
    "FA": 5.0,
    "BA": 10.0,
    SYMMETRY_TOLERANCE_KEY: 0.04,
}

DRAWN_ON = date(2024, 3, 5)


# ============================================================================
# Part Fixtures
# ============================================================================

def make_part(dimensions: Dict[str, Any], wedge_type: WedgeType = WedgeType.CKVD,
              drawing_number: str = "W-1042") -> WedgePart:
    """Build a part from plain numbers (or ready Quantities)."""
    return WedgePart(
        dimensions=ParameterMap(PART_DIMENSIONS, dimensions),
        wedge_type=wedge_type,
        metadata={"drawing_number": drawing_number, "wedge_title": "CKVD 30 WEDGE"},
    )


@pytest.fixture
def part() -> WedgePart:
    """Reference CKVD part without a flat offset (FX)."""
    return make_part(dict(REFERENCE_DIMENSIONS))


@pytest.fixture
def part_with_fx() -> WedgePart:
    """Reference part with FX = 3 mm."""
    return make_part(dict(REFERENCE_DIMENSIONS, FX=3.0))


# ============================================================================
# Drawing Fixtures
# ============================================================================

@pytest.fixture
def drawing() -> DrawingState:
    """Hand-built production drawing.

    Front (100, 50) x2, Side (170, 50) x2, Top (170, -60) x2,
    Detail (250, 190) x4, Section (100, 50) x2; breakline gap 3, lower 40.
    """
    state = DrawingState(drawing_type=DrawingType.PRODUCTION)
    for view, position, scale in (
        (FRONT_VIEW, [100.0, 50.0], 2.0),
        (SIDE_VIEW, [170.0, 50.0], 2.0),
        (TOP_VIEW, [170.0, -60.0], 2.0),
        (DETAIL_VIEW, [250.0, 190.0], 4.0),
        (SECTION_VIEW, [100.0, 50.0], 2.0),
    ):
        state.view_positions.set(view, position)
        state.view_scales.set(view, Quantity(scale))

    for view in (DETAIL_VIEW, SECTION_VIEW):
        state.breakline_data.set(breakline_key(view, BREAKLINE_GAP), 3.0)
        state.breakline_data.set(breakline_key(view, LOWER_PART_LENGTH), 40.0)
        state.breakline_data.set(breakline_key(view, UPPER_PART_LENGTH), 0.0)
    return state


@pytest.fixture
def overlay_drawing() -> DrawingState:
    """Empty overlay drawing (overlay rules read nothing from it)."""
    return DrawingState(drawing_type=DrawingType.OVERLAY)


@pytest.fixture
def seeded_drawing(part: WedgePart) -> DrawingState:
    """Production drawing seeded from the default configuration."""
    return seed_drawing_state(part, ProjectConfig(), DrawingType.PRODUCTION, drawn_on=DRAWN_ON)


# ============================================================================
# Rule File Fixtures
# ============================================================================

def condition(name: str, dimension: str, operator: str, value: float,
              update: Dict[str, Any], unit: str = "mm",
              drawing_type: str = "Production", wedge_type: str = "CKVD") -> Dict[str, Any]:
    """One entry of a rule file's "conditions" list."""
    return {
        "name": name,
        "drawing_type": drawing_type,
        "wedge_type": wedge_type,
        "if": {"dimension": dimension, "operator": operator, "value": value, "unit": unit},
        "update": update,
    }


@pytest.fixture
def write_rules(tmp_path: Path) -> Callable[[List[Dict[str, Any]]], Path]:
    """Write a rule file holding the given conditions; returns its path."""
    def _write(conditions: List[Dict[str, Any]], name: str = "rules.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps({"conditions": conditions}, indent=2), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def make_condition() -> Callable[..., Dict[str, Any]]:
    """Factory for rule file condition entries (see condition())."""
    return condition


@pytest.fixture
def reference_dimensions() -> Dict[str, float]:
    """Fresh copy of the reference dimension table."""
    return dict(REFERENCE_DIMENSIONS)


@pytest.fixture
def part_factory() -> Callable[..., WedgePart]:
    """Factory for parts built from plain numbers (see make_part())."""
    return make_part


# ============================================================================
# Logging Isolation
# ============================================================================

@pytest.fixture(autouse=True)
def restore_package_logger():
    """Undo setup_logging() changes so caplog keeps seeing package records."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (logger.level, logger.propagate, list(logger.handlers), list(logger.filters))
    yield
    logger.setLevel(saved[0])
    logger.propagate = saved[1]
    logger.handlers[:] = saved[2]
    logger.filters[:] = saved[3]
