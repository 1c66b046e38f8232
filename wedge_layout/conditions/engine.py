"""
Conditional rule engine: parametric adjustments of view scales and positions.

A rule file lists conditions such as "if TL < 40 mm on a CKVD production
drawing, shrink the front views to 4x and move the side view". Rules are
applied in file order and each matched rule sees the changes made by the
earlier ones: position updates are deltas added to the current position.

Rule file format:
{
    "conditions": [
        {
            "name": "short_wedge",
            "description": "Shrink views for short wedges",
            "drawing_type": "Production",
            "wedge_type": "CKVD",
            "if": {"dimension": "TL", "operator": "<", "value": 40, "unit": "mm"},
            "update": {
                "view_scales": {"Front_view": 4.0},
                "view_positions": {"Side_view": {"dx": 10, "dy": 0}}
            }
        }
    ]
}

Property names are matched case-insensitively; view names are not.
"""

import json
import logging
import math
import numbers
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from wedge_layout.config import (
    COMPARISON_OPERATORS,
    EQUALITY_EPSILON,
    FRONT_SIDE_TOP_VIEWS,
    FRONT_VIEW,
    TITLE_BLOCK_SCALE_KEY,
)
from wedge_layout.errors import RuleFileError
from wedge_layout.model.drawing import DrawingState
from wedge_layout.model.part import DrawingType, WedgePart
from wedge_layout.model.quantity import Quantity
from wedge_layout.model.units import Unit, format_decimal, parse_unit_token

logger = logging.getLogger(__name__)

DEFAULT_RULE_UNIT = "mm"


# ---------------------------------------------------------------------------
# Rule model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Condition:
    dimension: str
    operator: str
    value: float
    unit: str = DEFAULT_RULE_UNIT


@dataclass(frozen=True)
class PositionOffset:
    dx: float = 0.0
    dy: float = 0.0


@dataclass
class RuleUpdate:
    """Absolute view scales and relative view position offsets."""
    view_scales: Dict[str, float] = field(default_factory=dict)
    view_positions: Dict[str, PositionOffset] = field(default_factory=dict)


@dataclass
class ConditionRule:
    name: str
    description: str
    drawing_type: str
    wedge_type: str
    condition: Condition
    update: RuleUpdate = field(default_factory=RuleUpdate)


@dataclass
class RuleSet:
    conditions: List[ConditionRule] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.conditions)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _lower_keys(obj: Any, where: str) -> Dict[str, Any]:
    if not isinstance(obj, dict):
        raise RuleFileError(f"{where}: expected an object, got {type(obj).__name__}")
    return {str(k).lower(): v for k, v in obj.items()}


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _require_str(data: Dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise RuleFileError(f"{where}: '{key}' must be a string")
    return value


def _optional_str(data: Dict[str, Any], key: str, where: str, default: str = "") -> str:
    value = data.get(key)
    if value is None:
        return default
    if not isinstance(value, str):
        raise RuleFileError(f"{where}: '{key}' must be a string")
    return value


def _number(value: Any, where: str) -> float:
    if not _is_number(value):
        raise RuleFileError(f"{where}: expected a number, got {value!r}")
    return float(value)


def _parse_condition(raw: Any, where: str) -> Condition:
    data = _lower_keys(raw, where)
    operator = _require_str(data, "operator", where)
    if operator not in COMPARISON_OPERATORS:
        raise RuleFileError(f"{where}: unsupported operator '{operator}'")
    if "value" not in data:
        raise RuleFileError(f"{where}: 'value' is required")
    return Condition(
        dimension=_require_str(data, "dimension", where),
        operator=operator,
        value=_number(data["value"], f"{where}.value"),
        unit=_optional_str(data, "unit", where, DEFAULT_RULE_UNIT),
    )


def _parse_update(raw: Any, where: str) -> RuleUpdate:
    if raw is None:
        return RuleUpdate()
    data = _lower_keys(raw, where)
    update = RuleUpdate()

    scales = data.get("view_scales")
    if scales is not None:
        if not isinstance(scales, dict):
            raise RuleFileError(f"{where}.view_scales: expected an object")
        for view, value in scales.items():
            update.view_scales[str(view)] = _number(value, f"{where}.view_scales.{view}")

    positions = data.get("view_positions")
    if positions is not None:
        if not isinstance(positions, dict):
            raise RuleFileError(f"{where}.view_positions: expected an object")
        for view, offset in positions.items():
            offset_where = f"{where}.view_positions.{view}"
            offset_data = _lower_keys(offset, offset_where)
            update.view_positions[str(view)] = PositionOffset(
                dx=_number(offset_data.get("dx", 0.0), f"{offset_where}.dx"),
                dy=_number(offset_data.get("dy", 0.0), f"{offset_where}.dy"),
            )
    return update


def _parse_rule(raw: Any, index: int) -> ConditionRule:
    where = f"conditions[{index}]"
    data = _lower_keys(raw, where)
    if "if" not in data:
        raise RuleFileError(f"{where}: 'if' block is required")
    return ConditionRule(
        name=_optional_str(data, "name", where, f"rule_{index}"),
        description=_optional_str(data, "description", where),
        drawing_type=_require_str(data, "drawing_type", where),
        wedge_type=_require_str(data, "wedge_type", where),
        condition=_parse_condition(data["if"], f"{where}.if"),
        update=_parse_update(data.get("update"), f"{where}.update"),
    )


def parse_rule_set(data: Any) -> RuleSet:
    """Validate an in-memory rule document.

    Raises:
        RuleFileError: the document does not match the rule schema.
    """
    root = _lower_keys(data, "rule file")
    conditions = root.get("conditions")
    if not isinstance(conditions, list):
        raise RuleFileError("rule file: 'conditions' must be a list")
    return RuleSet(conditions=[_parse_rule(raw, i) for i, raw in enumerate(conditions)])


def load_rule_set(path: Union[str, Path]) -> RuleSet:
    """Load and validate a rule file.

    Raises:
        FileNotFoundError: the file does not exist.
        RuleFileError: the file is unreadable, not JSON, or not a valid rule set.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise RuleFileError(f"Cannot read rules file {path}: {e}") from e

    rule_set = parse_rule_set(data)
    logger.info("Loaded %d conditional rules from %s", len(rule_set), path)
    return rule_set


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def evaluate_condition(actual: float, operator: str, expected: float) -> bool:
    """Compare ``actual`` against ``expected``; NaN never matches."""
    if math.isnan(actual) or math.isnan(expected):
        return False
    if operator == "<":
        return actual < expected
    if operator == ">":
        return actual > expected
    if operator == "<=":
        return actual <= expected
    if operator == ">=":
        return actual >= expected
    if operator == "==":
        return abs(actual - expected) < EQUALITY_EPSILON
    return False


def _same_tag(a: Optional[str], b: Optional[str]) -> bool:
    if a is None or b is None:
        return False
    return a.strip().lower() == b.strip().lower()


class RuleEngine:
    """Applies a RuleSet to drawings. Read-only during apply, so one engine
    can serve many parts concurrently."""

    def __init__(self, rule_set: RuleSet):
        self.rule_set = rule_set

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'RuleEngine':
        return cls(load_rule_set(path))

    def matches(self, rule: ConditionRule, part: WedgePart, drawing_type: str) -> bool:
        """True if ``rule`` fires for this part and drawing type."""
        if not _same_tag(rule.drawing_type, drawing_type):
            return False
        wedge_type = part.wedge_type.value if part.wedge_type else None
        if not _same_tag(rule.wedge_type, wedge_type):
            return False

        quantity = part.dimensions.try_get(rule.condition.dimension)
        if quantity is None:
            logger.debug("Rule '%s': dimension '%s' absent, skipped",
                         rule.name, rule.condition.dimension)
            return False

        actual = quantity.value(parse_unit_token(rule.condition.unit))
        return evaluate_condition(actual, rule.condition.operator, rule.condition.value)

    def apply(
        self,
        part: WedgePart,
        drawing: DrawingState,
        drawing_type: Optional[Union[DrawingType, str]] = None,
    ) -> List[str]:
        """Apply every matching rule, in order, to ``drawing``.

        Args:
            part: part being drawn.
            drawing: sheet state, mutated in place.
            drawing_type: tag to match rules against (default: drawing.drawing_type).

        Returns:
            Names of the rules that matched, in application order.
        """
        if drawing_type is None:
            drawing_type = drawing.drawing_type
        tag = drawing_type.value if isinstance(drawing_type, DrawingType) else str(drawing_type)

        matched = []
        for rule in self.rule_set.conditions:
            if not self.matches(rule, part, tag):
                continue
            self._apply_update(rule.update, drawing)
            matched.append(rule.name)
            logger.info("Applied rule '%s'", rule.name,
                        extra={"drawing_number": part.drawing_number})
        return matched

    @staticmethod
    def _apply_update(update: RuleUpdate, drawing: DrawingState) -> None:
        for view, scale in update.view_scales.items():
            drawing.view_scales.set(view, Quantity(scale))

        if any(view in FRONT_SIDE_TOP_VIEWS for view in update.view_scales):
            front = drawing.view_scales.try_get(FRONT_VIEW)
            if front is not None:
                drawing.title_block_info[TITLE_BLOCK_SCALE_KEY] = format_decimal(
                    front.value(Unit.MILLIMETER))

        for view, offset in update.view_positions.items():
            current = drawing.view_positions.try_get(view)
            values = ([] if current is None
                      else [float(v) for v in current.vector_values(Unit.MILLIMETER)[:2]])
            # missing components count as zero
            x, y = values + [0.0] * (2 - len(values))
            drawing.view_positions.set(view, [x + offset.dx, y + offset.dy])
