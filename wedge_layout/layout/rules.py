"""
Layout rules: strategy objects that compute where an annotation goes.

Implements the Strategy pattern: every dimension code has its own rule class
whose evaluate() maps (part, drawing) to a sheet point. Rules are grouped in
a table keyed by dimension code.

Types:
  - LayoutRule     abstract rule anchored to a view
  - CallableRule   adapter for a plain function(part, drawing) -> point
  - RuleEntry      one table slot: base rule + ordered override chain
  - LayoutRuleTable  Dict[str, RuleEntry], insertion order = evaluation order

Factory:
  - get_rules()    build a fresh table for a drawing type
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from wedge_layout.model.drawing import DrawingState
from wedge_layout.model.part import DrawingType, WedgePart
from wedge_layout.model.units import Unit

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
Predicate = Callable[[WedgePart, DrawingState], bool]
RuleFunction = Callable[[WedgePart, DrawingState], Any]


# ---------------------------------------------------------------------------
# Rule interface
# ---------------------------------------------------------------------------

class LayoutRule(ABC):
    """Abstract placement rule.

    Subclasses set ``view`` (the anchor view) and implement evaluate().
    Required inputs are read with the throwing accessors, so a missing
    dimension or view raises MissingParameterError.
    """

    view: str = ""

    @abstractmethod
    def evaluate(self, part: WedgePart, drawing: DrawingState) -> Point:
        """Compute the annotation position in sheet millimeters."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(view={self.view!r})"


class CallableRule(LayoutRule):
    """Wrap a plain ``function(part, drawing) -> point`` as a LayoutRule."""

    def __init__(self, func: RuleFunction, view: str = ""):
        self.func = func
        self.view = view

    def evaluate(self, part: WedgePart, drawing: DrawingState) -> Any:
        return self.func(part, drawing)

    def __repr__(self) -> str:
        name = getattr(self.func, '__name__', repr(self.func))
        return f"CallableRule({name}, view={self.view!r})"


def as_rule(rule: Union[LayoutRule, RuleFunction], view: str = "") -> LayoutRule:
    if isinstance(rule, LayoutRule):
        return rule
    if callable(rule):
        return CallableRule(rule, view)
    raise TypeError(f"Expected LayoutRule or callable, got {type(rule).__name__}")


@dataclass(frozen=True)
class RuleEntry:
    """One slot of the rule table.

    Overrides are ``(predicate, rule)`` pairs checked in order; the first
    predicate that holds selects its rule, otherwise ``base`` is used.

    Attributes:
        view: anchor view of the entry.
        base: rule used when no override applies.
        overrides: ordered override chain.
    """
    view: str
    base: LayoutRule
    overrides: Tuple[Tuple[Predicate, LayoutRule], ...] = ()

    def select(self, part: WedgePart, drawing: DrawingState) -> LayoutRule:
        for predicate, rule in self.overrides:
            if predicate(part, drawing):
                return rule
        return self.base

    def evaluate(self, part: WedgePart, drawing: DrawingState) -> Any:
        return self.select(part, drawing).evaluate(part, drawing)


LayoutRuleTable = Dict[str, RuleEntry]


def make_table(rules: Sequence[Tuple[str, LayoutRule]]) -> LayoutRuleTable:
    """Build a table from ``(code, rule)`` pairs, keeping their order."""
    return {code: RuleEntry(view=rule.view, base=rule) for code, rule in rules}


# ---------------------------------------------------------------------------
# Shared readers
# ---------------------------------------------------------------------------

def view_position(drawing: DrawingState, view: str) -> Point:
    values = drawing.view_positions.get(view).vector_values(Unit.MILLIMETER)
    return float(values[0]), float(values[1])


def view_scale(drawing: DrawingState, view: str) -> float:
    return drawing.view_scales.get(view).value(Unit.MILLIMETER)


def breakline(drawing: DrawingState, key: str) -> float:
    return drawing.breakline_data.get(key).value(Unit.MILLIMETER)


def dim(part: WedgePart, key: str, unit: Unit = Unit.MILLIMETER) -> float:
    return part.dimensions.get(key).value(unit)


def soft_dim(part: WedgePart, key: str, unit: Unit = Unit.MILLIMETER) -> float:
    """Optional dimension: NaN when absent."""
    q = part.dimensions.try_get(key)
    return q.value(unit) if q is not None else float('nan')


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def get_rules(drawing_type: Optional[DrawingType]) -> LayoutRuleTable:
    """Build a fresh rule table for ``drawing_type``.

    Production and Overlay have their own tables; any other value yields an
    empty table. A new table is returned on every call, so callers may
    modify it freely.
    """
    from wedge_layout.layout.overlay import build_overlay_rules
    from wedge_layout.layout.production import build_production_rules

    if drawing_type is DrawingType.PRODUCTION:
        return build_production_rules()
    if drawing_type is DrawingType.OVERLAY:
        return build_overlay_rules()
    logger.debug("No layout rules for drawing type %r", drawing_type)
    return {}
