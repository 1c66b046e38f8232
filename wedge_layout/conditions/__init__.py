"""Conditional rules that adjust view scales and positions per part."""

from wedge_layout.conditions.engine import (
    Condition,
    ConditionRule,
    PositionOffset,
    RuleEngine,
    RuleSet,
    RuleUpdate,
    evaluate_condition,
    load_rule_set,
    parse_rule_set,
)

__all__ = [
    'Condition',
    'ConditionRule',
    'PositionOffset',
    'RuleEngine',
    'RuleSet',
    'RuleUpdate',
    'evaluate_condition',
    'load_rule_set',
    'parse_rule_set',
]
