"""
Rule table composition: conditional overrides and injected rules.

Both operations only replace the targeted table slot; they never evaluate a
rule and never touch other entries.
"""

import logging
from typing import Union

from wedge_layout.layout.rules import (
    LayoutRule,
    LayoutRuleTable,
    Predicate,
    RuleEntry,
    RuleFunction,
    as_rule,
)

logger = logging.getLogger(__name__)


def override_if(
    table: LayoutRuleTable,
    key: str,
    predicate: Predicate,
    new_rule: Union[LayoutRule, RuleFunction],
) -> bool:
    """Use ``new_rule`` for ``key`` whenever ``predicate(part, drawing)`` holds.

    The newest override is checked first; the entry keeps its anchor view.

    Args:
        table: rule table to modify in place.
        key: dimension code.
        predicate: selects the new rule at evaluation time.
        new_rule: LayoutRule or plain function(part, drawing) -> point.

    Returns:
        False (and no change) when ``key`` is not in the table.
    """
    entry = table.get(key)
    if entry is None:
        logger.debug("override_if: no rule for '%s', nothing to override", key)
        return False

    rule = as_rule(new_rule, entry.view)
    table[key] = RuleEntry(
        view=entry.view,
        base=entry.base,
        overrides=((predicate, rule),) + entry.overrides,
    )
    return True


def inject(
    table: LayoutRuleTable,
    key: str,
    view: str,
    rule: Union[LayoutRule, RuleFunction],
) -> None:
    """Install a fresh entry for ``key`` anchored to ``view``, replacing any existing one."""
    if key in table:
        logger.debug("inject: replacing existing rule for '%s'", key)
    table[key] = RuleEntry(view=view, base=as_rule(rule, view))
