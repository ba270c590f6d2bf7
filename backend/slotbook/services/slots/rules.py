# backend/slotbook/services/slots/rules.py
"""
Rule resolution: which availability rules apply on a given date.

Priority inside one scope:
  1. Rules pinned to the date (specific_date == date) — replace everything
  2. Recurring rules for the weekday (specific_date is None)

Across scopes [event, user, organization] each scope is resolved on its
own and the results are unioned in precedence order.
"""

from collections import defaultdict
from datetime import date

from .records import SCOPE_PRECEDENCE, AvailabilityRule, Scope, Weekday


def resolve_rules(rules: list[AvailabilityRule], target_date: date) -> list[AvailabilityRule]:
    """
    Select the rules that apply on target_date.

    Date-specific rules fully override recurring ones; nothing is merged.
    Empty list = closed that day.
    """
    active = [r for r in rules if r.is_active]

    specific = [r for r in active if r.specific_date == target_date]
    if specific:
        return specific

    weekday = Weekday.of(target_date)
    return [r for r in active if r.specific_date is None and r.day_of_week == weekday]


def resolve_scoped_rules(
    rules: list[AvailabilityRule],
    target_date: date,
) -> list[AvailabilityRule]:
    """Resolve each scope independently, then union in precedence order."""
    by_scope: dict[Scope, list[AvailabilityRule]] = defaultdict(list)
    for rule in rules:
        by_scope[rule.scope].append(rule)

    resolved: list[AvailabilityRule] = []
    for scope in SCOPE_PRECEDENCE:
        resolved.extend(resolve_rules(by_scope.get(scope, []), target_date))
    return resolved


class RuleIndex:
    """
    Per-query index of rules for O(1) per-day resolution.

    Same semantics as resolve_scoped_rules, without rescanning the rule
    list for every day of a month.
    """

    def __init__(self, rules: list[AvailabilityRule]):
        self._by_date: dict[Scope, dict[date, list[AvailabilityRule]]] = defaultdict(
            lambda: defaultdict(list)
        )
        self._by_weekday: dict[Scope, dict[Weekday, list[AvailabilityRule]]] = defaultdict(
            lambda: defaultdict(list)
        )
        self.size = 0

        for rule in rules:
            if not rule.is_active:
                continue
            self.size += 1
            if rule.specific_date is not None:
                self._by_date[rule.scope][rule.specific_date].append(rule)
            else:
                self._by_weekday[rule.scope][rule.day_of_week].append(rule)

    def rules_for(self, target_date: date) -> list[AvailabilityRule]:
        weekday = Weekday.of(target_date)
        resolved: list[AvailabilityRule] = []

        for scope in SCOPE_PRECEDENCE:
            specific = self._by_date[scope].get(target_date)
            if specific:
                resolved.extend(specific)
            else:
                resolved.extend(self._by_weekday[scope].get(weekday, []))

        return resolved
