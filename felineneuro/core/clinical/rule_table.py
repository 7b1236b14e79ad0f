"""
Rule Table

Immutable, priority-sorted view over a list of DiagnosticRules. Both
engines receive a RuleTable at construction time, so any knowledge base
with the DiagnosticRule shape can be plugged in.

Usage:
    from felineneuro.core.clinical import RuleTable

    table = RuleTable.default()
    table.max_priority          # 30
    table.get("HYPOGLYCEMIA")
"""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional, Tuple

from felineneuro.utils.exceptions import KnowledgeBaseError
from .base import DiagnosticRule

logger = logging.getLogger(__name__)


class RuleTable:
    """
    Ordered collection of diagnostic rules.

    Load-time invariants: at least one rule, unique ids and exactly one
    always-true catch-all rule. Violations raise KnowledgeBaseError.
    """

    def __init__(self, rules: Iterable[DiagnosticRule]):
        # sorted() is stable: equal priorities keep their declaration order
        ordered = tuple(sorted(rules, key=lambda r: r.priority))
        self._validate(ordered)
        self._rules: Tuple[DiagnosticRule, ...] = ordered
        self._by_id: Dict[str, DiagnosticRule] = {r.id: r for r in ordered}
        logger.debug(
            f"RuleTable: loaded {len(ordered)} rules "
            f"(priorities {ordered[0].priority}..{ordered[-1].priority})"
        )

    @staticmethod
    def _validate(rules: Tuple[DiagnosticRule, ...]) -> None:
        if not rules:
            raise KnowledgeBaseError("Rule table is empty")

        seen = set()
        for rule in rules:
            if rule.id in seen:
                raise KnowledgeBaseError(f"Duplicate rule id '{rule.id}'", rule_id=rule.id)
            seen.add(rule.id)

        catch_alls = [r.id for r in rules if r.is_catch_all]
        if len(catch_alls) != 1:
            raise KnowledgeBaseError(
                f"Rule table must contain exactly one catch-all rule, found {len(catch_alls)}",
                details={"catch_all_rules": catch_alls},
            )

    @classmethod
    def default(cls) -> "RuleTable":
        """The shipped feline neurology knowledge base."""
        from .rules_neuro import DIAGNOSTIC_RULES
        return cls(DIAGNOSTIC_RULES)

    # ── Accessors ───────────────────────────────────────────────────────────

    @property
    def rules(self) -> Tuple[DiagnosticRule, ...]:
        return self._rules

    @property
    def max_priority(self) -> int:
        return max(r.priority for r in self._rules)

    @property
    def catch_all(self) -> DiagnosticRule:
        return next(r for r in self._rules if r.is_catch_all)

    def get(self, rule_id: str) -> Optional[DiagnosticRule]:
        return self._by_id.get(rule_id)

    def __iter__(self) -> Iterator[DiagnosticRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id
