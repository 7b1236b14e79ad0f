"""
Weighted Match Scoring

  total = priority + complexity + specificity + severity

  priority     max(0, (max_priority + 1) - rule.priority) * priority_weight
  complexity   complexity_weight * max(min_fields, |fields the condition reads|)
  specificity  fixed bonus for pathognomonic patterns, else 0
  severity     urgency-based boost

Complexity is a structural property of the condition tree, so it is
computed once per rule when the scorer is built.
"""
from __future__ import annotations

from typing import Dict, Optional

from felineneuro.config import WaterfallConfig
from felineneuro.utils.exceptions import KnowledgeBaseError
from .base import DiagnosticRule, ScoreBreakdown
from .conditions import referenced_fields
from .rule_table import RuleTable


class WeightedScorer:

    def __init__(self, table: RuleTable, config: Optional[WaterfallConfig] = None):
        self.config = config or WaterfallConfig()
        self.max_priority = table.max_priority
        self._field_counts: Dict[str, int] = {
            rule.id: max(self.config.min_referenced_fields, len(referenced_fields(rule.condition)))
            for rule in table
        }

    def field_count(self, rule: DiagnosticRule) -> int:
        try:
            return self._field_counts[rule.id]
        except KeyError:
            raise KnowledgeBaseError(
                f"Rule '{rule.id}' is not part of the scored rule table", rule_id=rule.id
            ) from None

    def score(self, rule: DiagnosticRule) -> ScoreBreakdown:
        cfg = self.config
        reasons = []

        priority = max(0, (self.max_priority + 1) - rule.priority) * cfg.priority_weight
        reasons.append(f"Priority score: {priority} (priority {rule.priority})")

        fields = self.field_count(rule)
        complexity = fields * cfg.complexity_weight
        reasons.append(f"Complexity: {complexity} ({fields} conditions)")

        specificity = 0
        if rule.id in cfg.specificity_bonuses:
            specificity, reason = cfg.specificity_bonuses[rule.id]
            reasons.append(f"Specificity bonus: {specificity} - {reason}")

        severity = cfg.severity_boosts.get(rule.urgency.value, 0)
        if severity:
            reasons.append(f"Severity boost: {severity} ({rule.urgency.value})")

        return ScoreBreakdown(
            priority=priority,
            complexity=complexity,
            specificity=specificity,
            severity=severity,
            reasons=tuple(reasons),
        )
