"""
Diagnosis Engines - Weighted Waterfall

Both engines implement DiagnosisEngine.evaluate(observation) and receive
the RuleTable at construction, so either can be swapped without touching
the knowledge base.

Usage:
    from felineneuro.core.clinical import RuleTable, WaterfallEngine

    engine = WaterfallEngine(RuleTable.default())
    result = engine.evaluate({"age_group": "kitten", ...})
    print(result.diagnosis, result.urgency, result.winning_score.total)

Despite the name, the waterfall evaluates every rule. The winner is the
highest weighted score, not the first match; ties keep table order.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Union

from felineneuro.config import ENGINE_WATERFALL, VERSION, WaterfallConfig
from felineneuro.utils.exceptions import InternalConsistencyError, RulePredicateError
from .base import DiagnosisResult, Match, Observation
from .conditions import describe
from .conditions import evaluate as evaluate_condition
from .explanation import explain_waterfall
from .rule_table import RuleTable
from .scoring import WeightedScorer

logger = logging.getLogger(__name__)

ObservationInput = Union[Observation, Mapping[str, Any]]


class DiagnosisEngine(ABC):
    """Capability interface shared by the two selection strategies."""

    name: str = "engine"

    def __init__(self, table: Optional[RuleTable] = None, validator=None):
        self.table = table or RuleTable.default()
        self._validator = validator
        self._last_diagnosis: Optional[DiagnosisResult] = None
        self._evaluations = 0

    @abstractmethod
    def evaluate(self, observation: ObservationInput) -> DiagnosisResult:
        """Select exactly one diagnosis for the observation."""

    def _coerce(self, observation: ObservationInput) -> Observation:
        """
        Run every input through the validator; raises ValidationError.

        Observation instances are re-checked as well, since the dataclass
        itself accepts any values (None included).
        """
        if self._validator is None:
            from felineneuro.core.validation import InputValidator
            self._validator = InputValidator()
        if isinstance(observation, Observation):
            observation = observation.to_dict()
        return self._validator.parse(observation)

    def _remember(self, result: DiagnosisResult) -> DiagnosisResult:
        self._last_diagnosis = result
        self._evaluations += 1
        return result

    @property
    def last_diagnosis(self) -> Optional[DiagnosisResult]:
        return self._last_diagnosis

    def reset(self) -> None:
        """Forget the last diagnosis."""
        self._last_diagnosis = None
        logger.debug(f"{type(self).__name__}: reset")

    def rule_explanations(self) -> List[Dict[str, Any]]:
        """Every diagnostic rule with its IF-text, in priority order."""
        return [
            {
                "id": rule.id,
                "name": rule.name,
                "priority": rule.priority,
                "urgency": rule.urgency.value,
                "description": rule.description,
                "condition": describe(rule.condition),
            }
            for rule in self.table
        ]

    def system_stats(self) -> Dict[str, Any]:
        last = self._last_diagnosis
        return {
            "engine": self.name,
            "version": VERSION,
            "total_rules": len(self.table),
            "rule_priorities": [rule.priority for rule in self.table],
            "evaluations": self._evaluations,
            "last_diagnosis": {
                "rule_id": last.rule_id,
                "diagnosis": last.diagnosis,
                "urgency": last.urgency.value,
                "timestamp": last.timestamp.isoformat(),
            } if last else None,
        }


class WaterfallEngine(DiagnosisEngine):
    """
    Priority waterfall with weighted-score selection.

    Stateless per evaluation apart from `last_diagnosis`; scores that
    depend only on the rule (complexity) are computed once at construction.
    """

    name = ENGINE_WATERFALL

    def __init__(
        self,
        table: Optional[RuleTable] = None,
        config: Optional[WaterfallConfig] = None,
        validator=None,
    ):
        super().__init__(table, validator)
        self.scorer = WeightedScorer(self.table, config)
        logger.info(f"WaterfallEngine initialized ({len(self.table)} rules)")

    def match_all(self, observation: Observation) -> List[Match]:
        """
        Evaluate every rule and return the matches sorted by score, highest first.

        A condition that raises is logged and treated as non-matching.
        """
        matches: List[Match] = []
        for position, rule in enumerate(self.table):
            try:
                matched = evaluate_condition(rule.condition, observation)
            except Exception as exc:
                err = RulePredicateError(f"Condition of {rule.id} raised: {exc}", rule_id=rule.id)
                logger.error(f"WaterfallEngine: {err.message}", exc_info=True)
                continue

            if matched:
                matches.append(Match(rule=rule, position=position, score=self.scorer.score(rule)))
                logger.debug(f"WaterfallEngine: match P{rule.priority} {rule.id}")

        # sorted() is stable, so equal totals keep priority order
        return sorted(matches, key=lambda m: m.score.total, reverse=True)

    def evaluate(self, observation: ObservationInput) -> DiagnosisResult:
        obs = self._coerce(observation)
        matches = self.match_all(obs)

        if not matches:
            raise InternalConsistencyError(
                "No diagnostic rule matched; the catch-all rule should always match",
                details={"inputs": obs.to_dict(), "total_rules": len(self.table)},
            )

        winner = matches[0]
        rule = winner.rule
        logger.info(
            f"WaterfallEngine: selected {rule.name}",
            extra={"engine": self.name, "rule_id": rule.id,
                   "score": winner.score.total, "matches": len(matches)},
        )

        return self._remember(DiagnosisResult(
            rule_id=rule.id,
            diagnosis=rule.name,
            priority=rule.priority,
            urgency=rule.urgency,
            description=rule.description,
            clinical_notes=list(rule.clinical_notes),
            next_steps=list(rule.next_steps),
            explanation=explain_waterfall(
                winner, obs, matches,
                total_rules=len(self.table),
                max_priority=self.table.max_priority,
            ),
            engine=self.name,
            rules_evaluated=len(self.table),
            total_rules=len(self.table),
            total_matches=len(matches),
            winning_score=winner.score,
            alternatives=[m.to_alternative() for m in matches[1:]],
            inputs=obs.to_dict(),
            icon=rule.icon,
            color=rule.color,
        ))
