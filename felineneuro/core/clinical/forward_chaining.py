"""
Forward-Chaining Diagnosis Engine

Pipeline:
  1. extract_facts()   Observation -> atomic fact tokens (one per field)
  2. RuleCompiler      intermediate rules + one inference rule per
                       diagnostic rule, compiled from its condition tree
  3. infer()           fixed-point iteration over working memory
  4. conclude()        highest-confidence diagnosis_* fact wins

Fact tokens:
  age_group = kitten     -> age_kitten
  onset_speed = sudden   -> onset_sudden
  mobility_status = ...  -> mobility_<value>
  seizures = ...         -> seizures_<value>
  head_tilt = True       -> head_tilt
  head_tilt = False      -> no_head_tilt

Inference rules are AND-only. Disjunctions in a condition tree (any-of,
one-of, not-equal on a categorical field) become a synthetic
`any_of(...)` fact plus one bridging rule per alternative. Bridging rules
are ordered after the intermediate rules and before the diagnostic rules.

A run can derive several diagnosis facts. That is intended: confidence
decides, and the earliest applied rule wins ties.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from felineneuro.config import ENGINE_FORWARD_CHAINING, ForwardChainingConfig
from felineneuro.utils import get_logger
from felineneuro.utils.exceptions import KnowledgeBaseError
from .base import (
    BOOLEAN_FIELDS,
    CATEGORICAL_FIELDS,
    DiagnosisResult,
    DiagnosticRule,
    Observation,
    UrgencyLevel,
    field_domain,
)
from .conditions import AllOf, Always, AnyOf, Clause, Condition, Operator
from .engine import DiagnosisEngine, ObservationInput
from .explanation import explain_forward_chaining, explain_undetermined
from .rule_table import RuleTable

logger = get_logger(__name__)

DIAGNOSIS_PREFIX = "diagnosis_"

_FACT_PREFIXES: Dict[str, str] = {
    "age_group": "age",
    "onset_speed": "onset",
    "mobility_status": "mobility",
    "seizures": "seizures",
}


@dataclass(frozen=True)
class InferenceRule:
    """conditions (all required) -> conclusions, with a confidence scalar."""
    id: str
    name: str
    conditions: Tuple[str, ...]
    conclusions: Tuple[str, ...]
    confidence: float
    source_rule: Optional[DiagnosticRule] = None


@dataclass(frozen=True)
class AppliedRule:
    rule: InferenceRule
    iteration: int
    new_facts: Tuple[str, ...] = ()


@dataclass(frozen=True)
class InferenceResult:
    initial_facts: FrozenSet[str]
    facts: Tuple[str, ...]               # final working memory, in derivation order
    applied: Tuple[AppliedRule, ...]
    iterations: int
    converged: bool

    @property
    def diagnosis_facts(self) -> List[str]:
        return [f for f in self.facts if f.startswith(DIAGNOSIS_PREFIX)]


# ── Intermediate clinical concepts ───────────────────────────────────────────
INTERMEDIATE_RULES: Tuple[InferenceRule, ...] = (
    InferenceRule("DETECT_TRAUMA_SIGNS", "Detect Trauma Signs",
                  ("recent_trauma",), ("has_trauma_history",), 0.9),
    InferenceRule("DETECT_SEVERE_NEURO", "Detect Severe Neurological Signs",
                  ("seizures_severe",), ("severe_neurological_dysfunction",), 0.95),
    InferenceRule("DETECT_MILD_NEURO", "Detect Mild Neurological Signs",
                  ("seizures_mild",), ("mild_neurological_dysfunction",), 0.8),
    InferenceRule("DETECT_PARALYSIS", "Detect Paralysis",
                  ("mobility_paralyzed",), ("has_paralysis", "motor_dysfunction", "mobility_abnormal"), 0.95),
    InferenceRule("DETECT_ATAXIA", "Detect Ataxia",
                  ("mobility_wobbly",), ("has_ataxia", "coordination_problems", "mobility_abnormal"), 0.9),
    InferenceRule("DETECT_PAIN", "Detect Pain Signs",
                  ("pain_signs",), ("experiencing_pain",), 0.85),
    InferenceRule("DETECT_VASCULAR_COMPROMISE", "Detect Vascular Compromise",
                  ("cold_limbs", "has_paralysis"), ("vascular_compromise", "circulation_problems"), 0.9),
    InferenceRule("DETECT_METABOLIC_SIGNS", "Detect Metabolic Signs",
                  ("neck_flexion",), ("metabolic_dysfunction", "thiamine_deficiency_signs"), 0.95),
    InferenceRule("SENIOR_RISK_FACTORS", "Senior Risk Factors",
                  ("age_senior",), ("increased_tumor_risk", "degenerative_risk"), 0.7),
    InferenceRule("KITTEN_RISK_FACTORS", "Kitten Risk Factors",
                  ("age_kitten",), ("metabolic_vulnerability", "developmental_risk", "age_young_or_adult"), 0.8),
    InferenceRule("ADULT_RISK_FACTORS", "Adult Risk Factors",
                  ("age_adult",), ("age_young_or_adult",), 0.8),
    InferenceRule("ACUTE_ONSET_PATTERN", "Acute Onset Pattern",
                  ("onset_sudden",), ("acute_condition",), 0.8),
    InferenceRule("CHRONIC_ONSET_PATTERN", "Chronic Onset Pattern",
                  ("onset_gradual",), ("chronic_condition",), 0.8),
)


def field_fact(name: str, value) -> str:
    """Fact token for `name == value`."""
    if name in CATEGORICAL_FIELDS:
        return f"{_FACT_PREFIXES[name]}_{value}"
    if name in BOOLEAN_FIELDS:
        return name if value else f"no_{name}"
    raise KeyError(name)


def extract_facts(observation: Observation) -> List[str]:
    """One fact per observation field, in field order."""
    facts = [field_fact(name, observation.get(name)) for name in CATEGORICAL_FIELDS]
    facts += [field_fact(name, observation.get(name)) for name in BOOLEAN_FIELDS]
    return facts


def rule_confidence(priority: int) -> float:
    """Piecewise-linear confidence, strictly decreasing with priority number."""
    if priority <= 5:
        value = 0.95 - (priority - 1) * 0.01
    elif priority <= 15:
        value = 0.90 - (priority - 6) * 0.01
    elif priority <= 25:
        value = 0.80 - (priority - 16) * 0.01
    else:
        value = 0.70 - (priority - 26) * 0.02
    return round(value, 2)


class RuleCompiler:
    """
    Compiles condition trees into AND-only inference rules.

    Each conjunct becomes a fact requirement. Each disjunction is named by
    a synthetic fact which bridging rules derive, one rule per alternative.
    """

    def __init__(self):
        self._bridges: Dict[str, List[InferenceRule]] = {}

    @property
    def bridging_rules(self) -> List[InferenceRule]:
        return [rule for rules in self._bridges.values() for rule in rules]

    def requirements(self, condition: Condition) -> Tuple[str, ...]:
        """Facts that must all be present for `condition` to hold."""
        if isinstance(condition, Always):
            return ()
        if isinstance(condition, AllOf):
            facts: List[str] = []
            for term in condition.terms:
                for fact in self.requirements(term):
                    if fact not in facts:
                        facts.append(fact)
            return tuple(facts)
        if isinstance(condition, AnyOf):
            return (self._disjunction([self.requirements(t) for t in condition.terms]),)
        if isinstance(condition, Clause):
            return self._clause(condition)
        raise KnowledgeBaseError(f"Cannot compile condition node {type(condition).__name__}")

    def _clause(self, clause: Clause) -> Tuple[str, ...]:
        name = clause.field
        if clause.op is Operator.EQ:
            return (field_fact(name, clause.value),)
        if clause.op is Operator.NE:
            if name in BOOLEAN_FIELDS:
                return (field_fact(name, not clause.value),)
            values = [v for v in field_domain(name) if v != clause.value]
        else:
            values = list(clause.value)

        if len(values) == 1:
            return (field_fact(name, values[0]),)
        return (self._disjunction([(field_fact(name, v),) for v in values]),)

    def _disjunction(self, alternatives: Sequence[Tuple[str, ...]]) -> str:
        fact = "any_of(" + ",".join("+".join(alt) for alt in alternatives) + ")"
        if fact not in self._bridges:
            self._bridges[fact] = [
                InferenceRule(
                    id=f"BRIDGE:{fact}:{i}",
                    name=f"{fact} <- {' + '.join(alt)}",
                    conditions=tuple(alt),
                    conclusions=(fact,),
                    confidence=1.0,
                )
                for i, alt in enumerate(alternatives, start=1)
            ]
        return fact

    def compile_rule(self, rule: DiagnosticRule) -> InferenceRule:
        return InferenceRule(
            id=rule.id,
            name=rule.name,
            conditions=self.requirements(rule.condition),
            conclusions=(f"{DIAGNOSIS_PREFIX}{rule.id.lower()}",),
            confidence=rule_confidence(rule.priority),
            source_rule=rule,
        )

    def compile_table(self, table: RuleTable) -> List[InferenceRule]:
        """Intermediate rules, then bridging rules, then diagnostic rules."""
        diagnostic = [self.compile_rule(rule) for rule in table]
        return list(INTERMEDIATE_RULES) + self.bridging_rules + diagnostic


@dataclass
class _WorkingMemory:
    facts: List[str] = field(default_factory=list)
    index: set = field(default_factory=set)

    def add(self, fact: str) -> bool:
        if fact in self.index:
            return False
        self.index.add(fact)
        self.facts.append(fact)
        return True

    def holds(self, conditions: Iterable[str]) -> bool:
        return all(c in self.index for c in conditions)


# Fallback when no diagnosis fact was derived
UNDETERMINED_RESULT = {
    "rule_id": "FC_UNDETERMINED",
    "diagnosis": "Undetermined Neurological Condition",
    "priority": 29,
    "urgency": UrgencyLevel.MODERATE,
    "confidence": 0.6,
    "description": (
        "The forward chaining inference could not determine a specific "
        "diagnosis based on the provided symptoms."
    ),
    "clinical_notes": [
        "Multiple neurological signs present but no specific pattern identified",
        "Further diagnostic testing recommended",
        "Consider consultation with veterinary neurologist",
    ],
    "next_steps": [
        "Comprehensive neurological examination",
        "Advanced diagnostic imaging (MRI/CT)",
        "Laboratory workup including blood chemistry",
        "Specialist consultation recommended",
    ],
}


class ForwardChainingEngine(DiagnosisEngine):
    """
    Data-driven inference over fact tokens.

    Rules are compiled once at construction and reused across calls.
    """

    name = ENGINE_FORWARD_CHAINING

    def __init__(
        self,
        table: Optional[RuleTable] = None,
        config: Optional[ForwardChainingConfig] = None,
        validator=None,
    ):
        super().__init__(table, validator)
        self.config = config or ForwardChainingConfig()
        self.rules: Tuple[InferenceRule, ...] = tuple(RuleCompiler().compile_table(self.table))
        logger.info(
            f"ForwardChainingEngine initialized ({len(self.rules)} inference rules, "
            f"max {self.config.max_iterations} iterations)"
        )

    def infer(self, initial_facts: Iterable[str]) -> InferenceResult:
        """
        Apply rules until a full scan adds nothing or the iteration cap is hit.

        Each scan sees facts added earlier in the same scan. A rule fires at
        most once per run, even when it adds no new facts.
        """
        memory = _WorkingMemory()
        for fact in initial_facts:
            memory.add(fact)
        initial = frozenset(memory.index)

        applied: List[AppliedRule] = []
        applied_ids = set()
        iteration = 0
        changed = True

        while changed and iteration < self.config.max_iterations:
            changed = False
            iteration += 1
            for rule in self.rules:
                if rule.id in applied_ids or not memory.holds(rule.conditions):
                    continue
                new_facts = tuple(c for c in rule.conclusions if memory.add(c))
                applied_ids.add(rule.id)
                applied.append(AppliedRule(rule=rule, iteration=iteration, new_facts=new_facts))
                if new_facts:
                    changed = True

        if changed:
            logger.warning(
                f"ForwardChainingEngine: iteration cap ({self.config.max_iterations}) reached "
                "before fixed point"
            )

        return InferenceResult(
            initial_facts=initial,
            facts=tuple(memory.facts),
            applied=tuple(applied),
            iterations=iteration,
            converged=not changed,
        )

    def conclude(self, observation: Observation, inference: InferenceResult) -> DiagnosisResult:
        """Pick the highest-confidence derived diagnosis (first applied wins ties)."""
        derived = set(inference.diagnosis_facts)
        best: Optional[InferenceRule] = None
        best_confidence = 0.0
        for applied in inference.applied:
            rule = applied.rule
            if rule.source_rule is None or not derived.intersection(rule.conclusions):
                continue
            if rule.confidence > best_confidence:
                best, best_confidence = rule, rule.confidence

        common = {
            "engine": self.name,
            "rules_evaluated": len(self.rules),
            "total_rules": len(self.table),
            "total_matches": len(derived),
            "derived_facts": list(inference.facts),
            "applied_rules": [a.rule.name for a in inference.applied],
            "iterations": inference.iterations,
            "inputs": observation.to_dict(),
        }

        if best is None:
            logger.info("ForwardChainingEngine: no diagnosis fact derived, returning undetermined")
            fallback = dict(UNDETERMINED_RESULT)
            return DiagnosisResult(
                explanation=explain_undetermined(inference),
                icon="fa-question",
                color="#6b7280",
                **fallback,
                **common,
            )

        rule = best.source_rule
        logger.info(
            f"ForwardChainingEngine: selected {rule.name}",
            extra={"engine": self.name, "rule_id": rule.id, "confidence": best.confidence,
                   "matches": len(derived), "iterations": inference.iterations},
        )
        return DiagnosisResult(
            rule_id=rule.id,
            diagnosis=rule.name,
            priority=rule.priority,
            urgency=rule.urgency,
            description=rule.description,
            clinical_notes=list(rule.clinical_notes),
            next_steps=list(rule.next_steps),
            explanation=explain_forward_chaining(rule, inference, best.confidence),
            confidence=best.confidence,
            icon=rule.icon,
            color=rule.color,
            **common,
        )

    def evaluate(self, observation: ObservationInput) -> DiagnosisResult:
        obs = self._coerce(observation)
        inference = self.infer(extract_facts(obs))
        return self._remember(self.conclude(obs, inference))

    def system_stats(self):
        stats = super().system_stats()
        stats.update({
            "inference_rules": len(self.rules),
            "intermediate_rules": len(INTERMEDIATE_RULES),
            "max_iterations": self.config.max_iterations,
        })
        return stats
