"""
Unit Tests for the Forward-Chaining Engine.

Tests fact extraction, rule compilation, fixed-point inference and the
confidence-based conclusion step.
"""
from dataclasses import replace

import pytest

from felineneuro.config import ForwardChainingConfig
from felineneuro.core.clinical import ForwardChainingEngine, InferenceResult, UrgencyLevel
from felineneuro.core.clinical.forward_chaining import (
    INTERMEDIATE_RULES,
    RuleCompiler,
    extract_facts,
    field_fact,
    rule_confidence,
)
from felineneuro.utils import ValidationError


class TestFacts:

    def test_field_fact_tokens(self):
        assert field_fact("age_group", "kitten") == "age_kitten"
        assert field_fact("onset_speed", "sudden") == "onset_sudden"
        assert field_fact("mobility_status", "paralyzed") == "mobility_paralyzed"
        assert field_fact("seizures", "none") == "seizures_none"
        assert field_fact("head_tilt", True) == "head_tilt"
        assert field_fact("head_tilt", False) == "no_head_tilt"

    def test_extract_one_fact_per_field(self, make_observation):
        facts = extract_facts(make_observation(recent_trauma=True))
        assert facts == [
            "age_adult", "onset_gradual", "mobility_normal", "seizures_none",
            "no_eye_signs", "no_pain_signs", "no_head_tilt", "recent_trauma",
            "no_cold_limbs", "no_neck_flexion", "no_ear_issues",
        ]


class TestConfidence:

    @pytest.mark.parametrize("priority,expected", [
        (1, 0.95), (5, 0.91), (6, 0.90), (15, 0.81),
        (16, 0.80), (25, 0.71), (26, 0.70), (30, 0.62),
    ])
    def test_piecewise_values(self, priority, expected):
        assert rule_confidence(priority) == expected

    def test_strictly_decreasing(self):
        values = [rule_confidence(p) for p in range(1, 31)]
        assert all(a > b for a, b in zip(values, values[1:]))


class TestCompilation:

    def test_not_equal_on_category_becomes_bridged_fact(self, forward_engine):
        saddle = next(r for r in forward_engine.rules if r.id == "SADDLE_THROMBUS")
        fact = "any_of(mobility_wobbly,mobility_paralyzed)"
        assert saddle.conditions == (fact, "pain_signs", "cold_limbs")
        assert saddle.conclusions == ("diagnosis_saddle_thrombus",)

        bridges = [r for r in forward_engine.rules if r.conclusions == (fact,)]
        assert [b.conditions for b in bridges] == [("mobility_wobbly",), ("mobility_paralyzed",)]
        assert all(b.confidence == 1.0 for b in bridges)
        assert bridges[0].id == f"BRIDGE:{fact}:1"

    def test_false_boolean_requirement(self, forward_engine):
        botulism = next(r for r in forward_engine.rules if r.id == "BOTULISM_TICK_PARALYSIS")
        assert botulism.conditions == (
            "mobility_paralyzed", "no_pain_signs", "onset_sudden", "seizures_none",
        )
        assert botulism.confidence == 0.85

    def test_shared_disjunction_compiled_once(self, rule_table):
        compiler = RuleCompiler()
        compiler.compile_table(rule_table)
        ids = [r.id for r in compiler.bridging_rules]
        assert len(ids) == len(set(ids))

    def test_rule_ordering(self, forward_engine):
        rules = forward_engine.rules
        n = len(INTERMEDIATE_RULES)
        assert rules[:n] == INTERMEDIATE_RULES

        kinds = ["bridge" if r.id.startswith("BRIDGE:") else "diag" for r in rules[n:]]
        first_diag = kinds.index("diag")
        assert all(k == "bridge" for k in kinds[:first_diag])
        assert all(k == "diag" for k in kinds[first_diag:])
        assert len(kinds) - first_diag == 30

    def test_catch_all_has_no_conditions(self, forward_engine):
        assert forward_engine.rules[-1].id == "UNDETERMINED"
        assert forward_engine.rules[-1].conditions == ()


class TestInference:

    def test_intermediate_facts_derived(self, forward_engine, make_observation):
        obs = make_observation(mobility_status="paralyzed", cold_limbs=True)
        result = forward_engine.infer(extract_facts(obs))
        for fact in ("has_paralysis", "motor_dysfunction", "mobility_abnormal",
                     "vascular_compromise", "circulation_problems", "chronic_condition"):
            assert fact in result.facts
        assert result.converged

    def test_initial_facts_kept_in_order(self, forward_engine, make_observation):
        initial = extract_facts(make_observation())
        result = forward_engine.infer(initial)
        assert list(result.facts[:len(initial)]) == initial
        assert result.initial_facts == frozenset(initial)

    def test_each_rule_fires_at_most_once(self, forward_engine, make_observation):
        result = forward_engine.infer(extract_facts(make_observation(seizures="severe")))
        ids = [a.rule.id for a in result.applied]
        assert len(ids) == len(set(ids))

    def test_inference_is_repeatable(self, forward_engine, make_observation):
        facts = extract_facts(make_observation(head_tilt=True, ear_issues=True))
        assert forward_engine.infer(facts) == forward_engine.infer(facts)

    def test_rescan_after_fixed_point_adds_nothing(self, forward_engine, make_observation):
        first = forward_engine.infer(extract_facts(make_observation(
            mobility_status="wobbly", pain_signs=True, cold_limbs=True,
        )))
        again = forward_engine.infer(first.facts)
        assert set(again.facts) == set(first.facts)
        assert all(not a.new_facts for a in again.applied)

    def test_iteration_cap(self, rule_table, make_observation):
        engine = ForwardChainingEngine(rule_table, ForwardChainingConfig(max_iterations=1))
        result = engine.infer(extract_facts(make_observation()))
        assert result.iterations == 1
        assert not result.converged

    def test_matches_waterfall_on_every_observation(
        self, forward_engine, waterfall, every_observation
    ):
        """Derived diagnosis facts are exactly the rules the waterfall matches."""
        for obs in every_observation:
            inference = forward_engine.infer(extract_facts(obs))
            assert inference.converged
            assert inference.iterations <= 10

            derived = {f[len("diagnosis_"):].upper() for f in inference.diagnosis_facts}
            matched = {m.rule.id for m in waterfall.match_all(obs)}
            assert derived == matched, obs.to_dict()


class TestConclusion:

    def test_trauma_with_severe_seizures(self, forward_engine, raw_answers):
        result = forward_engine.evaluate(raw_answers(seizures="severe", recent_trauma=True))
        assert result.rule_id == "TRAUMATIC_BRAIN_INJURY"
        assert result.confidence == 0.95
        assert result.engine == "forward_chaining"
        assert "has_trauma_history" in result.derived_facts
        assert "Detect Trauma Signs" in result.applied_rules
        assert "diagnosis_traumatic_brain_injury" in result.explanation

    def test_highest_confidence_wins(self, forward_engine, make_observation, waterfall):
        """With priority-ordered confidences the most urgent match is chosen."""
        obs = make_observation(age_group="kitten", onset_speed="sudden", seizures="severe")
        result = forward_engine.evaluate(obs)
        best = min(waterfall.match_all(obs), key=lambda m: m.priority)
        assert result.rule_id == best.rule.id == "HYPOGLYCEMIA"
        assert result.confidence == 0.90
        assert result.total_matches == 2

    def test_catch_all_derived_for_baseline(self, forward_engine, raw_answers):
        result = forward_engine.evaluate(raw_answers())
        assert result.rule_id == "UNDETERMINED"
        assert result.confidence == 0.62

    def test_no_diagnosis_fact_gives_fallback(self, forward_engine, make_observation):
        inference = InferenceResult(
            initial_facts=frozenset({"age_adult"}),
            facts=("age_adult", "chronic_condition"),
            applied=(),
            iterations=1,
            converged=True,
        )
        result = forward_engine.conclude(make_observation(), inference)

        assert result.rule_id == "FC_UNDETERMINED"
        assert result.rule_id != forward_engine.table.catch_all.id
        assert result.diagnosis == "Undetermined Neurological Condition"
        assert result.priority == 29
        assert result.urgency == UrgencyLevel.MODERATE
        assert result.confidence == 0.6
        assert "RESULT: No Specific Diagnosis Determined" in result.explanation
        assert "  • chronic_condition" in result.explanation

    def test_malformed_observation_instance_raises(self, forward_engine, make_observation):
        """An unanswered boolean is never read as false."""
        obs = replace(make_observation(), age_group="puppy", eye_signs=None, pain_signs="yes")
        with pytest.raises(ValidationError) as exc_info:
            forward_engine.evaluate(obs)

        errors = exc_info.value.details["errors"]
        assert "Invalid age group: puppy" in errors
        assert "Boolean field eye_signs must be explicitly set (true/false)" in errors
        assert "Field pain_signs must be boolean (true/false)" in errors
        assert forward_engine.last_diagnosis is None

    def test_system_stats(self, forward_engine):
        stats = forward_engine.system_stats()
        assert stats["engine"] == "forward_chaining"
        assert stats["intermediate_rules"] == 13
        assert stats["inference_rules"] == len(forward_engine.rules)
        assert stats["max_iterations"] == 10
