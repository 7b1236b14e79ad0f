"""
Unit Tests for the declarative condition language.

Evaluation, field references and text rendering all come from the same tree.
"""
import pytest

from felineneuro.core.clinical.conditions import (
    ALWAYS,
    all_of,
    any_of,
    describe,
    eq,
    evaluate,
    ne,
    one_of,
    referenced_fields,
    top_level_terms,
)
from felineneuro.utils import KnowledgeBaseError


class TestClauseConstruction:

    def test_unknown_field_rejected(self):
        with pytest.raises(KnowledgeBaseError):
            eq("tail_length", "long")

    def test_value_outside_domain_rejected(self):
        with pytest.raises(KnowledgeBaseError):
            eq("age_group", "puppy")

    def test_boolean_field_requires_real_bool(self):
        with pytest.raises(KnowledgeBaseError):
            eq("head_tilt", 1)

    def test_empty_one_of_rejected(self):
        with pytest.raises(KnowledgeBaseError):
            one_of("age_group")

    def test_any_of_needs_two_terms(self):
        with pytest.raises(KnowledgeBaseError):
            any_of(eq("head_tilt", True))

    def test_all_of_needs_a_term(self):
        with pytest.raises(KnowledgeBaseError):
            all_of()


class TestEvaluate:

    def test_eq_and_ne(self, make_observation):
        obs = make_observation(mobility_status="wobbly")
        assert evaluate(eq("mobility_status", "wobbly"), obs)
        assert evaluate(ne("mobility_status", "normal"), obs)
        assert not evaluate(eq("mobility_status", "paralyzed"), obs)

    def test_one_of(self, make_observation):
        cond = one_of("age_group", "kitten", "adult")
        assert evaluate(cond, make_observation(age_group="kitten"))
        assert evaluate(cond, make_observation(age_group="adult"))
        assert not evaluate(cond, make_observation(age_group="senior"))

    def test_boolean_false_clause(self, make_observation):
        cond = eq("pain_signs", False)
        assert evaluate(cond, make_observation(pain_signs=False))
        assert not evaluate(cond, make_observation(pain_signs=True))

    def test_nested_any_of(self, make_observation):
        cond = all_of(
            eq("onset_speed", "sudden"),
            any_of(eq("head_tilt", True), eq("eye_signs", True)),
        )
        assert evaluate(cond, make_observation(onset_speed="sudden", eye_signs=True))
        assert not evaluate(cond, make_observation(onset_speed="sudden"))
        assert not evaluate(cond, make_observation(head_tilt=True))

    def test_always_matches(self, make_observation):
        assert evaluate(ALWAYS, make_observation())


class TestReferencedFields:

    def test_counts_distinct_fields_through_nesting(self):
        cond = all_of(
            eq("age_group", "senior"),
            eq("onset_speed", "sudden"),
            any_of(eq("seizures", "mild"), eq("eye_signs", True)),
            eq("mobility_status", "normal"),
        )
        assert referenced_fields(cond) == frozenset(
            {"age_group", "onset_speed", "seizures", "eye_signs", "mobility_status"}
        )

    def test_repeated_field_counted_once(self):
        cond = any_of(eq("seizures", "mild"), eq("seizures", "severe"))
        assert referenced_fields(cond) == frozenset({"seizures"})

    def test_always_reads_nothing(self):
        assert referenced_fields(ALWAYS) == frozenset()


class TestDescribe:

    def test_clause_wording(self):
        assert describe(eq("head_tilt", True)) == "head tilt present"
        assert describe(eq("pain_signs", False)) == "no pain signs"
        assert describe(ne("mobility_status", "normal")) == "mobility is not normal"
        assert describe(one_of("age_group", "kitten", "adult")) == "age is kitten or adult"

    def test_nested_disjunction_is_parenthesised(self):
        cond = all_of(
            eq("ear_issues", True),
            any_of(eq("head_tilt", True), eq("mobility_status", "wobbly")),
        )
        assert describe(cond) == "ear issues present AND (head tilt present OR mobility is wobbly)"

    def test_top_level_terms(self):
        cond = all_of(eq("age_group", "senior"), eq("onset_speed", "gradual"))
        assert len(top_level_terms(cond)) == 2
        assert top_level_terms(ALWAYS) == [ALWAYS]
