"""
Declarative Rule Conditions

A rule's condition is a small tree of field/operator/value clauses joined
by all-of / any-of nodes. The tree is data, so every consumer derives its
own view from the same structure:

  - evaluate(): does the observation satisfy the rule?
  - referenced_fields(): which observation fields the rule reads
    (drives the waterfall complexity score)
  - describe(): human readable IF-text for explanations
  - forward_chaining: compiles the tree into fact requirements

Usage:
    from felineneuro.core.clinical.conditions import all_of, eq, ne

    cond = all_of(ne("mobility_status", "normal"), eq("pain_signs", True))
    evaluate(cond, observation)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, List, Tuple, Union, TYPE_CHECKING

from felineneuro.utils.exceptions import KnowledgeBaseError
from .base import BOOLEAN_FIELDS, FIELD_LABELS, OBSERVATION_FIELDS, field_domain

if TYPE_CHECKING:
    from .base import Observation


class Operator(str, Enum):
    EQ = "=="
    NE = "!="
    IN = "in"


@dataclass(frozen=True)
class Clause:
    """`field <op> value` over a single observation field."""
    field: str
    op: Operator
    value: Any

    def __post_init__(self):
        if self.field not in OBSERVATION_FIELDS:
            raise KnowledgeBaseError(f"Condition references unknown field '{self.field}'")
        domain = field_domain(self.field)
        values = self.value if self.op is Operator.IN else (self.value,)
        if self.op is Operator.IN and not values:
            raise KnowledgeBaseError(f"Empty value set for '{self.field}'")
        for v in values:
            # bool is an int subclass; compare types strictly for boolean fields
            if self.field in BOOLEAN_FIELDS and not isinstance(v, bool):
                raise KnowledgeBaseError(f"Field '{self.field}' only accepts True/False, got {v!r}")
            if v not in domain:
                raise KnowledgeBaseError(
                    f"Value {v!r} is not allowed for '{self.field}' (allowed: {list(domain)})"
                )


@dataclass(frozen=True)
class AllOf:
    terms: Tuple["Condition", ...]


@dataclass(frozen=True)
class AnyOf:
    terms: Tuple["Condition", ...]


@dataclass(frozen=True)
class Always:
    """Matches every observation. Reserved for the catch-all rule."""


Condition = Union[Clause, AllOf, AnyOf, Always]

ALWAYS = Always()


# ── Builders ──────────────────────────────────────────────────────────────────

def eq(field: str, value: Any) -> Clause:
    return Clause(field, Operator.EQ, value)


def ne(field: str, value: Any) -> Clause:
    return Clause(field, Operator.NE, value)


def one_of(field: str, *values: Any) -> Clause:
    return Clause(field, Operator.IN, tuple(values))


def all_of(*terms: Condition) -> AllOf:
    if not terms:
        raise KnowledgeBaseError("all_of() needs at least one term")
    return AllOf(tuple(terms))


def any_of(*terms: Condition) -> AnyOf:
    if len(terms) < 2:
        raise KnowledgeBaseError("any_of() needs at least two terms")
    return AnyOf(tuple(terms))


# ── Views ─────────────────────────────────────────────────────────────────────

def evaluate(condition: Condition, observation: "Observation") -> bool:
    """True when the observation satisfies the condition."""
    if isinstance(condition, Always):
        return True
    if isinstance(condition, Clause):
        actual = observation.get(condition.field)
        if condition.op is Operator.EQ:
            return actual == condition.value
        if condition.op is Operator.NE:
            return actual != condition.value
        return actual in condition.value
    if isinstance(condition, AllOf):
        return all(evaluate(term, observation) for term in condition.terms)
    if isinstance(condition, AnyOf):
        return any(evaluate(term, observation) for term in condition.terms)
    raise TypeError(f"Unsupported condition node: {type(condition).__name__}")


def referenced_fields(condition: Condition) -> FrozenSet[str]:
    """Distinct observation fields a condition reads. Structural, input independent."""
    if isinstance(condition, Always):
        return frozenset()
    if isinstance(condition, Clause):
        return frozenset((condition.field,))
    if isinstance(condition, (AllOf, AnyOf)):
        fields: FrozenSet[str] = frozenset()
        for term in condition.terms:
            fields |= referenced_fields(term)
        return fields
    raise TypeError(f"Unsupported condition node: {type(condition).__name__}")


def _describe_clause(clause: Clause) -> str:
    label = FIELD_LABELS[clause.field]
    if clause.field in BOOLEAN_FIELDS:
        present = clause.value if clause.op is Operator.EQ else not clause.value
        return f"{label} present" if present else f"no {label}"
    if clause.op is Operator.EQ:
        return f"{label} is {clause.value}"
    if clause.op is Operator.NE:
        return f"{label} is not {clause.value}"
    return f"{label} is {' or '.join(clause.value)}"


def describe(condition: Condition) -> str:
    """Render a condition as plain text, e.g. 'age is senior AND onset is gradual'."""
    if isinstance(condition, Always):
        return "no other rule matches (default case)"
    if isinstance(condition, Clause):
        return _describe_clause(condition)
    if isinstance(condition, AllOf):
        parts = [
            f"({describe(t)})" if isinstance(t, AnyOf) else describe(t)
            for t in condition.terms
        ]
        return " AND ".join(parts)
    if isinstance(condition, AnyOf):
        parts = [
            f"({describe(t)})" if isinstance(t, AllOf) else describe(t)
            for t in condition.terms
        ]
        return " OR ".join(parts)
    raise TypeError(f"Unsupported condition node: {type(condition).__name__}")


def top_level_terms(condition: Condition) -> List[Condition]:
    """Terms joined by AND at the root; a single term for anything else."""
    if isinstance(condition, AllOf):
        return list(condition.terms)
    return [condition]
