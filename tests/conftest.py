"""
Pytest Configuration and Fixtures

Shared fixtures for the feline neuro diagnosis tests.
"""
import itertools
from typing import Any, Dict, Iterator

import pytest

from felineneuro.core.clinical import (
    ForwardChainingEngine,
    Observation,
    RuleTable,
    WaterfallEngine,
)
from felineneuro.core.clinical.base import BOOLEAN_FIELDS, CATEGORICAL_FIELDS, field_domain
from felineneuro.core.validation import InputValidator

# Matches only the catch-all rule
BASELINE_ANSWERS: Dict[str, Any] = {
    "age_group": "adult",
    "onset_speed": "gradual",
    "mobility_status": "normal",
    "seizures": "none",
    "eye_signs": False,
    "pain_signs": False,
    "head_tilt": False,
    "recent_trauma": False,
    "cold_limbs": False,
    "neck_flexion": False,
    "ear_issues": False,
}


def answers(**overrides) -> Dict[str, Any]:
    """Baseline answers with some fields replaced."""
    raw = dict(BASELINE_ANSWERS)
    raw.update(overrides)
    return raw


def all_answer_combinations() -> Iterator[Dict[str, Any]]:
    """Every valid answer set (3*2*3*3 * 2**7 = 6912)."""
    names = list(CATEGORICAL_FIELDS) + list(BOOLEAN_FIELDS)
    domains = [field_domain(name) for name in names]
    for values in itertools.product(*domains):
        yield dict(zip(names, values))


@pytest.fixture(scope="session")
def validator() -> InputValidator:
    return InputValidator()


@pytest.fixture
def raw_answers():
    """Factory: raw_answers(age_group="kitten") -> answer dict."""
    return answers


@pytest.fixture
def make_observation(validator):
    """Factory: make_observation(seizures="severe", recent_trauma=True) -> Observation."""
    def _make(**overrides) -> Observation:
        return validator.parse(answers(**overrides))
    return _make


@pytest.fixture(scope="session")
def rule_table() -> RuleTable:
    return RuleTable.default()


@pytest.fixture
def waterfall(rule_table) -> WaterfallEngine:
    return WaterfallEngine(rule_table)


@pytest.fixture
def forward_engine(rule_table) -> ForwardChainingEngine:
    return ForwardChainingEngine(rule_table)


@pytest.fixture(scope="session")
def every_observation(validator):
    """All 6912 valid observations, parsed once per session."""
    return [validator.parse(raw) for raw in all_answer_combinations()]
