"""
Clinical Decision Layer - Base Types

Defines the observation record, the diagnostic rule shape and the result
contract shared by both diagnosis engines.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .conditions import Condition


class UrgencyLevel(str, Enum):
    """
    Clinical urgency of a diagnosis.

    EMERGENCY – go to an emergency clinic now
    HIGH      – see a veterinarian within hours
    MODERATE  – book a veterinary appointment soon
    LOW       – monitor and mention at the next visit
    """
    EMERGENCY = "EMERGENCY"
    HIGH      = "HIGH"
    MODERATE  = "MODERATE"
    LOW       = "LOW"


class AgeGroup(str, Enum):
    KITTEN = "kitten"
    ADULT  = "adult"
    SENIOR = "senior"


class OnsetSpeed(str, Enum):
    SUDDEN  = "sudden"
    GRADUAL = "gradual"


class MobilityStatus(str, Enum):
    NORMAL    = "normal"
    WOBBLY    = "wobbly"
    PARALYZED = "paralyzed"


class SeizureLevel(str, Enum):
    NONE   = "none"
    MILD   = "mild"
    SEVERE = "severe"


# ── Observation field registry ────────────────────────────────────────────────
CATEGORICAL_FIELDS: Dict[str, type] = {
    "age_group": AgeGroup,
    "onset_speed": OnsetSpeed,
    "mobility_status": MobilityStatus,
    "seizures": SeizureLevel,
}

BOOLEAN_FIELDS: Tuple[str, ...] = (
    "eye_signs",
    "pain_signs",
    "head_tilt",
    "recent_trauma",
    "cold_limbs",
    "neck_flexion",
    "ear_issues",
)

OBSERVATION_FIELDS: Tuple[str, ...] = tuple(CATEGORICAL_FIELDS) + BOOLEAN_FIELDS

# Plain-language labels used by explanations and condition descriptions
FIELD_LABELS: Dict[str, str] = {
    "age_group": "age",
    "onset_speed": "onset",
    "mobility_status": "mobility",
    "seizures": "seizures",
    "eye_signs": "eye signs",
    "pain_signs": "pain signs",
    "head_tilt": "head tilt",
    "recent_trauma": "recent trauma",
    "cold_limbs": "cold limbs",
    "neck_flexion": "neck flexion",
    "ear_issues": "ear issues",
}


def field_domain(name: str) -> Tuple[Any, ...]:
    """Allowed raw values for an observation field."""
    if name in CATEGORICAL_FIELDS:
        return tuple(member.value for member in CATEGORICAL_FIELDS[name])
    if name in BOOLEAN_FIELDS:
        return (True, False)
    raise KeyError(name)


@dataclass(frozen=True)
class Observation:
    """One complete set of clinical signs for a single evaluation."""
    age_group: AgeGroup
    onset_speed: OnsetSpeed
    mobility_status: MobilityStatus
    seizures: SeizureLevel
    eye_signs: bool
    pain_signs: bool
    head_tilt: bool
    recent_trauma: bool
    cold_limbs: bool
    neck_flexion: bool
    ear_issues: bool

    def get(self, name: str) -> Any:
        """Raw value of a field (enum members are unwrapped to their string)."""
        if name not in OBSERVATION_FIELDS:
            raise KeyError(f"Unknown observation field: {name}")
        value = getattr(self, name)
        return value.value if isinstance(value, Enum) else value

    def to_dict(self) -> Dict[str, Any]:
        return {name: self.get(name) for name in OBSERVATION_FIELDS}


@dataclass(frozen=True)
class DiagnosticRule:
    """
    A single entry of the knowledge base.

    Rules are configuration: the engines never mutate them.
    """
    id: str
    name: str
    priority: int                    # 1 = highest
    condition: "Condition"
    urgency: UrgencyLevel
    description: str
    clinical_notes: Tuple[str, ...] = ()
    next_steps: Tuple[str, ...] = ()
    icon: str = ""
    color: str = ""

    @property
    def is_catch_all(self) -> bool:
        from .conditions import Always
        return isinstance(self.condition, Always)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Weighted score of one match, kept decomposed for transparency."""
    priority: int
    complexity: int
    specificity: int
    severity: int
    reasons: Tuple[str, ...] = ()

    @property
    def total(self) -> int:
        return self.priority + self.complexity + self.specificity + self.severity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "priority": self.priority,
            "complexity": self.complexity,
            "specificity": self.specificity,
            "severity": self.severity,
            "total": self.total,
            "breakdown": list(self.reasons),
        }


@dataclass(frozen=True)
class Match:
    """A rule whose condition held for the current observation."""
    rule: DiagnosticRule
    position: int                    # index in the priority-sorted table
    score: ScoreBreakdown

    @property
    def priority(self) -> int:
        return self.rule.priority

    def to_alternative(self) -> Dict[str, Any]:
        return {
            "id": self.rule.id,
            "name": self.rule.name,
            "priority": self.rule.priority,
            "score": self.score.total,
            "score_breakdown": list(self.score.reasons),
        }


@dataclass
class DiagnosisResult:
    """
    Final output of one evaluation. Exactly one per call.

    Waterfall results carry `winning_score` and `alternatives`;
    forward-chaining results carry `confidence`, `derived_facts`,
    `applied_rules` and `iterations`.
    """
    # ── Core identity ─────────────────────────────────────────────────────
    rule_id: str
    diagnosis: str
    priority: int
    urgency: UrgencyLevel
    description: str
    clinical_notes: List[str]
    next_steps: List[str]
    explanation: str
    engine: str

    # ── Engine metadata ───────────────────────────────────────────────────
    rules_evaluated: int = 0
    total_rules: int = 0
    total_matches: int = 0
    winning_score: Optional[ScoreBreakdown] = None
    alternatives: List[Dict[str, Any]] = field(default_factory=list)
    confidence: Optional[float] = None
    derived_facts: List[str] = field(default_factory=list)
    applied_rules: List[str] = field(default_factory=list)
    iterations: int = 0

    # ── Audit ─────────────────────────────────────────────────────────────
    inputs: Dict[str, Any] = field(default_factory=dict)
    icon: str = ""
    color: str = ""
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "diagnosis": self.diagnosis,
            "priority": self.priority,
            "urgency": self.urgency.value,
            "description": self.description,
            "clinical_notes": list(self.clinical_notes),
            "next_steps": list(self.next_steps),
            "explanation": self.explanation,
            "engine": self.engine,
            "rules_evaluated": self.rules_evaluated,
            "total_rules": self.total_rules,
            "total_matches": self.total_matches,
            "winning_score": self.winning_score.to_dict() if self.winning_score else None,
            "alternatives": list(self.alternatives),
            "confidence": self.confidence,
            "derived_facts": list(self.derived_facts),
            "applied_rules": list(self.applied_rules),
            "iterations": self.iterations,
            "inputs": dict(self.inputs),
            "icon": self.icon,
            "color": self.color,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_chat_context(self) -> Dict[str, Any]:
        """Plain payload handed to the chat assistant."""
        return {
            "diagnosis": self.diagnosis,
            "urgency": self.urgency.value,
            "description": self.description,
            "clinical_notes": list(self.clinical_notes),
        }
