"""
Clinical Decision Layer

Knowledge base, condition language and the two diagnosis engines.
"""
from .base import (
    AgeGroup,
    DiagnosisResult,
    DiagnosticRule,
    Match,
    MobilityStatus,
    Observation,
    OnsetSpeed,
    ScoreBreakdown,
    SeizureLevel,
    UrgencyLevel,
)
from .rule_table import RuleTable
from .engine import DiagnosisEngine, WaterfallEngine
from .forward_chaining import ForwardChainingEngine, InferenceResult, InferenceRule

__all__ = [
    "AgeGroup",
    "DiagnosisResult",
    "DiagnosticRule",
    "Match",
    "MobilityStatus",
    "Observation",
    "OnsetSpeed",
    "ScoreBreakdown",
    "SeizureLevel",
    "UrgencyLevel",
    "RuleTable",
    "DiagnosisEngine",
    "WaterfallEngine",
    "ForwardChainingEngine",
    "InferenceResult",
    "InferenceRule",
]
