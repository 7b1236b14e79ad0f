"""
API Schemas

Request and response models for the HTTP layer. Observation fields are
optional here on purpose: completeness is judged by the InputValidator,
which reports every missing field by name instead of failing on the first.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, StrictBool


class ObservationInput(BaseModel):
    """Owner answers for one cat."""
    age_group: Optional[str] = Field(None, description="kitten | adult | senior")
    onset_speed: Optional[str] = Field(None, description="sudden | gradual")
    mobility_status: Optional[str] = Field(None, description="normal | wobbly | paralyzed")
    seizures: Optional[str] = Field(None, description="none | mild | severe")
    eye_signs: Optional[StrictBool] = None
    pain_signs: Optional[StrictBool] = None
    head_tilt: Optional[StrictBool] = None
    recent_trauma: Optional[StrictBool] = None
    cold_limbs: Optional[StrictBool] = None
    neck_flexion: Optional[StrictBool] = None
    ear_issues: Optional[StrictBool] = None

    def answers(self) -> Dict[str, Any]:
        """Only the fields the owner actually answered."""
        return self.model_dump(
            include=set(ObservationInput.model_fields),
            exclude_none=True,
        )


class DiagnosisRequest(ObservationInput):
    skip_confirmation: bool = False


class CompletenessResponse(BaseModel):
    completed: int
    total: int
    percentage: int
    missing: int
    missing_fields: List[str] = []


class ValidationResponse(BaseModel):
    valid: bool
    errors: List[str]
    completeness: CompletenessResponse


class ScoreResponse(BaseModel):
    priority: int
    complexity: int
    specificity: int
    severity: int
    total: int
    breakdown: List[str]


class AlternativeResponse(BaseModel):
    id: str
    name: str
    priority: int
    score: int
    score_breakdown: List[str]


class DiagnosisResponse(BaseModel):
    """One diagnosis, whichever engine produced it."""
    rule_id: str
    diagnosis: str
    priority: int
    urgency: str
    description: str
    clinical_notes: List[str]
    next_steps: List[str]
    explanation: str
    engine: str
    rules_evaluated: int
    total_rules: int
    total_matches: int
    winning_score: Optional[ScoreResponse] = None
    alternatives: List[AlternativeResponse] = []
    confidence: Optional[float] = None
    derived_facts: List[str] = []
    applied_rules: List[str] = []
    iterations: int = 0
    inputs: Dict[str, Any] = {}
    icon: str = ""
    color: str = ""
    timestamp: str
    confirmation: Optional[Dict[str, Any]] = None


class RuleExplanation(BaseModel):
    id: str
    name: str
    priority: int
    urgency: str
    description: str
    condition: str


class RulesResponse(BaseModel):
    total: int
    rules: List[RuleExplanation]
    urgency_levels: Dict[str, Dict[str, str]]
    input_descriptions: Dict[str, Dict[str, str]]


class HistoryRecord(BaseModel):
    id: str
    timestamp: str
    engine: str
    rule_id: str
    diagnosis: str
    urgency: str
    inputs: Dict[str, Any]


class HistoryResponse(BaseModel):
    total: int
    records: List[HistoryRecord]


class AnalyticsResponse(BaseModel):
    total: int
    by_diagnosis: Dict[str, int]
    by_urgency: Dict[str, int]
    by_engine: Dict[str, int]
    most_common_diagnosis: Optional[str] = None


class DiagnosisContext(BaseModel):
    """Subset of a diagnosis handed to the chat assistant."""
    diagnosis: str
    urgency: str
    description: str = ""
    clinical_notes: List[str] = []


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    diagnosis_context: Optional[DiagnosisContext] = None


class ChatResponse(BaseModel):
    reply: str
    model: str
    is_mock: bool
    is_fallback: bool = False
    latency_ms: float = 0.0


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: str
    uptime_seconds: float
    total_rules: int
    engines: List[str]
    history_enabled: bool
    chat_available: bool
