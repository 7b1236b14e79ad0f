"""
Pydantic schemas for the HTTP API.
"""
from .diagnosis import (
    AnalyticsResponse,
    ChatRequest,
    ChatResponse,
    DiagnosisContext,
    DiagnosisRequest,
    DiagnosisResponse,
    HealthResponse,
    HistoryResponse,
    ObservationInput,
    RulesResponse,
    ValidationResponse,
)

__all__ = [
    "AnalyticsResponse",
    "ChatRequest",
    "ChatResponse",
    "DiagnosisContext",
    "DiagnosisRequest",
    "DiagnosisResponse",
    "HealthResponse",
    "HistoryResponse",
    "ObservationInput",
    "RulesResponse",
    "ValidationResponse",
]
