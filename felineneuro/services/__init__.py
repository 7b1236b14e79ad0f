"""
Application services around the diagnosis core.
"""
from .diagnosis import DiagnosisOutcome, DiagnosisService
from .history import DiagnosisHistoryStore

__all__ = [
    "DiagnosisOutcome",
    "DiagnosisService",
    "DiagnosisHistoryStore",
]
