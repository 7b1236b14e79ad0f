"""
Utilities Package - Logging and Exception Handling
"""
from .logging import get_logger, setup_logging, StructuredFormatter
from .exceptions import (
    DiagnosisSystemError,
    ValidationError,
    RulePredicateError,
    InternalConsistencyError,
    KnowledgeBaseError,
    ChatServiceError,
    HistoryStoreError,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "StructuredFormatter",
    "DiagnosisSystemError",
    "ValidationError",
    "RulePredicateError",
    "InternalConsistencyError",
    "KnowledgeBaseError",
    "ChatServiceError",
    "HistoryStoreError",
]
