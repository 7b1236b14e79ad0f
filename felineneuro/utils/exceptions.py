"""
Custom Exception Hierarchy

Provides specific exception types for the diagnosis core and the
surrounding application, each carrying structured error information.
"""
from typing import Optional, Dict, Any, List


class DiagnosisSystemError(Exception):
    """Base exception for all diagnosis system errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class ValidationError(DiagnosisSystemError):
    """Observation is incomplete or malformed. Fatal to the evaluation call."""

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"errors": list(errors or []), **(details or {})}
        )
        self.errors = list(errors or [])


class RulePredicateError(DiagnosisSystemError):
    """A single rule condition failed while being evaluated."""

    def __init__(
        self,
        message: str,
        rule_id: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="RULE_PREDICATE_ERROR",
            details={"rule_id": rule_id, **(details or {})}
        )
        self.rule_id = rule_id


class InternalConsistencyError(DiagnosisSystemError):
    """No rule matched although the catch-all rule should always match."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="INTERNAL_CONSISTENCY_ERROR",
            details=details
        )


class KnowledgeBaseError(DiagnosisSystemError):
    """The rule table or one of its conditions is invalid at load time."""

    def __init__(
        self,
        message: str,
        rule_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="KNOWLEDGE_BASE_ERROR",
            details={"rule_id": rule_id, **(details or {})}
        )
        self.rule_id = rule_id


class ChatServiceError(DiagnosisSystemError):
    """Errors talking to the chat assistant backend."""

    def __init__(
        self,
        message: str,
        model: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="CHAT_SERVICE_ERROR",
            details={"model": model, **(details or {})}
        )
        self.model = model


class HistoryStoreError(DiagnosisSystemError):
    """Errors reading or writing diagnosis history."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="HISTORY_STORE_ERROR",
            details=details
        )
