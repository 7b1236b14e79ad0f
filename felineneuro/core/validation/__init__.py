"""
Validation Module

Gates every diagnosis: raw owner answers become an Observation only when
complete and well typed.
"""
from .input_validator import (
    Completeness,
    InputValidator,
    ValidationReport,
)

__all__ = [
    "Completeness",
    "InputValidator",
    "ValidationReport",
]
