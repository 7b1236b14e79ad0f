"""
Observation Input Validation

Gates every evaluation: an Observation is only built once all 11 fields
are present and typed correctly. A boolean that was never answered is an
error, not an implicit False, so "not yet answered" stays distinguishable
from "answered no".

Completeness is always computed, even for invalid input, so a form can
show progress while the owner is still filling it in.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from felineneuro.core.clinical.base import (
    BOOLEAN_FIELDS,
    CATEGORICAL_FIELDS,
    OBSERVATION_FIELDS,
    Observation,
    field_domain,
)
from felineneuro.utils import ValidationError, get_logger

logger = get_logger(__name__)

# Noun used in "Invalid <noun>: <value>" messages
_CATEGORICAL_NOUNS: Dict[str, str] = {
    "age_group": "age group",
    "onset_speed": "onset speed",
    "mobility_status": "mobility status",
    "seizures": "seizure status",
}


@dataclass
class Completeness:
    """How many of the required fields have been answered."""
    completed: int
    total: int
    missing_fields: List[str] = field(default_factory=list)

    @property
    def missing(self) -> int:
        return self.total - self.completed

    @property
    def fraction(self) -> float:
        return self.completed / self.total if self.total else 0.0

    @property
    def percentage(self) -> int:
        return round(self.fraction * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "completed": self.completed,
            "total": self.total,
            "percentage": self.percentage,
            "missing": self.missing,
            "missing_fields": list(self.missing_fields),
        }


@dataclass
class ValidationReport:
    valid: bool
    errors: List[str]
    completeness: Completeness

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "completeness": self.completeness.to_dict(),
        }


def _is_answered(name: str, value: Any) -> bool:
    if value is None:
        return False
    if name in CATEGORICAL_FIELDS and value == "":
        return False
    return True


class InputValidator:
    """
    Side-effect free checks over a raw observation mapping.

    Unknown extra keys are ignored; the input mapping is never modified.
    """

    def completeness(self, raw: Mapping[str, Any]) -> Completeness:
        missing = [name for name in OBSERVATION_FIELDS if not _is_answered(name, raw.get(name))]
        return Completeness(
            completed=len(OBSERVATION_FIELDS) - len(missing),
            total=len(OBSERVATION_FIELDS),
            missing_fields=missing,
        )

    def validate(self, raw: Any) -> ValidationReport:
        """Check completeness and types. Never raises."""
        if not isinstance(raw, Mapping):
            return ValidationReport(
                valid=False,
                errors=["Observation must be a mapping of field names to values"],
                completeness=self.completeness({}),
            )

        errors: List[str] = []

        for name in CATEGORICAL_FIELDS:
            value = raw.get(name)
            if not _is_answered(name, value):
                errors.append(f"Missing required field: {name}")
            elif not isinstance(value, str) or value not in field_domain(name):
                errors.append(f"Invalid {_CATEGORICAL_NOUNS[name]}: {value}")

        for name in BOOLEAN_FIELDS:
            value = raw.get(name)
            if not _is_answered(name, value):
                errors.append(f"Boolean field {name} must be explicitly set (true/false)")
            elif not isinstance(value, bool):
                errors.append(f"Field {name} must be boolean (true/false)")

        return ValidationReport(
            valid=not errors,
            errors=errors,
            completeness=self.completeness(raw),
        )

    def parse(self, raw: Any) -> Observation:
        """
        Validate and build an Observation.

        Raises:
            ValidationError: with the error list and completeness in `details`.
        """
        report = self.validate(raw)
        if not report.valid:
            logger.warning(
                f"InputValidator: rejected observation ({len(report.errors)} error(s), "
                f"{report.completeness.percentage}% complete)"
            )
            raise ValidationError(
                "Observation is incomplete or malformed",
                errors=report.errors,
                details={"completeness": report.completeness.to_dict()},
            )

        values: Dict[str, Any] = {}
        for name, enum_cls in CATEGORICAL_FIELDS.items():
            values[name] = enum_cls(raw[name])
        for name in BOOLEAN_FIELDS:
            values[name] = raw[name]
        return Observation(**values)

