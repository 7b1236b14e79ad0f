"""
Diagnosis Service

Application-level entry point wrapping the core:

    raw answers -> InputValidator -> confirmation summary -> engine -> history

The core call is synchronous and deterministic. History recording is a
side call made after the result exists; its failures are logged and never
change or fail the diagnosis.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from felineneuro.config import ENGINE_WATERFALL, Settings, get_settings
from felineneuro.core.clinical import (
    DiagnosisEngine,
    DiagnosisResult,
    ForwardChainingEngine,
    Observation,
    RuleTable,
    WaterfallEngine,
)
from felineneuro.core.validation import InputValidator, ValidationReport
from felineneuro.utils import DiagnosisSystemError, get_logger

from .history import DiagnosisHistoryStore

logger = get_logger(__name__)


@dataclass
class DiagnosisOutcome:
    result: DiagnosisResult
    confirmation: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = self.result.to_dict()
        payload["confirmation"] = self.confirmation
        return payload


def _present(flag: bool) -> str:
    return "Present" if flag else "Absent"


class DiagnosisService:
    """
    Owns one engine per strategy over a shared RuleTable.

    Args:
        engines:   name -> DiagnosisEngine; both strategies by default.
        history:   optional history store; None disables recording.
        validator: input validator shared with the engines.
    """

    def __init__(
        self,
        engines: Optional[Dict[str, DiagnosisEngine]] = None,
        history: Optional[DiagnosisHistoryStore] = None,
        validator: Optional[InputValidator] = None,
        default_engine: str = ENGINE_WATERFALL,
    ):
        self.validator = validator or InputValidator()
        if engines is None:
            table = RuleTable.default()
            engines = {
                WaterfallEngine.name: WaterfallEngine(table, validator=self.validator),
                ForwardChainingEngine.name: ForwardChainingEngine(table, validator=self.validator),
            }
        self.engines = engines
        self.history = history
        self.default_engine = default_engine if default_engine in engines else next(iter(engines))

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "DiagnosisService":
        settings = settings or get_settings()
        table = RuleTable.default()
        validator = InputValidator()
        engines = {
            WaterfallEngine.name: WaterfallEngine(table, settings.waterfall, validator),
            ForwardChainingEngine.name: ForwardChainingEngine(table, settings.forward_chaining, validator),
        }

        history = None
        if settings.history_enabled:
            try:
                history = DiagnosisHistoryStore(settings.history_dir)
            except DiagnosisSystemError as exc:
                logger.error(f"History disabled: {exc.message}")

        return cls(engines, history, validator, settings.default_engine)

    # ── Core path ───────────────────────────────────────────────────────────

    def engine(self, name: Optional[str] = None) -> DiagnosisEngine:
        name = name or self.default_engine
        if name not in self.engines:
            raise DiagnosisSystemError(
                f"Unknown engine '{name}'",
                code="UNKNOWN_ENGINE",
                details={"available": sorted(self.engines)},
            )
        return self.engines[name]

    def validate(self, raw: Any) -> ValidationReport:
        return self.validator.validate(raw)

    def confirm_inputs(self, observation: Observation) -> Dict[str, Any]:
        """Human readable summary of the answers, shown before diagnosing."""
        o = observation
        return {
            "summary": (
                f"{o.get('age_group')} cat with {o.get('onset_speed')} onset of "
                f"{o.get('mobility_status')} mobility and {o.get('seizures')} seizures"
            ),
            "details": {
                "basic_info": {
                    "age": o.get("age_group"),
                    "onset": o.get("onset_speed"),
                    "mobility": o.get("mobility_status"),
                    "seizures": o.get("seizures"),
                },
                "clinical_signs": {
                    "eye_signs": _present(o.eye_signs),
                    "pain_signs": _present(o.pain_signs),
                    "head_tilt": _present(o.head_tilt),
                    "recent_trauma": "Yes" if o.recent_trauma else "No",
                    "cold_limbs": _present(o.cold_limbs),
                    "neck_flexion": _present(o.neck_flexion),
                    "ear_issues": _present(o.ear_issues),
                },
            },
            "timestamp": datetime.now().isoformat(),
        }

    def diagnose(
        self,
        raw: Mapping[str, Any],
        engine: Optional[str] = None,
        skip_confirmation: bool = False,
        record: bool = True,
    ) -> DiagnosisOutcome:
        """
        Validate, confirm, evaluate and (optionally) record one diagnosis.

        Raises:
            ValidationError:          incomplete or malformed answers
            DiagnosisSystemError:     unknown engine name
            InternalConsistencyError: no rule matched (knowledge base defect)
        """
        selected = self.engine(engine)
        observation = self.validator.parse(raw)

        confirmation = None
        if not skip_confirmation:
            confirmation = self.confirm_inputs(observation)
            logger.info(f"Input confirmation: {confirmation['summary']}")

        result = selected.evaluate(observation)

        if record:
            self.record_history(result)
        return DiagnosisOutcome(result=result, confirmation=confirmation)

    # ── Side calls ──────────────────────────────────────────────────────────

    def record_history(self, result: DiagnosisResult) -> bool:
        """Store the result; never raises. Returns True when stored."""
        if self.history is None:
            return False
        try:
            self.history.record(result)
            return True
        except Exception as exc:
            logger.error(f"Failed to store diagnosis history: {exc}")
            return False

    @staticmethod
    def chat_context(result: Optional[DiagnosisResult]) -> Optional[Dict[str, Any]]:
        return result.to_chat_context() if result else None
