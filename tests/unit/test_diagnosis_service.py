"""
Unit Tests for the Diagnosis Service.

Covers engine selection, input confirmation and history side calls.
"""
import pytest
from unittest.mock import Mock

from felineneuro.config import Settings
from felineneuro.services import DiagnosisHistoryStore, DiagnosisService
from felineneuro.utils import DiagnosisSystemError, HistoryStoreError, ValidationError


@pytest.fixture
def service(tmp_path) -> DiagnosisService:
    history = DiagnosisHistoryStore(tmp_path / "history")
    yield DiagnosisService(history=history)
    history.close()


class TestEngineSelection:

    def test_default_engine_is_waterfall(self, service):
        assert service.engine().name == "waterfall"

    def test_unknown_engine(self, service):
        with pytest.raises(DiagnosisSystemError) as exc_info:
            service.engine("bayesian")
        assert exc_info.value.code == "UNKNOWN_ENGINE"
        assert exc_info.value.details["available"] == ["forward_chaining", "waterfall"]

    def test_unknown_engine_checked_before_input(self, service):
        with pytest.raises(DiagnosisSystemError) as exc_info:
            service.diagnose({}, engine="bayesian")
        assert exc_info.value.code == "UNKNOWN_ENGINE"

    def test_from_settings(self, tmp_path):
        settings = Settings(
            default_engine="forward_chaining",
            history_dir=tmp_path / "h",
            history_enabled=False,
        )
        service = DiagnosisService.from_settings(settings)
        assert service.default_engine == "forward_chaining"
        assert service.history is None

    def test_bad_default_engine_falls_back(self):
        settings = Settings(default_engine="nope", history_enabled=False)
        assert settings.default_engine == "waterfall"


class TestDiagnose:

    def test_confirmation_summary(self, service, raw_answers):
        outcome = service.diagnose(raw_answers(
            age_group="senior", onset_speed="sudden", head_tilt=True, recent_trauma=True,
        ))
        confirmation = outcome.confirmation

        assert confirmation["summary"] == (
            "senior cat with sudden onset of normal mobility and none seizures"
        )
        signs = confirmation["details"]["clinical_signs"]
        assert signs["head_tilt"] == "Present"
        assert signs["eye_signs"] == "Absent"
        assert signs["recent_trauma"] == "Yes"
        assert confirmation["details"]["basic_info"]["age"] == "senior"

    def test_skip_confirmation(self, service, raw_answers):
        outcome = service.diagnose(raw_answers(), skip_confirmation=True)
        assert outcome.confirmation is None
        assert outcome.to_dict()["confirmation"] is None

    def test_engine_choice(self, service, raw_answers):
        outcome = service.diagnose(raw_answers(recent_trauma=True), engine="forward_chaining")
        assert outcome.result.engine == "forward_chaining"
        assert outcome.result.rule_id == "GENERAL_TRAUMA"
        assert outcome.result.confidence == 0.93

    def test_invalid_answers(self, service, raw_answers):
        with pytest.raises(ValidationError):
            service.diagnose(raw_answers(seizures="sometimes"))
        assert len(service.history) == 0

    def test_records_history(self, service, raw_answers):
        service.diagnose(raw_answers(neck_flexion=True))
        service.diagnose(raw_answers(), record=False)
        assert [r["rule_id"] for r in service.history.recent()] == ["THIAMINE_DEFICIENCY"]

    def test_history_failure_does_not_fail_diagnosis(self, raw_answers):
        history = Mock()
        history.record.side_effect = HistoryStoreError("disk full")
        service = DiagnosisService(history=history)

        outcome = service.diagnose(raw_answers(neck_flexion=True))

        assert outcome.result.rule_id == "THIAMINE_DEFICIENCY"
        history.record.assert_called_once()

    def test_record_history_without_store(self, waterfall, raw_answers):
        service = DiagnosisService()
        assert service.record_history(waterfall.evaluate(raw_answers())) is False

    def test_chat_context(self, service, raw_answers):
        result = service.diagnose(raw_answers(neck_flexion=True)).result
        context = DiagnosisService.chat_context(result)
        assert context["diagnosis"] == result.diagnosis
        assert context["urgency"] == "MODERATE"
        assert DiagnosisService.chat_context(None) is None
