"""
Integration Tests for the FastAPI Backend

Tests for API endpoints: health, rules, validation, diagnosis, history, chat.
Uses async httpx for ASGI app testing; the app gets a history store in a
temporary directory and a chat assistant in mock mode.
"""
import logging
import pytest
import httpx
from typing import Any, Dict

from felineneuro import main as main_module
from felineneuro.config import ChatConfig, Settings
from felineneuro.core.llm import ChatAssistant
from felineneuro.main import create_app
from felineneuro.services import DiagnosisHistoryStore, DiagnosisService


@pytest.fixture
def sample_answers() -> Dict[str, Any]:
    """Answers that point at Traumatic Brain Injury."""
    return {
        "age_group": "adult",
        "onset_speed": "gradual",
        "mobility_status": "normal",
        "seizures": "severe",
        "eye_signs": False,
        "pain_signs": False,
        "head_tilt": False,
        "recent_trauma": True,
        "cold_limbs": False,
        "neck_flexion": False,
        "ear_issues": False,
    }


@pytest.fixture
def app(tmp_path):
    history = DiagnosisHistoryStore(tmp_path / "history")
    application = create_app(
        settings=Settings(history_enabled=False),
        service=DiagnosisService(history=history),
        assistant=ChatAssistant(ChatConfig(api_key=None)),
    )
    yield application
    history.close()


@pytest.fixture
async def async_client(app):
    """Create async test client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test"
    ) as client:
        yield client


@pytest.mark.asyncio
class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_root_endpoint(self, async_client):
        response = await async_client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["total_rules"] == 30
        assert data["engines"] == ["forward_chaining", "waterfall"]
        assert data["history_enabled"] is True
        assert data["chat_available"] is False

    async def test_health_endpoint(self, async_client):
        response = await async_client.get("/health")
        assert response.status_code == 200
        assert "version" in response.json()


@pytest.mark.asyncio
class TestReferenceEndpoints:
    """Tests for rule listing and engine introspection."""

    async def test_list_rules(self, async_client):
        response = await async_client.get("/api/v1/rules")
        assert response.status_code == 200

        data = response.json()
        assert data["total"] == 30
        assert data["rules"][0]["id"] == "TRAUMATIC_BRAIN_INJURY"
        assert "EMERGENCY" in data["urgency_levels"]
        assert "age_group" in data["input_descriptions"]

    async def test_engine_stats(self, async_client, sample_answers):
        await async_client.post("/api/v1/diagnosis", json=sample_answers)

        response = await async_client.get("/api/v1/engines/waterfall/stats")
        assert response.status_code == 200
        data = response.json()
        assert data["evaluations"] == 1
        assert data["last_diagnosis"]["rule_id"] == "TRAUMATIC_BRAIN_INJURY"

    async def test_unknown_engine_stats(self, async_client):
        response = await async_client.get("/api/v1/engines/bayesian/stats")
        assert response.status_code == 404

    async def test_engine_reset(self, async_client, sample_answers):
        await async_client.post("/api/v1/diagnosis", json=sample_answers)

        response = await async_client.post("/api/v1/engines/waterfall/reset")
        assert response.status_code == 200
        assert response.json()["reset"] is True

        stats = (await async_client.get("/api/v1/engines/waterfall/stats")).json()
        assert stats["last_diagnosis"] is None


@pytest.mark.asyncio
class TestValidationEndpoint:

    async def test_complete(self, async_client, sample_answers):
        response = await async_client.post("/api/v1/validate", json=sample_answers)
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["completeness"]["percentage"] == 100

    async def test_partial_answers(self, async_client):
        """Incomplete answers are reported, not rejected."""
        response = await async_client.post(
            "/api/v1/validate", json={"age_group": "kitten", "head_tilt": False},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is False
        assert data["completeness"]["completed"] == 2
        assert "Missing required field: onset_speed" in data["errors"]


@pytest.mark.asyncio
class TestDiagnosisEndpoint:
    """Tests for the diagnosis endpoint."""

    async def test_waterfall_diagnosis(self, async_client, sample_answers):
        response = await async_client.post("/api/v1/diagnosis", json=sample_answers)
        assert response.status_code == 200

        data = response.json()
        assert data["rule_id"] == "TRAUMATIC_BRAIN_INJURY"
        assert data["urgency"] == "EMERGENCY"
        assert data["engine"] == "waterfall"
        assert data["winning_score"]["total"] == 650
        assert [a["id"] for a in data["alternatives"]] == [
            "GENERAL_TRAUMA", "IDIOPATHIC_EPILEPSY", "UNDETERMINED",
        ]
        assert data["confirmation"]["summary"].startswith("adult cat")

    async def test_forward_chaining_diagnosis(self, async_client, sample_answers):
        response = await async_client.post(
            "/api/v1/diagnosis",
            params={"engine": "forward_chaining"},
            json={**sample_answers, "skip_confirmation": True},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["rule_id"] == "TRAUMATIC_BRAIN_INJURY"
        assert data["confidence"] == 0.95
        assert data["confirmation"] is None
        assert "has_trauma_history" in data["derived_facts"]

    async def test_missing_boolean_rejected(self, async_client, sample_answers):
        del sample_answers["cold_limbs"]
        response = await async_client.post("/api/v1/diagnosis", json=sample_answers)
        assert response.status_code == 422

        detail = response.json()["detail"]
        assert detail["error"] == "VALIDATION_ERROR"
        assert any("cold_limbs" in e for e in detail["details"]["errors"])
        assert detail["details"]["completeness"]["percentage"] == 91

    async def test_invalid_enum_rejected(self, async_client, sample_answers):
        sample_answers["age_group"] = "puppy"
        response = await async_client.post("/api/v1/diagnosis", json=sample_answers)
        assert response.status_code == 422
        assert "Invalid age group: puppy" in response.json()["detail"]["details"]["errors"]

    async def test_unknown_engine(self, async_client, sample_answers):
        response = await async_client.post(
            "/api/v1/diagnosis", params={"engine": "bayesian"}, json=sample_answers,
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "UNKNOWN_ENGINE"


@pytest.mark.asyncio
class TestHistoryEndpoints:

    async def test_history_after_diagnosis(self, async_client, sample_answers):
        await async_client.post("/api/v1/diagnosis", json=sample_answers)
        await async_client.post(
            "/api/v1/diagnosis", params={"engine": "forward_chaining"}, json=sample_answers,
        )

        response = await async_client.get("/api/v1/history")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["records"][0]["engine"] == "forward_chaining"

        analytics = (await async_client.get("/api/v1/history/analytics")).json()
        assert analytics["total"] == 2
        assert analytics["most_common_diagnosis"] == "Traumatic Brain Injury"

    async def test_history_limit_bounds(self, async_client):
        response = await async_client.get("/api/v1/history", params={"limit": 0})
        assert response.status_code == 422

    async def test_clear_history(self, async_client, sample_answers):
        await async_client.post("/api/v1/diagnosis", json=sample_answers)

        response = await async_client.delete("/api/v1/history")
        assert response.status_code == 200
        assert response.json()["removed"] == 1
        assert (await async_client.get("/api/v1/history")).json()["total"] == 0


@pytest.mark.asyncio
class TestChatEndpoint:

    async def test_mock_chat_with_context(self, async_client):
        response = await async_client.post("/api/v1/chat", json={
            "message": "How worried should I be?",
            "diagnosis_context": {
                "diagnosis": "Traumatic Brain Injury",
                "urgency": "EMERGENCY",
            },
        })
        assert response.status_code == 200

        data = response.json()
        assert data["is_mock"] is True
        assert data["is_fallback"] is False
        assert data["latency_ms"] == 0.0
        assert "Traumatic Brain Injury" in data["reply"]

    async def test_empty_message_rejected(self, async_client):
        response = await async_client.post("/api/v1/chat", json={"message": ""})
        assert response.status_code == 422


@pytest.mark.asyncio
class TestAppLifecycle:
    """Collaborators and logging are set up at startup, not at import."""

    async def test_building_app_has_no_side_effects(self, tmp_path):
        root = logging.getLogger()
        sentinel = logging.NullHandler()
        root.addHandler(sentinel)
        try:
            application = create_app(settings=Settings(history_dir=tmp_path / "history"))

            assert sentinel in root.handlers
            assert not (tmp_path / "history").exists()
            assert application.state.service is None
            assert main_module.app.state.service is None
        finally:
            root.removeHandler(sentinel)

    async def test_startup_builds_missing_collaborators(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        application = create_app(settings=Settings(
            history_dir=tmp_path / "history",
            history_enabled=True,
            chat=ChatConfig(api_key=None),
        ))
        try:
            async with application.router.lifespan_context(application):
                assert application.state.service.history is not None
                assert application.state.assistant.is_available is False
                assert (tmp_path / "history").exists()
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
