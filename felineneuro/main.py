"""
Feline Neuro Diagnosis - FastAPI Application

API endpoints for:
- Input validation and completeness feedback
- Diagnosis (weighted waterfall or forward chaining)
- Knowledge base and engine introspection
- Diagnosis history and analytics
- Educational chat about a diagnosis
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import BackgroundTasks, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from felineneuro.config import VERSION, Settings, get_settings
from felineneuro.core.clinical.rules_neuro import INPUT_DESCRIPTIONS, URGENCY_DISPLAY
from felineneuro.core.llm import ChatAssistant
from felineneuro.models import (
    AnalyticsResponse,
    ChatRequest,
    ChatResponse,
    DiagnosisRequest,
    DiagnosisResponse,
    HealthResponse,
    HistoryResponse,
    ObservationInput,
    RulesResponse,
    ValidationResponse,
)
from felineneuro.services import DiagnosisService
from felineneuro.utils import (
    DiagnosisSystemError,
    InternalConsistencyError,
    ValidationError,
    get_logger,
    setup_logging,
)

logger = get_logger(__name__)

START_TIME = datetime.now()


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    startup -> yield -> shutdown.

    Logging and any collaborators not injected into create_app() are set up
    here, so importing this module touches neither the root logger nor disk.
    """
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_file)
    if app.state.service is None:
        app.state.service = DiagnosisService.from_settings(settings)
    if app.state.assistant is None:
        app.state.assistant = ChatAssistant(settings.chat)

    service: DiagnosisService = app.state.service
    logger.info(
        f"Feline Neuro Diagnosis API ready: engines={sorted(service.engines)}, "
        f"history={'on' if service.history else 'off'}, "
        f"chat={'gemini' if app.state.assistant.is_available else 'mock'}"
    )
    yield
    if service.history is not None:
        service.history.close()
    logger.info("Feline Neuro Diagnosis API shut down.")


# ---- Helpers ----

def _service(request: Request) -> DiagnosisService:
    return request.app.state.service


def _assistant(request: Request) -> ChatAssistant:
    return request.app.state.assistant


def _require_history(service: DiagnosisService):
    if service.history is None:
        raise HTTPException(status_code=503, detail="Diagnosis history is disabled")
    return service.history


def _health(request: Request) -> HealthResponse:
    service = _service(request)
    return HealthResponse(
        status="healthy",
        version=VERSION,
        timestamp=datetime.now().isoformat(),
        uptime_seconds=(datetime.now() - START_TIME).total_seconds(),
        total_rules=len(service.engine().table),
        engines=sorted(service.engines),
        history_enabled=service.history is not None,
        chat_available=_assistant(request).is_available,
    )


# ---- Application factory ----

def create_app(
    settings: Optional[Settings] = None,
    service: Optional[DiagnosisService] = None,
    assistant: Optional[ChatAssistant] = None,
) -> FastAPI:
    """
    Build the API. Injected collaborators are used as-is; missing ones are
    created from settings when the app starts.
    """
    app = FastAPI(
        title="Feline Neuro Diagnosis API",
        description="Rule-based decision support for feline neurological signs (educational use only)",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings or get_settings()
    app.state.service = service
    app.state.assistant = assistant

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---- Health ----

    @app.get("/", response_model=HealthResponse, tags=["Health"])
    async def root(request: Request):
        """API root - health check."""
        return _health(request)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request):
        """Health check endpoint."""
        return _health(request)

    # ---- Knowledge base / engines ----

    @app.get("/api/v1/rules", response_model=RulesResponse, tags=["Reference"])
    async def list_rules(request: Request):
        """Every diagnostic rule with its plain-text condition, in priority order."""
        rules = _service(request).engine().rule_explanations()
        return RulesResponse(
            total=len(rules),
            rules=rules,
            urgency_levels=URGENCY_DISPLAY,
            input_descriptions=INPUT_DESCRIPTIONS,
        )

    @app.get("/api/v1/engines/{engine}/stats", tags=["Reference"])
    async def engine_stats(engine: str, request: Request) -> Dict[str, Any]:
        try:
            return _service(request).engine(engine).system_stats()
        except DiagnosisSystemError as e:
            raise HTTPException(status_code=404, detail=e.to_dict())

    @app.post("/api/v1/engines/{engine}/reset", tags=["Reference"])
    async def engine_reset(engine: str, request: Request) -> Dict[str, Any]:
        """Forget the engine's last diagnosis."""
        try:
            _service(request).engine(engine).reset()
        except DiagnosisSystemError as e:
            raise HTTPException(status_code=404, detail=e.to_dict())
        return {"engine": engine, "reset": True}

    # ---- Diagnosis ----

    @app.post("/api/v1/validate", response_model=ValidationResponse, tags=["Diagnosis"])
    async def validate_inputs(body: ObservationInput, request: Request):
        """Completeness and type check; never fails on incomplete input."""
        return _service(request).validate(body.answers()).to_dict()

    @app.post("/api/v1/diagnosis", response_model=DiagnosisResponse, tags=["Diagnosis"])
    async def run_diagnosis(
        body: DiagnosisRequest,
        request: Request,
        background_tasks: BackgroundTasks,
        engine: Optional[str] = Query(None, description="waterfall | forward_chaining"),
    ):
        """
        Run one diagnosis.

        422 when the answers are incomplete or malformed, 400 for an unknown
        engine. History is recorded after the response is sent.
        """
        service = _service(request)
        try:
            outcome = service.diagnose(
                body.answers(),
                engine=engine,
                skip_confirmation=body.skip_confirmation,
                record=False,
            )
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=e.to_dict())
        except InternalConsistencyError as e:
            logger.error(f"Diagnosis failed: {e.message}")
            raise HTTPException(status_code=500, detail=e.to_dict())
        except DiagnosisSystemError as e:
            raise HTTPException(status_code=400, detail=e.to_dict())

        background_tasks.add_task(service.record_history, outcome.result)
        return outcome.to_dict()

    # ---- History ----

    @app.get("/api/v1/history", response_model=HistoryResponse, tags=["History"])
    async def get_history(request: Request, limit: int = Query(50, ge=1, le=1000)):
        history = _require_history(_service(request))
        try:
            records = history.recent(limit)
        except DiagnosisSystemError as e:
            raise HTTPException(status_code=500, detail=e.to_dict())
        return HistoryResponse(total=len(records), records=records)

    @app.get("/api/v1/history/analytics", response_model=AnalyticsResponse, tags=["History"])
    async def get_history_analytics(request: Request):
        history = _require_history(_service(request))
        try:
            return history.analytics()
        except DiagnosisSystemError as e:
            raise HTTPException(status_code=500, detail=e.to_dict())

    @app.delete("/api/v1/history", tags=["History"])
    async def clear_history(request: Request) -> Dict[str, Any]:
        history = _require_history(_service(request))
        try:
            removed = history.clear()
        except DiagnosisSystemError as e:
            raise HTTPException(status_code=500, detail=e.to_dict())
        return {"removed": removed}

    # ---- Chat ----

    @app.post("/api/v1/chat", response_model=ChatResponse, tags=["Chat"])
    async def chat(body: ChatRequest, request: Request):
        """Educational Q&A; answers even when Gemini is unreachable."""
        context = body.diagnosis_context.model_dump() if body.diagnosis_context else None
        reply = await _assistant(request).send_message(body.message, context)
        return reply.to_dict()

    return app


app = create_app()


# ---- Run with uvicorn ----
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
