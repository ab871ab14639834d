from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from askservice.apps.api.dependencies import get_answer_service, get_app_settings
from askservice.apps.api.schemas import HealthResponse
from askservice.core.ai import AnswerService
from askservice.core.settings import Settings

router = APIRouter()


@router.get("/")
async def index(
    settings: Settings = Depends(get_app_settings),
    service: AnswerService = Depends(get_answer_service),
) -> JSONResponse:
    return JSONResponse(
        {
            "name": "askservice",
            "description": "Answers free-text questions via GigaChat, or canned answers in mock mode.",
            "version": settings.version,
            "mode": service.provider_name,
            "endpoints": {
                "GET /": "this description",
                "GET /health": "service status",
                "POST /ask": 'ask a question: {"question": "What is Rust?"}',
            },
        }
    )


@router.get("/health", response_model=HealthResponse)
async def health(
    settings: Settings = Depends(get_app_settings),
    service: AnswerService = Depends(get_answer_service),
) -> HealthResponse:
    return HealthResponse(status="ok", version=settings.version, gigachat_enabled=service.remote_enabled)
