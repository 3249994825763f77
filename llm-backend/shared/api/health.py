"""Health check API endpoints."""
from fastapi import APIRouter

from config import get_settings

router = APIRouter(tags=["health"])

SERVICE_NAME = "IntelliHint LLM Backend"
SERVICE_VERSION = "1.0.0"


@router.get("/")
def read_root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION
    }


@router.get("/health/config")
def config_health():
    """Report whether the model is configured. Never echoes secrets."""
    settings = get_settings()
    return {
        "status": "ok" if settings.gemini_api_key else "error",
        "model": settings.gemini_model,
        "model_key_configured": bool(settings.gemini_api_key),
        "max_attempts": settings.gateway_max_attempts,
    }
