"""
IntelliHint LLM Backend - FastAPI Application

Entry point for the problem-breakdown API: an authenticated proxy to the
generative model plus session endpoints that reveal a breakdown step by step.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_settings, validate_required_settings
from shared.api import health
from analysis.api import analyze, sessions

settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="IntelliHint LLM Backend",
    description="Step-by-step DSA problem breakdowns generated by Gemini",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(analyze.router)
app.include_router(sessions.router)


@app.on_event("startup")
async def startup_event():
    """Validate configuration on startup."""
    logger.info("Starting IntelliHint LLM Backend...")
    validate_required_settings()

    if not get_settings().gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; analysis requests will fail with 500")

    logger.info("Application started successfully")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
