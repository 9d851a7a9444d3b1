from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from medagent.config.settings import settings
from medagent.api.assessment import router as assessment_router
from medagent.services.advisory_service import get_advisory_service
from medagent.services.session_service import get_session_service
import logging

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
# httpx logs full request URLs at INFO, and the Gemini key travels as a query param
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    # Startup
    logger.info("Starting MedAgent symptom assessment service...")
    logger.info(f"Environment: {settings.environment}")
    if not settings.has_gemini_key:
        logger.warning(
            "GEMINI_API_KEY is not set; advisory requests will return fallback guidance"
        )

    yield

    # Shutdown
    logger.info("Shutting down MedAgent symptom assessment service...")
    await get_session_service().shutdown()
    await get_advisory_service().aclose()


# Initialize FastAPI app
app = FastAPI(
    title="MedAgent - Symptom Assessment",
    description="Symptom intake, rule-based risk classification, and AI advisory guidance relayed through a trusted backend.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(assessment_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "ok",
        "service": settings.service_name,
        "version": "1.0.0",
        "dependencies": {
            "gemini": "configured" if settings.has_gemini_key else "not configured",
        },
    }


@app.get("/")
async def root():
    return {
        "message": "MedAgent - Symptom Assessment Service",
        "description": "Symptom intake, risk classification and advisory guidance",
        "version": "1.0.0",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "medagent.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.environment == "development",
    )
