"""
FastAPI application - Mock Interview API.

Résumé parsing, a timed 6-question AI interview, and an interviewer
dashboard, all held in memory.
"""
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Load environment variables before config is imported
load_dotenv()

from mock_interview.core.config import ALLOWED_ORIGINS, API_VERSION, get_ai_api_key
from mock_interview.security.rate_limit import limiter
from mock_interview.utils.logger import setup_logger

# Import routers
from mock_interview.routers.health import router as health_router
from mock_interview.routers.resume import router as resume_router
from mock_interview.routers.interviews import router as interviews_router
from mock_interview.routers.candidates import router as candidates_router

logger = setup_logger("app")


# ==================== FastAPI App ====================

app = FastAPI(
    title="Mock Interview API",
    description="AI-powered mock interviews: résumé parsing, timed questions, scoring and a candidate dashboard",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add rate limiter state to app
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# ==================== CORS Configuration ====================

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== Routers ====================

app.include_router(health_router)
app.include_router(resume_router)
app.include_router(interviews_router)
app.include_router(candidates_router)


# ==================== Startup/Shutdown Events ====================

@app.on_event("startup")
async def startup_event():
    """Validate environment configuration on startup."""
    if not get_ai_api_key():
        logger.warning("[STARTUP] AI_API_KEY not found in environment variables!")
        logger.warning("[STARTUP] Questions will fail to generate until a key is configured.")
    else:
        logger.info("[STARTUP] AI API key loaded")

    logger.info(f"[STARTUP] Mock Interview API {API_VERSION} started")
    logger.info(f"[STARTUP] Allowed origins: {ALLOWED_ORIGINS}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("[SHUTDOWN] Mock Interview API shutting down")


# ==================== Run Configuration ====================

if __name__ == "__main__":
    import uvicorn

    # Development server configuration
    uvicorn.run(
        "app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Auto-reload on code changes
        log_level="info"
    )
