from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resume_analyzer.routers import analysis, reports
from resume_analyzer.routers.dependencies import close_shared_clients, get_settings
from resume_analyzer.services.db import close_client, get_reports_collection, init_indexes

# Import logging and middleware
from resume_analyzer.utils.logging_config import configure_for_environment, get_logger
from resume_analyzer.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
    register_exception_handlers,
)

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Resume Analyzer API starting up...")

    # a missing store connection is fatal at startup
    settings = get_settings()
    reports_coll = get_reports_collection(settings.store)
    if not settings.llm.api_key:
        logger.warning("LLM_API_KEY is not configured; analysis requests will fail")

    try:
        await init_indexes(reports_coll)
    except Exception as e:
        logger.warning(f"Database index initialization had issues: {e}")

    logger.info("Resume Analyzer API startup completed")

    yield

    logger.info("Resume Analyzer API shutting down...")
    close_shared_clients()
    close_client()


app = FastAPI(title="Resume Analyzer API", version=VERSION, lifespan=lifespan)

# Add middleware in order (LIFO - Last In, First Out)
# ExceptionHandlerMiddleware assigns the request id, so it must wrap the other two
app.add_middleware(PerformanceMiddleware, slow_request_threshold=30.0)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)

register_exception_handlers(app)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    return {"message": "Welcome to the Resume Analyzer API", "version": VERSION, "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}


app.include_router(analysis.router, prefix="/api", tags=["analysis"])
app.include_router(reports.router, prefix="/api/reports", tags=["reports"])

logger.info("Resume Analyzer API initialized successfully")
