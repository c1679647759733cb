"""
RecruitOS - Main Application
FastAPI entry point for the applicant tracking API
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recruitos.config import HOST, PORT, DEBUG, get_settings
from recruitos.core.database import init_db
from recruitos.routes import candidates, interviews, dashboard, database
from recruitos.services.demo_data import seed_demo_data
from recruitos.services.storage import get_storage
from recruitos.services.sync import get_sync_manager

logger = logging.getLogger("recruitos")


def configure_logging(level: str):
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("=" * 50)
    logger.info("  RECRUITOS")
    logger.info("=" * 50)
    logger.info("  Host: %s", HOST)
    logger.info("  Port: %s", PORT)
    logger.info("  Debug: %s", DEBUG)
    logger.info("  Storage: %s", settings.storage_backend)

    if settings.storage_backend == "database":
        await init_db()

    storage = get_storage()
    if settings.seed_demo_data:
        await seed_demo_data(storage)

    sync_manager = get_sync_manager()
    sync_manager.initialize()

    logger.info("=" * 50)
    yield
    # Shutdown
    sync_manager.shutdown()
    logger.info("RecruitOS shutting down...")


app = FastAPI(
    title="RecruitOS",
    description="Applicant tracking: two-phase candidate pipeline, interviews and dashboards",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================
# Error Handlers
# ============================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request data", "errors": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include API routers
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(dashboard.activity_router, prefix="/api/activity", tags=["Dashboard"])
app.include_router(candidates.router, prefix="/api/candidates", tags=["Candidates"])
app.include_router(interviews.router, prefix="/api/interviews", tags=["Interviews"])
app.include_router(database.router, prefix="/api/database", tags=["Database"])


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "recruitos"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "recruitos.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG
    )
