"""
FastAPI application initialization
"""

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from api.routes import health, checklists, organization, pipeline
from api.dependencies import require_api_key
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.database import dispose_engine
from core.exceptions import (
    AdminConsoleException,
    NotFoundError,
    ValidationError,
    StoreError,
    StoreTimeoutError,
)
from core.logging import setup_logging
from schemas.api import ErrorResponse
import logging

setup_logging()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Call Processing Admin Console API",
    description="Administration backend for tenants, teams, users, checklists, prompts, integrations and processing logs",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestContextMiddleware)

# Health stays open for probes; everything else sits behind the API key
app.include_router(health.router)
app.include_router(checklists.router, dependencies=[Depends(require_api_key)])
app.include_router(organization.router, dependencies=[Depends(require_api_key)])
app.include_router(pipeline.router, dependencies=[Depends(require_api_key)])


# ============================================================================
# Error handling
# ============================================================================

def _error_response(status_code: int, exc: AdminConsoleException) -> JSONResponse:
    body = ErrorResponse(
        error=exc.__class__.__name__,
        detail=exc.message,
        context=exc.context,
        timestamp=exc.timestamp
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@app.exception_handler(AdminConsoleException)
async def admin_exception_handler(request: Request, exc: AdminConsoleException):
    request_id = getattr(request.state, "request_id", "-")

    if isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, ValidationError):
        status_code = 422
    elif isinstance(exc, StoreTimeoutError):
        status_code = 504
    elif isinstance(exc, StoreError):
        status_code = 502
    else:
        status_code = 500

    log = logger.warning if status_code < 500 else logger.error
    log(f"[{request_id}] {request.method} {request.url.path} failed: {exc}")

    return _error_response(status_code, exc)


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    logger.info("Starting Call Processing Admin Console API")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")
    if not settings.API_KEY:
        logger.warning("API_KEY is not set; the API is open to anyone who can reach it")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    logger.info("Shutting down Call Processing Admin Console API")
    await dispose_engine()


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "Call Processing Admin Console API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "companies": "/companies",
            "teams": "/teams",
            "users": "/users",
            "checklists": "/checklists",
            "prompts": "/prompts",
            "integrations": "/integrations",
            "logs": "/logs"
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.main:app", host=settings.API_HOST, port=settings.API_PORT, log_level=settings.LOG_LEVEL.lower())
