"""FastAPI application entry point."""
import logging
import os
import uuid

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session

from library_cms.core.config import settings
from library_cms.core.deps import get_db
from library_cms.core.errors import AppError
from library_cms.core.structured_logging import build_log_context
from library_cms.services import maintenance_service

settings.validate_for_production()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

# ============================================================================
# Sentry Integration (optional, for production error tracking)
# ============================================================================

if settings.SENTRY_DSN and settings.ENV != "dev":
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
    
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENV,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=0.1,
        send_default_pii=False,
    )
    logger.info("Sentry initialized for error tracking")

# ============================================================================
# Rate Limiting
# ============================================================================

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from library_cms.core.rate_limit import limiter


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="Library CMS API",
    description="Multi-tenant content management for libraries",
    version=settings.VERSION,
    docs_url="/docs" if settings.is_dev else None,
    redoc_url="/redoc" if settings.is_dev else None,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
# Applies the default API limit to every route without its own @limiter.limit
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render typed service errors as ``{"detail", "code"}`` JSON."""
    context = build_log_context(
        request_id=getattr(request.state, "request_id", None),
        route=request.url.path,
        method=request.method,
    )
    if exc.status_code >= 500:
        logger.error("request_failed", extra={**context, "code": exc.code, "error": exc.message})
    else:
        logger.info("request_rejected", extra={**context, "code": exc.code, "status": exc.status_code})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,  # Required for cookies
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)

# ============================================================================
# Routers
# ============================================================================

from library_cms.routers import (
    analytics, contact, dashboard, events, libraries, maintenance, media,
    platform_settings, stories, superadmin,
)

app.include_router(libraries.router)
app.include_router(stories.router)
app.include_router(events.router)
app.include_router(media.router)
app.include_router(contact.router)
app.include_router(analytics.router)
app.include_router(dashboard.router)
app.include_router(superadmin.router)
app.include_router(maintenance.router)
app.include_router(platform_settings.router)

# Local uploads are served directly in dev; S3 assets are public bucket URLs
if settings.STORAGE_BACKEND == "local":
    os.makedirs(settings.LOCAL_STORAGE_PATH, exist_ok=True)
    app.mount(
        "/assets",
        StaticFiles(directory=settings.LOCAL_STORAGE_PATH),
        name="assets",
    )


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health(db: Session = Depends(get_db)):
    """
    Health check endpoint.
    
    Verifies database connectivity and returns environment info.
    """
    return maintenance_service.health(db)
