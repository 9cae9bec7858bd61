"""KostKelola Boarding House Management - Main Application Entry Point."""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .core.exceptions import KostKelolaException
from .core.logging import (
    LoggingMiddleware,
    RequestIdMiddleware,
    get_logger,
    setup_logging,
    shutdown_logging,
)
from .database import AsyncSessionLocal

# Import routers
from .modules.auth.routers import router as auth_router
from .modules.backoffice.routers import router as backoffice_router
from .modules.billing import SmtpMailer
from .modules.billing.routers import router as billing_router
from .modules.billing.scheduler import create_billing_scheduler
from .modules.chat.routers import router as chat_router
from .modules.maintenance.routers import router as maintenance_router
from .modules.notifications.routers import router as notifications_router
from .modules.payments.routers import router as payments_router
from .modules.property_management.routers import (
    marketplace_router,
    room_types_router,
    rooms_router,
)
from .modules.property_management.routers import router as properties_router
from .modules.realtime import ChangeFeedBroker
from .modules.realtime.routers import router as realtime_router
from .modules.reports.routers import router as reports_router
from .modules.settings.routers import router as settings_router
from .modules.storage.routers import router as storage_router
from .modules.storage.services import UPLOAD_URL_PATH
from .modules.subscriptions.routers import router as subscriptions_router
from .modules.subscriptions.seed import seed_subscription_plans
from .modules.tenant_management.routers import router as tenants_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    setup_logging()
    logger.info("Starting KostKelola application...")
    logger.info(f"Environment: {settings.app_env}")
    logger.info(f"Debug mode: {settings.app_debug}")

    async with AsyncSessionLocal() as db:
        created = await seed_subscription_plans(db)
        await db.commit()
    if created:
        logger.info("Seeded default subscription plans", extra={"count": created})

    scheduler = None
    if settings.billing_schedule_enabled:
        scheduler = create_billing_scheduler(
            settings, AsyncSessionLocal, app.state.mailer, app.state.broker
        )
        scheduler.start()
        logger.info("Auto billing scheduled", extra={"cron": settings.billing_cron})

    yield

    # Shutdown
    if scheduler is not None:
        scheduler.shutdown(wait=False)
    logger.info("Shutting down KostKelola application...")
    shutdown_logging()


# Create FastAPI application
app = FastAPI(
    title=settings.api_title,
    description="Boarding house (kost) rental management",
    version=settings.api_version,
    docs_url=f"{settings.api_prefix}/docs" if settings.app_debug else None,
    redoc_url=f"{settings.api_prefix}/redoc" if settings.app_debug else None,
    openapi_url=f"{settings.api_prefix}/openapi.json" if settings.app_debug else None,
    lifespan=lifespan,
)

# Shared per-application services
app.state.broker = ChangeFeedBroker()
app.state.mailer = SmtpMailer(settings)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.log_requests:
    app.add_middleware(LoggingMiddleware)

# Request ID middleware for request tracing
app.add_middleware(RequestIdMiddleware)


def _error_response(
    status_code: int, message: str, details=None, headers=None
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            {
                "success": False,
                "message": message,
                "error": message,
                "details": details or {},
                "data": None,
            }
        ),
        headers=headers,
    )


# Global exception handlers
@app.exception_handler(KostKelolaException)
async def kostkelola_exception_handler(request: Request, exc: KostKelolaException):
    """Handle application exceptions."""
    status_code = getattr(exc, "status_code", 400)
    if status_code >= 500:
        logger.error(
            exc.message, extra={"path": request.url.path, "details": exc.details}
        )
    return _error_response(status_code, exc.message, exc.details)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(
        exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None)
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error_response(422, "Validation error", {"errors": exc.errors()})


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return _error_response(
        500, str(exc) if settings.app_debug else "Internal server error"
    )


# Health check endpoint
@app.get(f"{settings.api_prefix}/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.api_version,
        "env": settings.app_env,
    }


# Register routers with the API prefix
API_PREFIX = settings.api_prefix

app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(settings_router, prefix=API_PREFIX)
app.include_router(subscriptions_router, prefix=API_PREFIX)

# Properties, rooms and marketplace
app.include_router(properties_router, prefix=API_PREFIX)
app.include_router(room_types_router, prefix=API_PREFIX)
app.include_router(rooms_router, prefix=API_PREFIX)
app.include_router(marketplace_router, prefix=API_PREFIX)
app.include_router(reports_router, prefix=API_PREFIX)

# Tenants, payments and maintenance
app.include_router(tenants_router, prefix=API_PREFIX)
app.include_router(payments_router, prefix=API_PREFIX)
app.include_router(maintenance_router, prefix=API_PREFIX)

# Messaging and realtime
app.include_router(notifications_router, prefix=API_PREFIX)
app.include_router(chat_router, prefix=API_PREFIX)
app.include_router(realtime_router, prefix=API_PREFIX)

# Platform
app.include_router(billing_router, prefix=API_PREFIX)
app.include_router(storage_router, prefix=API_PREFIX)
app.include_router(backoffice_router, prefix=API_PREFIX)

os.makedirs(settings.upload_dir, exist_ok=True)
app.mount(
    UPLOAD_URL_PATH, StaticFiles(directory=settings.upload_dir), name="uploads"
)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "kostkelola_backend.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.app_debug,
    )
