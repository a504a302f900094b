"""
FastAPI backend for the storefront and its admin dashboard.

Wires the document store, object storage and cached collection services
through the dependency injection container.
"""

from datetime import datetime
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, ORJSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from core.container import container
from core.config import Settings
from core.exceptions import (
    ConflictError,
    DocumentNotFoundError,
    InvitationError,
    StorefrontError,
    ValidationError,
)
from core.logging import configure_logging, get_logger
from routers import admins, analytics, categories, customers, marketing, orders, payments, products, site

# Initialize settings and logging
settings = Settings()
configure_logging(settings)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    # Startup
    logger.info("Starting storefront services")

    await container.database().startup()

    logger.info("Services started successfully",
                cache_ttl_ms=settings.cache_ttl_ms)
    yield

    # Shutdown
    await container.database().shutdown()
    logger.info("Services shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="Storefront Services",
    version="1.0.0",
    description="Catalogue, orders, customers, site content and dashboard analytics",
    lifespan=lifespan,
    default_response_class=ORJSONResponse
)


# =============================================================================
# Error envelopes
# =============================================================================

ERROR_STATUS = (
    (DocumentNotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvitationError, status.HTTP_400_BAD_REQUEST),
)


def error_response(status_code: int, message: str) -> ORJSONResponse:
    return ORJSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    for error_type, status_code in ERROR_STATUS:
        if isinstance(exc, error_type):
            logger.warning("Request rejected", path=request.url.path,
                           error_type=type(exc).__name__, error=str(exc))
            return error_response(status_code, str(exc))
    logger.error("Storefront operation failed", path=request.url.path,
                 error_type=type(exc).__name__, error=str(exc))
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return error_response(exc.status_code, str(exc.detail))


class CatchAllExceptionsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as e:
            logger.error(f"Unhandled exception: {type(e).__name__}: {str(e)}",
                         path=request.url.path, exc_info=True)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "success": False,
                    "error": f"{type(e).__name__}: {str(e)}",
                    "detail": "Internal server error"
                }
            )


# Exception middleware goes on BEFORE CORS
app.add_middleware(CatchAllExceptionsMiddleware)

logger.info("Configuring CORS middleware",
            origins_count=len(settings.cors_origins),
            origins=settings.cors_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

# Include routers
app.include_router(products.router)
app.include_router(categories.router)
app.include_router(orders.router)
app.include_router(customers.router)
app.include_router(admins.router)
app.include_router(site.router)
app.include_router(marketing.router)
app.include_router(payments.router)
app.include_router(analytics.router)

# Uploaded objects are served back from the storage root
app.mount("/storage", StaticFiles(directory=settings.storage_root, check_dir=False), name="storage")


@app.get("/health")
async def health_check():
    """Detailed health check."""
    return {
        "status": "OK",
        "service": "storefront",
        "version": "1.0.0",
        "environment": "development" if settings.debug else "production",
        "database_ready": container.database().is_ready,
        "timestamp": datetime.now().isoformat()
    }


if __name__ == "__main__":
    import uvicorn
    logger.info("Starting storefront services",
                host=settings.host, port=settings.port, debug=settings.debug)
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        reload_dirs=["."] if settings.debug else None,
        reload_excludes=["*.pyc", "__pycache__", "*.log", "*.db"] if settings.debug else None
    )
