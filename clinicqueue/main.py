from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
import time
import logging
import os

from .api.v1.providers import router as providers_router
from .api.v1.appointments import router as appointments_router
from .api.v1.patients import router as patients_router
from .core.config import settings
from .core import database

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)


def _database_kind(url: str) -> str:
    for prefix, name in (("postgresql", "PostgreSQL"), ("sqlite", "SQLite")):
        if url.startswith(prefix):
            return name
    return url.split(":", 1)[0]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables before serving, log on the way out."""
    logger.info(
        f"Starting {settings.APP_NAME} {settings.VERSION} "
        f"on {_database_kind(settings.get_database_url)}"
    )
    try:
        database.init_db()
    except Exception:
        logger.exception("Database initialization failed")
        raise

    yield

    logger.info(f"{settings.APP_NAME} stopped")


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started
    response.headers["X-Process-Time"] = f"{elapsed:.6f}"

    logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {elapsed:.4f}s")
    return response


async def not_found_handler(request: Request, exc: HTTPException):
    detail = getattr(exc, "detail", None)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Not Found",
            "detail": detail or "The requested resource was not found",
            "path": request.url.path
        }
    )


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning(f"Integrity error on {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"error": "Conflict", "detail": "The request conflicts with existing data"}
    )


async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error", "detail": "An unexpected error occurred"}
    )


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.VERSION,
        description="Clinic scheduling with provider availability and appointment booking",
        openapi_url="/api/v1/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Test clients send arbitrary Host headers
    if not os.getenv("TESTING"):
        app.add_middleware(
            TrustedHostMiddleware,
            allowed_hosts=["localhost", "127.0.0.1", "*.localhost", "testserver"]
        )
    app.middleware("http")(log_requests)

    app.add_exception_handler(404, not_found_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(500, internal_error_handler)

    for router in (providers_router, appointments_router, patients_router):
        app.include_router(router, prefix="/api/v1")

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "timestamp": time.time(), "version": settings.VERSION}

    @app.get("/api/v1/info")
    async def api_info():
        """List the resource collections this service exposes."""
        return {
            "name": settings.APP_NAME,
            "version": settings.VERSION,
            "endpoints": {
                "providers": "/api/v1/providers",
                "appointments": "/api/v1/appointments",
                "patients": "/api/v1/patients",
                "docs": "/docs",
                "openapi": "/api/v1/openapi.json"
            }
        }

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "clinicqueue.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
