"""
Order Core - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import structlog

from ordercore.config import settings
from ordercore.errors import OrderCoreError
from ordercore.api import auth, orders, delivery

# Configure structured logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Order Core API", version="1.0.0")
    yield
    logger.info("Shutting down Order Core API")


# Create FastAPI application
app = FastAPI(
    title="Order Core",
    description="Order intake and fulfillment for store admins",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(OrderCoreError)
async def order_core_error_handler(request: Request, exc: OrderCoreError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")

    return JSONResponse(
        status_code=400,
        content={
            "detail": f"{location}: {message}" if location else message,
            "code": "VALIDATION_ERROR",
        },
    )


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": "1.0.0"}


@app.get("/health/ready")
async def ready():
    """Readiness check with dependency verification"""
    from ordercore.database import SessionLocal

    checks = {}

    # Check database
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    # Check Redis
    try:
        from ordercore.jobs.celery_app import celery_app
        celery_app.control.ping(timeout=1)
        checks["redis"] = "ok"
    except Exception as e:
        checks["redis"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


# Include API routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(orders.router, prefix="/stores/{store_id}/orders", tags=["Orders"])
app.include_router(delivery.router, prefix="/stores/{store_id}/delivery", tags=["Delivery"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ordercore.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
