"""
Host qualification service application entry point.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from app.config import settings
from app.features.host_qualification import host_qualification_router
from app.infrastructure.observability.logging import get_logger, setup_logging
from app.routes import health

# Setup logging before creating the app
setup_logging(log_level=settings.log_level())
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log application startup and shutdown."""
    logger.info("Application starting", environment=settings.environment, debug=settings.debug)
    yield
    logger.info("Application shutting down")


app = FastAPI(
    title="Host Qualification Service",
    description="Selects fixed and qualified round-robin hosts for bookings",
    version="0.1.0",
    lifespan=lifespan,
)

# Include routers
app.include_router(health.router)
app.include_router(host_qualification_router)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    logger.info(
        "HTTP request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round(process_time, 2),
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
