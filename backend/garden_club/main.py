import json
import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from garden_club import __version__
from garden_club.config import get_settings
from garden_club.errors import register_exception_handlers
from garden_club.ratelimit import limiter
from garden_club.routers import (
    activity_router,
    admin_router,
    auth_router,
    check_in_router,
    cron_router,
    plant_care_router,
    plants_router,
    site_content_router,
    uploads_router,
)
from garden_club.services.scheduler import scheduler_lifespan

settings = get_settings()
logger = logging.getLogger("garden_club")
logging.basicConfig(level=settings.log_level.upper())


app = FastAPI(
    title="Garden Club API",
    description="Members, plants, care assignments, check-ins, reminders and the club activity feed",
    version=__version__,
    lifespan=scheduler_lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Set basic security headers for all API responses."""
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Permissions-Policy"] = "camera=(), microphone=(), geolocation=()"
    return response


@app.middleware("http")
async def structured_logging_middleware(request: Request, call_next):
    start = time.perf_counter()
    req_id = request.headers.get("X-Request-ID", str(uuid4()))
    request.state.request_id = req_id

    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers["X-Request-ID"] = req_id
        return response
    finally:
        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(json.dumps({
            "request_id": req_id,
            "path": request.url.path,
            "method": request.method,
            "status": status_code,
            "duration_ms": duration_ms,
        }))


app.include_router(auth_router)
app.include_router(plants_router)
app.include_router(plant_care_router)
app.include_router(check_in_router)
app.include_router(activity_router)
app.include_router(cron_router)
app.include_router(admin_router)
app.include_router(site_content_router)
app.include_router(uploads_router)

Instrumentator().instrument(app).expose(app, include_in_schema=False, should_gzip=True)


@app.get("/health")
def health_check():
    """Health check endpoint for Docker."""
    return {"status": "healthy"}


@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": "Garden Club API",
        "version": __version__,
        "docs": "/docs",
        "auth": {
            "register": "/api/register",
            "login": "/api/auth/login",
        },
    }
