# hostel_gate/main.py
"""
FastAPI application entry point.
Includes security middleware, global error handlers, and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from hostel_gate import __version__
from hostel_gate.routers import scan, attendance, students, logs, notifications, health
from hostel_gate.database import create_tables
from hostel_gate.config import settings
from hostel_gate.dependencies import get_gate_session
from hostel_gate.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Hostel Gate API",
    description="Scan a registration number, then record entry or exit.",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (gate screen is a browser page on the kiosk) ───────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to the kiosk origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth.
    Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(scan.router,          prefix="/api/v1", tags=["Scan"])
app.include_router(attendance.router,    prefix="/api/v1", tags=["Entry/Exit"])
app.include_router(students.router,      prefix="/api/v1", tags=["Students"])
app.include_router(logs.router,          prefix="/api/v1", tags=["Global log"])
app.include_router(notifications.router, prefix="/api/v1", tags=["Notifications"])
app.include_router(health.router,        prefix="/api/v1", tags=["Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("Hostel Gate starting up...")
    create_tables()
    logger.info("Database tables ready")
    get_gate_session()
    logger.info(f"Open-entry strategy: {settings.OPEN_ENTRY_STRATEGY} "
                f"(window={settings.RECENT_EVENTS_WINDOW})")
    logger.info(f"Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("Hostel Gate shutting down...")
