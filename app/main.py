"""
REWRDS Card Ranking API — FastAPI Application Entry Point

POST /score      → rank the catalog against quiz answers
GET  /cards      → full card catalog
GET  /health     → health check
GET  /metrics    → Prometheus metrics
GET  /docs       → OpenAPI / Swagger UI
"""
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from app.api.card_endpoint import router as card_router
from app.api.score_endpoint import router as score_router
from app.core.config import get_settings
from app.models.database import dispose_engine
from app.scoring.rules import RULESET_VERSION

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.ConsoleRenderer() if get_settings().app_env == "development"
        else structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(get_settings().log_level),
)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logger.info("rewrds_api_starting", ruleset_version=RULESET_VERSION, card_store=settings.card_store)
    yield
    await dispose_engine()
    logger.info("rewrds_api_shutting_down")


app = FastAPI(
    title="REWRDS Card Ranking API",
    description="Personalized, explainable credit-card ranking from quiz answers",
    version="2.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (quiz front-end) ──
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)

# ── Prometheus metrics ──
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── Routes ──
app.include_router(score_router)
app.include_router(card_router)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.error("unhandled_error", path=request.url.path, error=str(exc), error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": "Internal server error."})


@app.get("/", include_in_schema=False)
async def root():
    return {
        "status": "REWRDS API is live",
        "online": True,
        "service": get_settings().app_name,
        "version": "2.0.0",
        "docs": "/docs",
    }


@app.get("/health", tags=["health"])
async def health():
    return {"status": "ok", "service": get_settings().app_name, "ruleset_version": RULESET_VERSION}
