# backend/tennisplan/main.py
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .database import init_db
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes import prometheus
from .routes.v1 import (
    admin as admin_v1,
    billing as billing_v1,
    calendar as calendar_v1,
    health as health_v1,
    newsletter as newsletter_v1,
    planning as planning_v1,
    players as players_v1,
    rate_plans as rate_plans_v1,
    registrations as registrations_v1,
    sepa_mandates as sepa_mandates_v1,
    substitutes as substitutes_v1,
    trainers as trainers_v1,
    trainings as trainings_v1,
)
from .schemas.main_responses import RootResponse

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")

    if settings.auto_create_tables:
        init_db()

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")


def _unique_operation_id(route: APIRoute) -> str:
    methods = "_".join(sorted(m.lower() for m in route.methods or []))
    path = route.path_format.replace("/", "_").replace("{", "").replace("}", "").replace("-", "_").strip("_")
    name = (route.name or "operation").lower().replace(" ", "_")
    return f"{methods}__{path}__{name}".strip("_")


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
    generate_unique_id_function=_unique_operation_id,
)

# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s", settings.cors_origins)

app.add_middleware(PrometheusMiddleware)

api_v1 = APIRouter(prefix="/api/v1")

api_v1.include_router(health_v1.router, prefix="/health")
api_v1.include_router(trainers_v1.router, prefix="/trainers")
api_v1.include_router(players_v1.router, prefix="/players")
api_v1.include_router(rate_plans_v1.router, prefix="/rate-plans")
api_v1.include_router(trainings_v1.router, prefix="/trainings")
api_v1.include_router(substitutes_v1.router, prefix="/substitutes")
api_v1.include_router(calendar_v1.router, prefix="/calendar")
api_v1.include_router(planning_v1.router, prefix="/planning")
api_v1.include_router(billing_v1.router, prefix="/billing")
api_v1.include_router(registrations_v1.router, prefix="/registrations")
api_v1.include_router(sepa_mandates_v1.router, prefix="/sepa-mandates")
api_v1.include_router(newsletter_v1.router, prefix="/newsletter")
api_v1.include_router(admin_v1.router, prefix="/admin")

app.include_router(api_v1)

# Prometheus metrics - standard /metrics/prometheus path, intentionally unversioned
app.include_router(prometheus.router)


@app.get("/", response_model=RootResponse)
def read_root() -> RootResponse:
    """Root endpoint - API information"""
    return RootResponse(
        message=f"Welcome to the {BRAND_NAME} API!",
        version=API_VERSION,
        docs="/docs",
        environment=settings.environment,
    )
