"""
TERRAIN Screener API

FastAPI server exposing the opportunity screener for the frontend.
"""
import logging
import threading
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from terrain import __version__
from terrain.screener.exceptions import (
    CatalogLoadError,
    IndicationNotFoundError,
    ScreenerValidationError,
    UsageLimitReachedError,
)
from terrain.screener.models import (
    Competitor,
    IndicationDetail,
    LandscapeStats,
    ScreenerRequest,
    ScreenerResponse,
    ScreenerSummary,
)
from terrain.screener.protocols import UsageGate
from terrain.screener.service import ScreenerService
from terrain.utils.config import get_settings
from terrain.utils.logging import setup_logging_from_settings

logger = logging.getLogger(__name__)

SCREENER_FEATURE = "opportunity_screener"

# Lazily created so importing the app does not read the catalog
_service: Optional[ScreenerService] = None
_service_lock = threading.Lock()


class AllowAllUsageGate:
    """Usage gate that never limits. Replace via dependency override."""

    def check(self, user_id: Optional[str], feature: str) -> None:
        return None

    def record(self, user_id: Optional[str], feature: str) -> None:
        return None


_usage_gate: UsageGate = AllowAllUsageGate()


def get_service() -> ScreenerService:
    """Get or create the screener service."""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                from terrain.screener.factory import create_screener_service
                _service = create_screener_service()
    return _service


def get_usage_gate() -> UsageGate:
    return _usage_gate


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging_from_settings(get_settings())
    logger.info("TERRAIN screener API starting up...")
    yield
    logger.info("TERRAIN screener API shutting down...")


# Create FastAPI app
app = FastAPI(
    title="TERRAIN Screener API",
    description="Opportunity scoring and competitive crowding for disease indications",
    version=__version__,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Error handlers
# ============================================================================

@app.exception_handler(ScreenerValidationError)
async def screener_validation_handler(request: Request, exc: ScreenerValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "validation_error", "field": exc.field, "detail": exc.message},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    # Drop the leading "body" / "query" location segment
    loc = [str(part) for part in first.get("loc", ())][1:]
    field = ".".join(loc) or "request"
    logger.warning(f"Rejected request to {request.url.path}: {field}: {first.get('msg')}")
    return JSONResponse(
        status_code=400,
        content={"error": "validation_error", "field": field, "detail": first.get("msg", "invalid value")},
    )


@app.exception_handler(UsageLimitReachedError)
async def usage_limit_handler(request: Request, exc: UsageLimitReachedError):
    return JSONResponse(
        status_code=403,
        content={
            "error": "limit_reached",
            "feature": exc.feature,
            "limit": exc.limit,
            "plan": exc.plan,
            "detail": str(exc),
        },
    )


@app.exception_handler(IndicationNotFoundError)
async def not_found_handler(request: Request, exc: IndicationNotFoundError):
    return JSONResponse(status_code=404, content={"error": "not_found", "detail": str(exc)})


@app.exception_handler(CatalogLoadError)
async def catalog_error_handler(request: Request, exc: CatalogLoadError):
    logger.error(f"Catalog unavailable: {exc}")
    return JSONResponse(status_code=503, content={"error": "catalog_unavailable", "detail": str(exc)})


# ============================================================================
# Request/Response Models
# ============================================================================

class HealthResponse(BaseModel):
    status: str
    version: str


class LandscapeRequest(BaseModel):
    competitors: List[Competitor] = Field(default_factory=list, description="Competitor records to aggregate")
    estimate_shares: bool = Field(default=False, description="Estimate market shares when none are supplied")


# ============================================================================
# API Endpoints
# ============================================================================

@app.get("/", response_model=HealthResponse)
async def root():
    """Root endpoint - health check."""
    return HealthResponse(status="healthy", version=__version__)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@app.post("/api/v1/screener", response_model=ScreenerResponse)
def run_screener(
    request: ScreenerRequest,
    service: ScreenerService = Depends(get_service),
    gate: UsageGate = Depends(get_usage_gate),
    x_user_id: Optional[str] = Header(default=None),
):
    """
    Score, filter, sort and page the indication catalog.

    The usage gate runs before any scoring; a rejected request never
    reaches the screener.
    """
    gate.check(x_user_id, SCREENER_FEATURE)
    response = service.screen(request)
    gate.record(x_user_id, SCREENER_FEATURE)
    return response


@app.post("/api/v1/screener/landscape", response_model=LandscapeStats)
def landscape(request: LandscapeRequest, service: ScreenerService = Depends(get_service)):
    """Phase, company and mechanism aggregations for a competitor list."""
    return service.landscape(request.competitors, estimate_shares=request.estimate_shares)


@app.get("/api/v1/screener/indications/{name}", response_model=IndicationDetail)
def indication_detail(
    name: str,
    estimate_shares: bool = False,
    service: ScreenerService = Depends(get_service),
):
    """Scored row plus landscape for one indication."""
    return service.indication_detail(name, estimate_shares=estimate_shares)


@app.get("/api/v1/screener/therapy-areas", response_model=List[str])
def therapy_areas(service: ScreenerService = Depends(get_service)):
    """Therapy areas available for filtering."""
    return service.therapy_areas()


@app.get("/api/v1/screener/summary", response_model=ScreenerSummary)
def summary(service: ScreenerService = Depends(get_service)):
    """Catalog-wide screener statistics."""
    return service.summary()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
