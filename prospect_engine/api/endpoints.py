"""
FastAPI Endpoints for the REI Prospect Engine
=============================================
RESTful API for running prospecting lanes and reading prospects.

Base URL: http://localhost:8000

Endpoints:
- GET  /                          - API info
- GET  /api/health                - Health check
- GET  /api/rei-icp/config        - ICP profiles, strategies, states
- POST /api/rei-icp-execute       - Execute a prospecting run
- GET  /api/prospects             - List prospects with filters
- GET  /api/stats                 - Get engine statistics
"""

import logging
import os
from fastapi import FastAPI, Query
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Optional
from datetime import datetime, timezone
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from ..models.schemas import (
    ConfidenceTier,
    IntentHeat,
    ProspectFilter,
    ProspectListResponse,
    RunRequest,
    RunResult,
)
from ..config.settings import DEFAULT_WORKSPACE_ID, STRATEGIES, US_STATES
from ..errors import ProspectStoreError, RunValidationError
from ..engine import ProspectRunEngine, create_engine

logger = logging.getLogger(__name__)


# =============================================================================
# FastAPI App Initialization
# =============================================================================

app = FastAPI(
    title="REI Prospect Engine API",
    description="""
## Real-Estate Investor Prospecting

Finds LinkedIn profiles matching real-estate investor ICPs, scores them and
keeps a deduplicated prospect list with confidence and intent heat.

### Pipeline:
- **Query Synthesis**: ICP keywords and roles crossed with geography
- **Search**: Exa neural search restricted to LinkedIn
- **Scoring**: Keyword (+2), role (+2), geography (+1), coaching penalty (-3)
- **Reconcile**: Dedup by canonical profile URL, heat from repeat sightings
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - Allow all origins for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Engine Initialization
# =============================================================================

# Built on first request; creating it opens (and may create) the database
default_engine: Optional[ProspectRunEngine] = None


def get_default_engine() -> ProspectRunEngine:
    global default_engine
    if default_engine is None:
        default_engine = create_engine(
            database_url=os.getenv("DATABASE_URL"),
            exa_api_key=os.getenv("EXA_API_KEY"),
        )
    return default_engine


# =============================================================================
# Health & Info Endpoints
# =============================================================================

@app.get("/", tags=["Info"])
async def root():
    """API information and available endpoints"""
    return {
        "service": "REI Prospect Engine",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "Execute Run": "POST /api/rei-icp-execute",
            "Prospects": "GET /api/prospects",
            "Config": "GET /api/rei-icp/config",
            "Health": "GET /api/health",
        }
    }


@app.get("/api/health", tags=["Info"])
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "service": "REI Prospect Engine",
        "version": "1.0.0",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "search_configured": bool(os.getenv("EXA_API_KEY")),
    }


@app.get("/api/rei-icp/config", tags=["Info"])
async def get_config():
    """ICP profiles, search strategies and selectable states"""
    return {
        "icps": [
            {
                "id": profile.id,
                "label": profile.label,
                "positive_keywords": list(profile.positive_keywords),
                "role_titles": list(profile.role_titles),
                "negative_keywords": list(profile.negative_keywords),
            }
            for profile in get_default_engine().registry.values()
        ],
        "strategies": STRATEGIES,
        "states": US_STATES,
    }


# =============================================================================
# Run & Prospect Endpoints
# =============================================================================

@app.post("/api/rei-icp-execute", response_model=RunResult, tags=["Prospecting"])
def execute_run(request: RunRequest):
    """
    Execute a prospecting run synchronously.

    Each requested ICP is processed as a lane; the response carries per-lane
    counters and run totals.
    """
    return get_default_engine().execute_run(request)


@app.get("/api/prospects", response_model=ProspectListResponse, tags=["Prospecting"])
def list_prospects(
    workspace_id: str = Query(DEFAULT_WORKSPACE_ID, description="Workspace to read"),
    icp: Optional[str] = Query(None, description="ICP identifier"),
    confidence: Optional[ConfidenceTier] = Query(None, description="Confidence tier"),
    intent_heat: Optional[IntentHeat] = Query(None, alias="intentHeat", description="Intent heat tier"),
    state: Optional[str] = Query(None, description="Geographic state"),
):
    """
    Most recently created prospects first, filtered after the page cap.
    """
    filters = ProspectFilter(icp=icp, confidence=confidence, intent_heat=intent_heat, state=state)
    engine = get_default_engine()
    prospects = engine.list_prospects(workspace_id, filters)
    return ProspectListResponse(
        prospects=prospects,
        summary=engine.summarize_prospects(prospects),
    )


# =============================================================================
# Statistics
# =============================================================================

@app.get("/api/stats", tags=["Info"])
async def get_stats():
    """Get engine statistics"""
    return {"default_engine": get_default_engine().get_stats()}


# =============================================================================
# Error Handlers
# =============================================================================

@app.exception_handler(RunValidationError)
async def validation_exception_handler(request, exc):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request, exc):
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part not in ("body", "query"))
        problems.append(f"{field}: {err.get('msg')}" if field else err.get("msg", "invalid"))
    return JSONResponse(
        status_code=400,
        content={"error": f"Invalid request: {'; '.join(problems)}"},
    )


@app.exception_handler(ProspectStoreError)
async def store_exception_handler(request, exc):
    logger.error("Prospect store error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Prospect store unavailable", "detail": str(exc)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "type": type(exc).__name__,
        }
    )
