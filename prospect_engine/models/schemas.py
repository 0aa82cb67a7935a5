"""
Pydantic schemas for the REI Prospect Engine
"""

from enum import Enum
from typing import List, Dict, Optional
from pydantic import BaseModel, Field
from datetime import datetime, timezone

from ..config.settings import DEFAULT_WORKSPACE_ID


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================

class ConfidenceTier(str, Enum):
    """Score-derived quality bucket"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IntentHeat(str, Enum):
    """Recency/frequency-derived urgency tier"""
    COLD = "cold"
    WARM = "warm"
    HOT = "hot"


class LaneStatus(str, Enum):
    """Per-ICP lane lifecycle"""
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class RunStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"


class DropReason(str, Enum):
    URL_FILTER = "url_filter"
    LOW_SCORE = "low_score"


class ReconcileAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"


# =============================================================================
# PIPELINE SCHEMAS
# =============================================================================

class SearchCandidate(BaseModel):
    """One search-result item from the provider"""
    url: str
    title: Optional[str] = None
    text: Optional[str] = None


class CandidateScore(BaseModel):
    """Result from Stage 3: keep/drop decision and score for one candidate"""
    kept: bool
    score: int = 0
    confidence: Optional[ConfidenceTier] = None
    role_detected: Optional[str] = None
    drop_reason: Optional[DropReason] = None

    # Only populated for kept candidates
    full_name: Optional[str] = None
    canonical_url: Optional[str] = None


class Prospect(BaseModel):
    """Durable prospect record, unique per (workspace_id, linkedin_url_canonical)"""
    id: Optional[str] = None
    workspace_id: str
    full_name: str
    linkedin_url: str
    linkedin_url_canonical: str
    source_url: Optional[str] = None
    icp: str
    role_detected: Optional[str] = None
    icp_match_score: int
    icp_confidence: ConfidenceTier
    intent_heat: IntentHeat = IntentHeat.COLD
    geo_state: Optional[str] = None
    geo_city: Optional[str] = None
    times_seen: int = 1
    first_seen_at: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)

    class Config:
        from_attributes = True


class ReconcileResult(BaseModel):
    """Result from Stage 4: the single mutation applied for a kept candidate"""
    action: ReconcileAction
    prospect: Prospect


# =============================================================================
# RUN SCHEMAS
# =============================================================================

class RunRequest(BaseModel):
    """Request to execute one prospecting run"""
    workspace_id: Optional[str] = None
    icps: List[str] = Field(default_factory=list)
    states: List[str] = Field(default_factory=list)
    city: Optional[str] = None
    strategy: str = "balanced"
    results_per_icp: int = 50

    class Config:
        json_schema_extra = {
            "example": {
                "workspace_id": DEFAULT_WORKSPACE_ID,
                "icps": ["wholesaler", "flipper"],
                "states": ["Texas", "Florida"],
                "strategy": "balanced",
                "results_per_icp": 25,
            }
        }


class LaneResult(BaseModel):
    """Per-ICP lane summary"""
    icp: str
    status: LaneStatus = LaneStatus.PENDING
    queries_executed: int = 0
    results_found: int = 0
    kept: int = 0
    dropped: int = 0
    error: Optional[str] = None


class RunResult(BaseModel):
    """Aggregate of one orchestrated execution"""
    run_id: str
    status: RunStatus
    lanes: List[LaneResult] = Field(default_factory=list)
    total_kept: int = 0
    total_dropped: int = 0


# =============================================================================
# READ SURFACE SCHEMAS
# =============================================================================

class ProspectFilter(BaseModel):
    """Optional filters for the prospect read surface"""
    icp: Optional[str] = None
    confidence: Optional[ConfidenceTier] = None
    intent_heat: Optional[IntentHeat] = None
    state: Optional[str] = None


class ProspectSummary(BaseModel):
    total: int = 0
    by_confidence: Dict[str, int] = Field(default_factory=dict)
    by_intent_heat: Dict[str, int] = Field(default_factory=dict)


class ProspectListResponse(BaseModel):
    prospects: List[Prospect]
    summary: ProspectSummary
