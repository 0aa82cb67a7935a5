"""
REI Prospect Engine - Run Orchestrator
======================================
Drives one run across its ICP lanes:
  Stage 1: Query Synthesis → Stage 2: Search →
  Stage 3: Filter & Score → Stage 4: Reconcile

Lanes, queries and candidates are processed one at a time. Each lane is a
small state machine (pending → running → completed | failed) and stops
as soon as its kept count reaches the per-ICP quota.
"""

import logging
import uuid
from collections import Counter
from datetime import datetime
from typing import Callable, Dict, Any, List, Mapping, Optional

from .models.schemas import (
    LaneResult,
    LaneStatus,
    Prospect,
    ProspectFilter,
    ProspectSummary,
    ReconcileAction,
    RunRequest,
    RunResult,
    RunStatus,
    SearchCandidate,
)
from .models.icp_profile import ICPProfile, ICP_PROFILES
from .config.settings import DEFAULT_WORKSPACE_ID, PROSPECT_PAGE_SIZE
from .errors import (
    LaneStateError,
    ProspectStoreError,
    RunValidationError,
    SearchAuthError,
)
from .stages.stage1_queries import QuerySynthesisStage
from .stages.stage2_search import ExaSearchClient, SearchStage
from .stages.stage3_scoring import CandidateScoringStage
from .stages.stage4_reconcile import ProspectReconcileStage
from .storage.prospect_store import ProspectStore, InMemoryProspectStore

logger = logging.getLogger(__name__)


_LANE_TRANSITIONS = {
    LaneStatus.PENDING: {LaneStatus.RUNNING},
    LaneStatus.RUNNING: {LaneStatus.COMPLETED, LaneStatus.FAILED},
    LaneStatus.COMPLETED: set(),
    LaneStatus.FAILED: set(),
}


class LaneRun:
    """
    Mutable state of one ICP lane during a run.
    """

    def __init__(self, icp: str, quota: int):
        self.quota = quota
        self.result = LaneResult(icp=icp)

    @property
    def icp(self) -> str:
        return self.result.icp

    @property
    def status(self) -> LaneStatus:
        return self.result.status

    @property
    def quota_reached(self) -> bool:
        return self.result.kept >= self.quota

    def transition(self, status: LaneStatus):
        if status not in _LANE_TRANSITIONS[self.status]:
            raise LaneStateError(
                f"Lane {self.icp}: cannot move from {self.status.value} to {status.value}"
            )
        self.result.status = status

    def plan_queries(self, count: int):
        self.result.queries_executed = count

    def record_results(self, results_found: int):
        self.result.results_found += results_found

    def record_kept(self):
        self.result.kept += 1

    def record_dropped(self):
        self.result.dropped += 1

    def fail(self, error: str):
        self.result.error = error
        self.transition(LaneStatus.FAILED)


class ProspectRunEngine:
    """
    Main engine that orchestrates prospecting runs and serves the prospect
    read surface.
    """

    def __init__(
        self,
        search_client: Optional[ExaSearchClient] = None,
        store: Optional[ProspectStore] = None,
        registry: Optional[Mapping[str, ICPProfile]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the engine.

        Args:
            search_client: Object with a `search(query)` method (Exa by default)
            store: Prospect store (in-memory if not provided)
            registry: ICP profiles by identifier (shipped profiles by default)
            clock: UTC clock used for sighting timestamps
        """
        self.registry = registry if registry is not None else ICP_PROFILES
        self.store = store if store is not None else InMemoryProspectStore()

        # Initialize stages
        self.stage1 = QuerySynthesisStage()
        self.stage2 = SearchStage(search_client)
        self.stage3 = CandidateScoringStage()
        self.stage4 = ProspectReconcileStage(self.store, clock=clock)

        self.stats = self._empty_stats()

    # =========================================================================
    # Runs
    # =========================================================================

    def validate_run_request(self, request: RunRequest):
        """
        Reject incomplete requests before any provider call.

        Raises:
            RunValidationError: with a caller-facing message
        """
        missing = []
        if not request.workspace_id:
            missing.append("workspace_id")
        if not request.icps:
            missing.append("icps")
        if not request.states and not request.city:
            missing.append("states")
        if missing:
            raise RunValidationError(f"Missing required fields: {', '.join(missing)}")

        unknown = [icp for icp in request.icps if icp not in self.registry]
        if unknown:
            raise RunValidationError(f"Unknown ICP: {', '.join(unknown)}")

        if request.results_per_icp < 1:
            raise RunValidationError("results_per_icp must be at least 1")

    def execute_run(self, request: RunRequest) -> RunResult:
        """
        Execute one run to completion.

        Args:
            request: Run parameters

        Returns:
            RunResult with per-lane summaries and totals

        Raises:
            RunValidationError: request incomplete
            ProspectStoreError: store failed; the whole run fails
        """
        self.validate_run_request(request)

        run_id = str(uuid.uuid4())
        geo_state = request.states[0] if request.states else None
        self.stats["runs_executed"] += 1

        logger.info(
            "Run %s started: icps=%s states=%s city=%s strategy=%s quota=%d",
            run_id, request.icps, request.states, request.city,
            request.strategy, request.results_per_icp,
        )

        lanes: List[LaneResult] = []
        for icp_id in request.icps:
            lane = LaneRun(icp_id, request.results_per_icp)
            try:
                self._run_lane(lane, request, geo_state)
            except ProspectStoreError:
                logger.error("Run %s failed on lane %s: prospect store error", run_id, icp_id)
                raise
            lanes.append(lane.result)

        completed = [lane for lane in lanes if lane.status == LaneStatus.COMPLETED]
        result = RunResult(
            run_id=run_id,
            status=RunStatus.COMPLETED if completed else RunStatus.FAILED,
            lanes=lanes,
            total_kept=sum(lane.kept for lane in lanes),
            total_dropped=sum(lane.dropped for lane in lanes),
        )
        logger.info(
            "Run %s %s: kept=%d dropped=%d",
            run_id, result.status.value, result.total_kept, result.total_dropped,
        )
        return result

    def _run_lane(self, lane: LaneRun, request: RunRequest, geo_state: Optional[str]):
        profile = self.registry[lane.icp]
        lane.transition(LaneStatus.RUNNING)

        queries = self.stage1.process(profile, request.states, request.city)
        lane.plan_queries(len(queries))
        if not queries:
            logger.info("Lane %s has no queries to run", lane.icp)

        try:
            for query in queries:
                if lane.quota_reached:
                    break
                candidates = self.stage2.process(query)
                lane.record_results(len(candidates))
                self.stats["queries_issued"] += 1

                for candidate in candidates:
                    if self._process_candidate(request, profile, candidate, geo_state):
                        lane.record_kept()
                    else:
                        lane.record_dropped()
                    if lane.quota_reached:
                        break
        except SearchAuthError as e:
            self.stats["lanes_failed"] += 1
            logger.error("Lane %s failed: %s", lane.icp, e)
            lane.fail(str(e))
            return

        lane.transition(LaneStatus.COMPLETED)
        logger.info(
            "Lane %s completed: queries=%d found=%d kept=%d dropped=%d",
            lane.icp, lane.result.queries_executed, lane.result.results_found,
            lane.result.kept, lane.result.dropped,
        )

    def _process_candidate(
        self,
        request: RunRequest,
        profile: ICPProfile,
        candidate: SearchCandidate,
        geo_state: Optional[str],
    ) -> bool:
        """Score one candidate and reconcile it if kept. Returns kept."""
        self.stats["candidates_scored"] += 1
        scored = self.stage3.process(candidate, profile, geo_state)
        if not scored.kept:
            return False

        reconciled = self.stage4.process(
            workspace_id=request.workspace_id,
            profile=profile,
            scored=scored,
            candidate=candidate,
            geo_state=geo_state,
            geo_city=request.city or None,
        )
        if reconciled.action == ReconcileAction.CREATED:
            self.stats["prospects_created"] += 1
        else:
            self.stats["prospects_updated"] += 1
        return True

    # =========================================================================
    # Prospect read surface
    # =========================================================================

    def list_prospects(
        self,
        workspace_id: Optional[str] = None,
        filters: Optional[ProspectFilter] = None,
    ) -> List[Prospect]:
        """
        Newest prospects for a workspace, capped at PROSPECT_PAGE_SIZE and
        then filtered.
        """
        prospects = self.store.list_recent(workspace_id or DEFAULT_WORKSPACE_ID, PROSPECT_PAGE_SIZE)
        if not filters:
            return prospects

        if filters.icp:
            prospects = [p for p in prospects if p.icp == filters.icp]
        if filters.confidence:
            prospects = [p for p in prospects if p.icp_confidence == filters.confidence]
        if filters.intent_heat:
            prospects = [p for p in prospects if p.intent_heat == filters.intent_heat]
        if filters.state:
            prospects = [p for p in prospects if p.geo_state == filters.state]
        return prospects

    def summarize_prospects(self, prospects: List[Prospect]) -> ProspectSummary:
        """Counts by confidence tier and intent heat"""
        by_confidence = Counter(p.icp_confidence.value for p in prospects)
        by_heat = Counter(p.intent_heat.value for p in prospects)
        return ProspectSummary(
            total=len(prospects),
            by_confidence={tier: by_confidence.get(tier, 0) for tier in ("high", "medium", "low")},
            by_intent_heat={heat: by_heat.get(heat, 0) for heat in ("hot", "warm", "cold")},
        )

    # =========================================================================
    # Statistics
    # =========================================================================

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics"""
        stats = self.stats.copy()
        stats["provider_failures"] = self.stage2.failures
        if stats["candidates_scored"] > 0:
            kept = stats["prospects_created"] + stats["prospects_updated"]
            stats["keep_rate"] = round(kept / stats["candidates_scored"] * 100, 1)
        return stats

    def reset_stats(self):
        """Reset engine statistics"""
        self.stats = self._empty_stats()
        self.stage2.failures = 0

    def _empty_stats(self) -> Dict[str, int]:
        return {
            "runs_executed": 0,
            "lanes_failed": 0,
            "queries_issued": 0,
            "candidates_scored": 0,
            "prospects_created": 0,
            "prospects_updated": 0,
        }


# =============================================================================
# Convenience Functions
# =============================================================================

def create_engine(
    database_url: Optional[str] = None,
    exa_api_key: Optional[str] = None,
) -> ProspectRunEngine:
    """
    Factory function to create an engine backed by the SQL prospect store.

    Args:
        database_url: SQLAlchemy URL (DATABASE_URL by default)
        exa_api_key: Exa API key (EXA_API_KEY by default)

    Returns:
        Configured ProspectRunEngine instance
    """
    from .storage.database import create_db_engine, create_session_factory, init_db
    from .storage.prospect_store import SqlProspectStore

    db_engine = create_db_engine(database_url)
    init_db(db_engine)
    store = SqlProspectStore(create_session_factory(db_engine))
    return ProspectRunEngine(search_client=ExaSearchClient(api_key=exa_api_key), store=store)
