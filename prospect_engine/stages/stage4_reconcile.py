"""
Stage 4: Prospect Reconciliation
================================
Turns one kept candidate into exactly one prospect mutation.

- No prospect with this canonical URL in the workspace: insert it cold,
  seen once.
- Otherwise: increment times_seen, recompute intent heat from the elapsed
  time since first sighting, and overwrite score and confidence with this
  sighting's values.

Heat is recomputed on every sighting, so a prospect seen again after a long
gap drops back to cold.
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional

from ..models.schemas import (
    CandidateScore,
    IntentHeat,
    Prospect,
    ReconcileAction,
    ReconcileResult,
    SearchCandidate,
)
from ..models.icp_profile import ICPProfile
from ..config.settings import INTENT_HEAT_RULES
from ..storage.prospect_store import ProspectStore

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 60 * 60 * 24


def classify_intent_heat(
    times_seen: int,
    elapsed_days: float,
    rules: Optional[Dict[str, Dict[str, float]]] = None,
) -> IntentHeat:
    """Heat tier from sighting count and days since first sighting"""
    rules = rules or INTENT_HEAT_RULES
    hot, warm = rules["hot"], rules["warm"]
    if times_seen >= hot["min_times_seen"] and elapsed_days <= hot["max_days"]:
        return IntentHeat.HOT
    if times_seen >= warm["min_times_seen"] and elapsed_days <= warm["max_days"]:
        return IntentHeat.WARM
    return IntentHeat.COLD


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProspectReconcileStage:
    """
    Stage 4: Insert or update the prospect for a kept candidate.
    """

    def __init__(
        self,
        store: ProspectStore,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.clock = clock or _utcnow

    def process(
        self,
        workspace_id: str,
        profile: ICPProfile,
        scored: CandidateScore,
        candidate: SearchCandidate,
        geo_state: Optional[str] = None,
        geo_city: Optional[str] = None,
    ) -> ReconcileResult:
        """
        Apply one sighting.

        Raises:
            ProspectStoreError: store unavailable or constraint violated
        """
        if not scored.kept:
            raise ValueError("Only kept candidates can be reconciled")

        now = self.clock()
        existing = self.store.find(workspace_id, scored.canonical_url)

        if existing is None:
            prospect = self.store.insert(Prospect(
                workspace_id=workspace_id,
                full_name=scored.full_name,
                linkedin_url=candidate.url,
                linkedin_url_canonical=scored.canonical_url,
                source_url=candidate.url,
                icp=profile.id,
                role_detected=scored.role_detected,
                icp_match_score=scored.score,
                icp_confidence=scored.confidence,
                intent_heat=IntentHeat.COLD,
                geo_state=geo_state,
                geo_city=geo_city,
                times_seen=1,
                first_seen_at=now,
                created_at=now,
            ))
            logger.debug("Created prospect %s (%s)", prospect.linkedin_url_canonical, profile.id)
            return ReconcileResult(action=ReconcileAction.CREATED, prospect=prospect)

        times_seen = (existing.times_seen or 1) + 1
        elapsed_days = (now - existing.first_seen_at).total_seconds() / SECONDS_PER_DAY
        intent_heat = classify_intent_heat(times_seen, elapsed_days)

        prospect = self.store.update_sighting(
            existing.id,
            times_seen=times_seen,
            intent_heat=intent_heat,
            icp_match_score=scored.score,
            icp_confidence=scored.confidence,
        )
        logger.debug(
            "Updated prospect %s: seen %d times over %.1f days, heat=%s",
            prospect.linkedin_url_canonical, times_seen, elapsed_days, intent_heat.value,
        )
        return ReconcileResult(action=ReconcileAction.UPDATED, prospect=prospect)
