import pytest

from prospect_engine.errors import ProspectStoreError
from prospect_engine.models.icp_profile import get_icp_profile
from prospect_engine.models.schemas import (
    CandidateScore,
    ConfidenceTier,
    IntentHeat,
    ReconcileAction,
    SearchCandidate,
)
from prospect_engine.stages.stage4_reconcile import ProspectReconcileStage, classify_intent_heat

from conftest import WORKSPACE

URL = "https://www.linkedin.com/in/jane-doe-123?trk=abc"
CANONICAL = "https://www.linkedin.com/in/jane-doe-123"


def _scored(score=5, confidence=ConfidenceTier.HIGH):
    return CandidateScore(
        kept=True,
        score=score,
        confidence=confidence,
        role_detected="Wholesaler",
        full_name="Jane Doe 123",
        canonical_url=CANONICAL,
    )


def _sight(stage, scored=None, workspace_id=WORKSPACE):
    return stage.process(
        workspace_id=workspace_id,
        profile=get_icp_profile("wholesaler"),
        scored=scored or _scored(),
        candidate=SearchCandidate(url=URL, title="Jane Doe - Wholesaler"),
        geo_state="Texas",
        geo_city=None,
    )


@pytest.mark.parametrize("times_seen, elapsed_days, expected", [
    (1, 0, IntentHeat.COLD),
    (2, 0, IntentHeat.WARM),
    (2, 10, IntentHeat.WARM),
    (2, 30, IntentHeat.WARM),
    (2, 30.5, IntentHeat.COLD),
    (3, 12, IntentHeat.HOT),
    (3, 14, IntentHeat.HOT),
    (3, 15, IntentHeat.WARM),
    (5, 40, IntentHeat.COLD),
])
def test_classify_intent_heat(times_seen, elapsed_days, expected):
    assert classify_intent_heat(times_seen, elapsed_days) == expected


def test_first_sighting_creates_cold_prospect(store, clock):
    stage = ProspectReconcileStage(store, clock=clock)
    result = _sight(stage)

    assert result.action == ReconcileAction.CREATED
    prospect = result.prospect
    assert prospect.id
    assert prospect.times_seen == 1
    assert prospect.intent_heat == IntentHeat.COLD
    assert prospect.linkedin_url == URL
    assert prospect.source_url == URL
    assert prospect.linkedin_url_canonical == CANONICAL
    assert prospect.icp == "wholesaler"
    assert prospect.role_detected == "Wholesaler"
    assert prospect.geo_state == "Texas"
    assert prospect.first_seen_at == clock.now
    assert prospect.created_at == clock.now


def test_same_day_resighting_updates_single_row(store, clock):
    stage = ProspectReconcileStage(store, clock=clock)
    first = _sight(stage)
    clock.advance(hours=2)
    second = _sight(stage)

    assert second.action == ReconcileAction.UPDATED
    assert second.prospect.id == first.prospect.id
    assert second.prospect.times_seen == 2
    assert second.prospect.intent_heat == IntentHeat.WARM
    assert len(store.list_recent(WORKSPACE, 10)) == 1


def test_heat_escalates_day_0_10_12(store, clock):
    stage = ProspectReconcileStage(store, clock=clock)
    _sight(stage)

    clock.advance(days=10)
    day10 = _sight(stage).prospect
    assert day10.times_seen == 2
    assert day10.intent_heat == IntentHeat.WARM

    clock.advance(days=2)
    day12 = _sight(stage).prospect
    assert day12.times_seen == 3
    assert day12.intent_heat == IntentHeat.HOT


def test_heat_regresses_after_long_gap(store, clock):
    stage = ProspectReconcileStage(store, clock=clock)
    _sight(stage)
    _sight(stage)
    assert _sight(stage).prospect.intent_heat == IntentHeat.HOT

    clock.advance(days=60)
    later = _sight(stage).prospect
    assert later.times_seen == 4
    assert later.intent_heat == IntentHeat.COLD


def test_update_overwrites_score_but_keeps_first_seen(store, clock):
    stage = ProspectReconcileStage(store, clock=clock)
    first = _sight(stage).prospect

    clock.advance(days=3)
    updated = _sight(stage, scored=_scored(score=2, confidence=ConfidenceTier.MEDIUM)).prospect

    assert updated.icp_match_score == 2
    assert updated.icp_confidence == ConfidenceTier.MEDIUM
    assert updated.first_seen_at == first.first_seen_at
    assert updated.created_at == first.created_at
    assert updated.full_name == "Jane Doe 123"


def test_workspaces_are_isolated(store, clock):
    stage = ProspectReconcileStage(store, clock=clock)
    _sight(stage)
    other = _sight(stage, workspace_id="00000000-0000-0000-0000-000000000002")

    assert other.action == ReconcileAction.CREATED
    assert other.prospect.times_seen == 1


def test_dropped_candidate_is_rejected(store, clock):
    stage = ProspectReconcileStage(store, clock=clock)
    with pytest.raises(ValueError):
        _sight(stage, scored=CandidateScore(kept=False, score=-3))


def test_store_rejects_duplicate_identity(store, clock):
    stage = ProspectReconcileStage(store, clock=clock)
    prospect = _sight(stage).prospect

    with pytest.raises(ProspectStoreError):
        store.insert(prospect.model_copy(update={"id": None}))


def test_update_of_missing_prospect_fails(store):
    with pytest.raises(ProspectStoreError):
        store.update_sighting(
            "does-not-exist",
            times_seen=2,
            intent_heat=IntentHeat.WARM,
            icp_match_score=4,
            icp_confidence=ConfidenceTier.HIGH,
        )
