import pytest
from pydantic import ValidationError

from prospect_engine.models.icp_profile import (
    ICP_PROFILES,
    build_icp_registry,
    get_icp_profile,
)


def test_ships_five_profiles():
    assert set(ICP_PROFILES) == {"wholesaler", "flipper", "buy_hold", "agent", "institutional"}
    for icp_id, profile in ICP_PROFILES.items():
        assert profile.id == icp_id
        assert profile.positive_keywords and profile.role_titles and profile.negative_keywords


def test_default_weights_and_thresholds():
    profile = get_icp_profile("agent")
    assert profile.scoring_rules.keyword_match == 2
    assert profile.scoring_rules.role_match == 2
    assert profile.scoring_rules.geo_match == 1
    assert profile.scoring_rules.coaching_penalty == -3
    assert profile.score_thresholds.keep == 4
    assert profile.score_thresholds.low_confidence == 2
    assert profile.score_thresholds.drop == 1


def test_keyword_order_is_preserved():
    profile = get_icp_profile("wholesaler")
    assert profile.positive_keywords[:3] == ("wholesaler", "wholesale real estate", "assignment investor")
    assert profile.role_titles[:2] == ("Wholesaler", "Real Estate Wholesaler")


def test_registry_cannot_be_mutated():
    with pytest.raises(TypeError):
        ICP_PROFILES["custom"] = get_icp_profile("agent")
    with pytest.raises(TypeError):
        del ICP_PROFILES["agent"]


def test_profiles_are_frozen():
    profile = get_icp_profile("flipper")
    with pytest.raises(ValidationError):
        profile.label = "Something else"
    assert isinstance(profile.positive_keywords, tuple)


def test_unknown_profile_returns_none():
    assert get_icp_profile("landscaper") is None


def test_build_registry_from_custom_table():
    registry = build_icp_registry({
        "lender": {
            "id": "lender",
            "label": "Private Lenders",
            "positive_keywords": ["private lender", "hard money"],
            "role_titles": ["Private Lender"],
        }
    })
    profile = registry["lender"]
    assert profile.negative_keywords == ()
    assert profile.allow_url_patterns == ("linkedin.com/in/",)
    assert profile.scoring_rules.keyword_match == 2
