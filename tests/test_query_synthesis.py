import pytest

from prospect_engine.models.icp_profile import ICP_PROFILES, get_icp_profile
from prospect_engine.stages.stage1_queries import QuerySynthesisStage


@pytest.fixture
def stage():
    return QuerySynthesisStage()


def test_keywords_then_roles_per_state(stage):
    queries = stage.process(get_icp_profile("wholesaler"), ["Texas"])
    assert queries == [
        "Texas wholesaler",
        "Texas wholesale real estate",
        "Texas assignment investor",
        "Wholesaler Texas",
        "Real Estate Wholesaler Texas",
    ]


def test_truncated_to_ten_and_three_states(stage):
    queries = stage.process(get_icp_profile("flipper"), ["Texas", "Florida", "Ohio", "Utah"])
    assert len(queries) == 10
    assert queries[5] == "Florida house flipper"
    assert not any("Ohio" in q or "Utah" in q for q in queries)


def test_city_replaces_states(stage):
    queries = stage.process(get_icp_profile("agent"), ["Texas", "Florida"], city="Austin")
    assert len(queries) == 5
    assert all("Austin" in q for q in queries)
    assert not any("Texas" in q for q in queries)


def test_empty_geography_yields_no_queries(stage):
    assert stage.process(get_icp_profile("agent"), []) == []
    assert stage.process(get_icp_profile("agent"), [], city="") == []


def test_deterministic(stage):
    profile = get_icp_profile("buy_hold")
    assert stage.process(profile, ["Georgia", "Ohio"]) == stage.process(profile, ["Georgia", "Ohio"])


@pytest.mark.parametrize("icp_id", sorted(ICP_PROFILES))
def test_queries_use_only_profile_vocabulary(stage, icp_id):
    profile = ICP_PROFILES[icp_id]
    states = ["Texas", "New York", "Arizona", "Maine"]
    queries = stage.process(profile, states)

    allowed = set()
    for geo in states:
        allowed.update(f"{geo} {kw}" for kw in profile.positive_keywords)
        allowed.update(f"{role} {geo}" for role in profile.role_titles)

    assert 0 < len(queries) <= 10
    assert set(queries) <= allowed


def test_custom_limits():
    stage = QuerySynthesisStage(limits={"max_queries": 3})
    assert len(stage.process(get_icp_profile("institutional"), ["Texas"])) == 3
