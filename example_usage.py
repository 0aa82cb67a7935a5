"""
REI Prospect Engine - Usage Examples
====================================
This file demonstrates how to use the prospect engine
both programmatically and via the API.
"""

# =============================================================================
# EXAMPLE 1: Query Synthesis & Scoring (no network)
# =============================================================================

def example_scoring():
    """Build queries and score a single candidate"""
    from prospect_engine.models.icp_profile import get_icp_profile
    from prospect_engine.models.schemas import SearchCandidate
    from prospect_engine.stages import QuerySynthesisStage, CandidateScoringStage

    profile = get_icp_profile("wholesaler")

    queries = QuerySynthesisStage().process(profile, states=["Texas", "Florida"])
    print(f"Queries for {profile.label}:")
    for q in queries:
        print(f"  - {q}")

    candidate = SearchCandidate(
        url="https://www.linkedin.com/in/jane-doe-123?trk=public_profile",
        title="Jane Doe - Acquisitions Manager - Houston, Texas",
        text="Wholesaler focused on off market deals across Texas.",
    )
    scored = CandidateScoringStage().process(candidate, profile, geo_state="Texas")

    print(f"\nCandidate: {scored.full_name}")
    print(f"  Kept: {scored.kept}")
    print(f"  Score: {scored.score} ({scored.confidence.value})")
    print(f"  Role: {scored.role_detected}")
    print(f"  Canonical URL: {scored.canonical_url}")

    return scored


# =============================================================================
# EXAMPLE 2: Full Run with a Stub Search Client
# =============================================================================

class _StubSearchClient:
    """Returns the same candidates for every query"""

    def search(self, query):
        from prospect_engine.models.schemas import SearchCandidate
        return [
            SearchCandidate(
                url="https://www.linkedin.com/in/john-smith",
                title="John Smith | Real Estate Wholesaler",
                text="Wholesale real estate in Dallas, Texas",
            ),
            SearchCandidate(
                url="https://www.linkedin.com/company/acme-homes",
                title="Acme Homes",
                text="We buy houses",
            ),
        ]


def example_run():
    """Execute a run against an in-memory store"""
    from prospect_engine.engine import ProspectRunEngine
    from prospect_engine.models.schemas import RunRequest
    from prospect_engine.config.settings import DEFAULT_WORKSPACE_ID

    engine = ProspectRunEngine(search_client=_StubSearchClient())

    request = RunRequest(
        workspace_id=DEFAULT_WORKSPACE_ID,
        icps=["wholesaler", "flipper"],
        states=["Texas"],
        results_per_icp=5,
    )

    print("=" * 60)
    print("PROSPECTING RUN")
    print("=" * 60)

    result = engine.execute_run(request)
    print(f"Run {result.run_id}: {result.status.value}")
    for lane in result.lanes:
        print(
            f"  {lane.icp:<14} {lane.status.value:<10} queries={lane.queries_executed} "
            f"found={lane.results_found} kept={lane.kept} dropped={lane.dropped}"
        )
    print(f"Total kept: {result.total_kept}, dropped: {result.total_dropped}")

    # Same profile seen on every query: one prospect, heat escalated
    for prospect in engine.list_prospects(DEFAULT_WORKSPACE_ID):
        print(
            f"\n{prospect.full_name}: seen {prospect.times_seen}x, "
            f"heat={prospect.intent_heat.value}, confidence={prospect.icp_confidence.value}"
        )

    return result


# =============================================================================
# EXAMPLE 3: API Usage with requests
# =============================================================================

def example_api_usage():
    """Use the API via HTTP requests"""
    import requests

    BASE_URL = "http://localhost:8000"

    print("=" * 60)
    print("API USAGE EXAMPLE")
    print("=" * 60)
    print("Make sure the server is running: python main.py")
    print()

    payload = {
        "workspace_id": "00000000-0000-0000-0000-000000000001",
        "icps": ["wholesaler", "buy_hold"],
        "states": ["Texas", "Georgia"],
        "strategy": "balanced",
        "results_per_icp": 25,
    }

    print("Request payload:")
    print(f"  POST {BASE_URL}/api/rei-icp-execute")
    print(f"  {payload}")
    print(f"  GET  {BASE_URL}/api/prospects?icp=wholesaler&intentHeat=hot")

    # Uncomment to actually make the requests:
    # response = requests.post(f"{BASE_URL}/api/rei-icp-execute", json=payload)
    # print(f"\nResponse: {response.json()}")
    # response = requests.get(f"{BASE_URL}/api/prospects", params={"icp": "wholesaler"})
    # print(f"\nProspects: {len(response.json()['prospects'])}")


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("REI PROSPECT ENGINE - USAGE EXAMPLES")
    print("=" * 60 + "\n")

    print("\n[Example 1: Scoring]")
    example_scoring()

    print("\n" + "-" * 60)
    print("\n[Example 2: Run]")
    example_run()

    print("\n" + "-" * 60)
    print("\n[Example 3: API Usage]")
    example_api_usage()

    print("\n" + "=" * 60)
    print("EXAMPLES COMPLETE")
    print("=" * 60)
