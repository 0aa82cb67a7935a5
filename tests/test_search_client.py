from unittest.mock import Mock

import pytest
import requests

from prospect_engine.errors import SearchAuthError, SearchProviderError
from prospect_engine.stages.stage2_search import ExaSearchClient, SearchStage


def _response(status_code=200, payload=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json = Mock(return_value=payload if payload is not None else {"results": []})
    return response


def _client(*responses, max_attempts=2):
    session = Mock()
    session.post = Mock(side_effect=list(responses))
    sleep = Mock()
    client = ExaSearchClient(
        api_key="test-key",
        config={"max_attempts": max_attempts, "timeout_seconds": 5},
        session=session,
        sleep=sleep,
    )
    return client, session, sleep


def test_parses_results_and_sends_linkedin_query():
    payload = {"results": [
        {"url": "https://www.linkedin.com/in/jane", "title": "Jane", "text": "Wholesaler"},
        {"title": "no url"},
        {"url": "https://www.linkedin.com/in/bob"},
    ]}
    client, session, _ = _client(_response(200, payload))

    results = client.search("Texas wholesaler")

    assert [r.url for r in results] == [
        "https://www.linkedin.com/in/jane",
        "https://www.linkedin.com/in/bob",
    ]
    assert results[0].title == "Jane"
    assert results[1].text is None

    args, kwargs = session.post.call_args
    assert args[0] == "https://api.exa.ai/search"
    assert kwargs["json"]["query"] == "Texas wholesaler"
    assert kwargs["json"]["type"] == "neural"
    assert kwargs["json"]["numResults"] == 10
    assert kwargs["json"]["includeDomains"] == ["linkedin.com"]
    assert kwargs["json"]["contents"] == {"text": {"maxCharacters": 500}}
    assert kwargs["headers"]["x-api-key"] == "test-key"
    assert kwargs["timeout"] == 5


def test_auth_failure_is_not_retried():
    client, session, sleep = _client(_response(401), _response(200))
    with pytest.raises(SearchAuthError):
        client.search("q")
    assert session.post.call_count == 1
    sleep.assert_not_called()


def test_server_error_is_retried():
    payload = {"results": [{"url": "https://www.linkedin.com/in/jane"}]}
    client, session, sleep = _client(_response(503), _response(200, payload))

    results = client.search("q")

    assert len(results) == 1
    assert session.post.call_count == 2
    assert sleep.call_count == 1


def test_retries_are_bounded():
    client, session, _ = _client(_response(500), _response(500), _response(200))
    with pytest.raises(SearchProviderError) as exc:
        client.search("q")
    assert exc.value.status_code == 500
    assert session.post.call_count == 2


def test_client_error_is_not_retried():
    client, session, _ = _client(_response(400), _response(200))
    with pytest.raises(SearchProviderError):
        client.search("q")
    assert session.post.call_count == 1


def test_timeout_becomes_provider_error():
    client, session, _ = _client(requests.Timeout("slow"), requests.Timeout("slow"))
    with pytest.raises(SearchProviderError):
        client.search("q")
    assert session.post.call_count == 2


def test_missing_api_key_returns_nothing():
    session = Mock()
    client = ExaSearchClient(api_key="", session=session)
    assert client.search("q") == []
    session.post.assert_not_called()


def test_search_stage_fails_open_on_provider_error():
    client = Mock()
    client.search = Mock(side_effect=SearchProviderError("HTTP 502", status_code=502))
    stage = SearchStage(client)

    assert stage.process("q") == []
    assert stage.failures == 1


def test_search_stage_fails_open_on_unexpected_error():
    client = Mock()
    client.search = Mock(side_effect=RuntimeError("boom"))
    stage = SearchStage(client)

    assert stage.process("q") == []
    assert stage.failures == 1


def test_search_stage_propagates_auth_error():
    client = Mock()
    client.search = Mock(side_effect=SearchAuthError("bad key", status_code=401))
    with pytest.raises(SearchAuthError):
        SearchStage(client).process("q")
