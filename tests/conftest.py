import os
import sys
from datetime import datetime, timedelta, timezone

import pytest


def _ensure_repo_on_path() -> None:
    root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if root not in sys.path:
        sys.path.append(root)


_ensure_repo_on_path()
# Keep the API module off disk and off the network
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EXA_API_KEY"] = ""

from prospect_engine.models.schemas import SearchCandidate
from prospect_engine.storage.database import create_db_engine, create_session_factory, init_db
from prospect_engine.storage.prospect_store import InMemoryProspectStore, SqlProspectStore

WORKSPACE = "00000000-0000-0000-0000-000000000001"


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


class StubSearchClient:
    """Returns canned candidates per query; unknown queries return nothing"""

    def __init__(self, results=None, default=None, raises=None):
        self.results = results or {}
        self.default = default or []
        self.raises = raises or {}
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        for needle, exc in self.raises.items():
            if needle in query:
                raise exc
        return list(self.results.get(query, self.default))


def candidate(slug, title="", text=""):
    return SearchCandidate(url=f"https://www.linkedin.com/in/{slug}", title=title, text=text)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store():
    return InMemoryProspectStore()


@pytest.fixture
def sql_store():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield SqlProspectStore(create_session_factory(engine))
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")
