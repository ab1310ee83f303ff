"""
Pytest configuration and fixtures for slabby tests.
"""

import json

import httpx
import pytest

GRAPHQL_URL = "https://api.slab.com/v1/graphql"
BASE_URL = "https://test.slab.com"


class GraphQLRecorder:
    """MockTransport handler that records requests and replays queued responses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._responses: list = []

    def queue(self, *responses):
        self._responses.extend(responses)

    def queue_json(self, payload, status_code: int = 200):
        self.queue(httpx.Response(status_code, json=payload))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def settings():
    """Settings pointing at the test team."""
    from slabby.config import Settings

    return Settings(api_token="test-token", team="test", graphql_url=GRAPHQL_URL)


@pytest.fixture
def recorder():
    return GraphQLRecorder()


@pytest.fixture
async def http_client(recorder):
    async with httpx.AsyncClient(transport=httpx.MockTransport(recorder)) as client:
        yield client


@pytest.fixture
def executor(settings, http_client):
    from slabby.graphql import GraphQLExecutor

    return GraphQLExecutor(settings, http_client)


@pytest.fixture
def slab_client(settings, http_client):
    """SlabGraphQLClient wired to the recording transport."""
    from slabby.client import create_client

    return create_client(settings, http_client)


@pytest.fixture
def raw_post():
    """A post record as returned by the GraphQL API."""
    return {
        "id": "123",
        "title": "Test Post",
        "content": [{"insert": "Test content"}, {"insert": "\n\n"}],
        "insertedAt": "2024-01-01T00:00:00Z",
        "updatedAt": "2024-01-02T00:00:00Z",
        "publishedAt": "2024-01-01T00:00:00Z",
        "owner": {
            "id": "user1",
            "name": "Test User",
            "email": "test@example.com",
        },
    }


class FakeKnowledgeBase:
    """In-memory KnowledgeBaseClient for tool tests."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.error: Exception | None = None
        self.post = None
        self.search_result = None
        self.list_result = None

    def _record(self, *call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error

    async def get_post(self, post_id):
        self._record("get_post", post_id)
        return self.post

    async def update_post(self, post_id, content):
        self._record("update_post", post_id, content)
        return self.post.model_copy(update={"content": content.rstrip("\n") + "\n\n"})

    async def search_posts(self, query):
        self._record("search_posts", query)
        return self.search_result

    async def list_posts(self, topic_id=None):
        self._record("list_posts", topic_id)
        return self.list_result


@pytest.fixture
def fake_kb():
    from slabby.models import Author, ListResult, Post, SearchResult

    kb = FakeKnowledgeBase()
    kb.post = Post(
        id="abc123",
        title="Runbook",
        content="Step one\n\n",
        url=f"{BASE_URL}/posts/abc123",
        updated_at="2024-01-02T00:00:00Z",
        created_by=Author(id="u1", display_name="Alice"),
    )
    kb.search_result = SearchResult(posts=[kb.post], total_count=1)
    kb.list_result = ListResult(posts=[kb.post], total_count=1)
    return kb
