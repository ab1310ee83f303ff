"""
Knowledge-base client for Slabby MCP Server.

Defines the KnowledgeBaseClient interface used by the MCP tools and its Slab
GraphQL implementation.
"""

from collections.abc import Mapping
from typing import Any, Protocol

import httpx
import structlog

from .config import Settings
from .delta import build_replacement
from .graphql import (
    GET_POST_QUERY,
    ORGANIZATION_POSTS_QUERY,
    SEARCH_POSTS_QUERY,
    TOPIC_POSTS_QUERY,
    UPDATE_POST_CONTENT_MUTATION,
    GraphQLExecutor,
)
from .models import ListResult, Post, SearchResult
from .transform import transform_post, transform_posts
from .utils import SlabApiError, SlabError, SlabNetworkError

logger = structlog.get_logger(__name__)

WRITE_FAILED_PREFIX = "Update failed after reading the post"


class KnowledgeBaseClient(Protocol):
    """Operations the MCP tools need from a knowledge base."""

    async def get_post(self, post_id: str) -> Post: ...

    async def update_post(self, post_id: str, content: str) -> Post: ...

    async def search_posts(self, query: str) -> SearchResult: ...

    async def list_posts(self, topic_id: str | None = None) -> ListResult: ...


class SlabGraphQLClient:
    """KnowledgeBaseClient backed by the Slab GraphQL API.

    update_post is a read followed by a write. Slab offers no compare-and-swap,
    so an edit made between the two calls is overwritten, and a failed write
    leaves the post unchanged. Nothing is retried.
    """

    def __init__(self, executor: GraphQLExecutor, base_url: str, search_limit: int = 20):
        self.executor = executor
        self.base_url = base_url
        self.search_limit = search_limit

    async def _fetch_raw_post(self, post_id: str) -> Mapping[str, Any]:
        data = await self.executor.execute(GET_POST_QUERY, {"id": post_id})
        record = data.get("post")
        if not isinstance(record, Mapping):
            raise SlabApiError(f"Post not found: {post_id}")
        return record

    async def get_post(self, post_id: str) -> Post:
        record = await self._fetch_raw_post(post_id)
        return transform_post(record, self.base_url)

    async def update_post(self, post_id: str, content: str) -> Post:
        """Replace the content of a post with plain text.

        The current content delta is read first so the edit can delete all of it.
        """
        try:
            current = await self._fetch_raw_post(post_id)
        except SlabError as e:
            logger.warning("post_update_failed", post_id=post_id, stage="read", error=e.message)
            raise

        delta = build_replacement(current.get("content"), content)

        try:
            data = await self.executor.execute(UPDATE_POST_CONTENT_MUTATION, {"id": post_id, "delta": delta})
        except SlabNetworkError as e:
            logger.warning("post_update_failed", post_id=post_id, stage="write", error=e.message)
            raise SlabNetworkError(f"{WRITE_FAILED_PREFIX}: {e.message}", e.cause) from e
        except SlabApiError as e:
            logger.warning("post_update_failed", post_id=post_id, stage="write", error=e.message)
            raise SlabApiError(f"{WRITE_FAILED_PREFIX}: {e.message}", e.status) from e

        record = data.get("updatePostContent")
        if not isinstance(record, Mapping):
            raise SlabApiError(f"Update returned no post: {post_id}")

        logger.info("post_updated", post_id=post_id)
        return transform_post(record, self.base_url)

    async def search_posts(self, query: str) -> SearchResult:
        data = await self.executor.execute(SEARCH_POSTS_QUERY, {"query": query, "first": self.search_limit})
        search = data.get("search") or {}
        if not isinstance(search, Mapping):
            raise SlabNetworkError(f"Unexpected search payload: {type(search).__name__}")
        edges = search.get("edges") or []
        if not isinstance(edges, list):
            raise SlabNetworkError(f"Unexpected search edges: {type(edges).__name__}")

        records = []
        for edge in edges:
            node = edge.get("node") if isinstance(edge, Mapping) else None
            if not isinstance(node, Mapping):
                continue
            post = node.get("post")
            if isinstance(post, Mapping):
                record = dict(post)
                if node.get("highlight") is not None:
                    record.setdefault("highlight", node["highlight"])
                records.append(record)
            else:
                records.append(node)

        posts = transform_posts(records, self.base_url)
        # Search pagination has no total count, so report the page size
        return SearchResult(posts=posts, total_count=len(posts))

    async def list_posts(self, topic_id: str | None = None) -> ListResult:
        if topic_id:
            data = await self.executor.execute(TOPIC_POSTS_QUERY, {"topicId": topic_id})
            container = data.get("topic")
            if not isinstance(container, Mapping):
                raise SlabApiError(f"Topic not found: {topic_id}")
        else:
            data = await self.executor.execute(ORGANIZATION_POSTS_QUERY, {})
            container = data.get("organization") or {}
            if not isinstance(container, Mapping):
                raise SlabNetworkError(f"Unexpected organization payload: {type(container).__name__}")

        posts = transform_posts(container.get("posts"), self.base_url)
        return ListResult(posts=posts, total_count=len(posts), topic_id=topic_id or None)


def create_client(settings: Settings, http_client: httpx.AsyncClient) -> KnowledgeBaseClient:
    """Build the knowledge-base client for the configured deployment."""
    executor = GraphQLExecutor(settings, http_client)
    return SlabGraphQLClient(executor, settings.base_url, settings.search_limit)
