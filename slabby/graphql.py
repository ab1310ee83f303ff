"""
GraphQL transport for Slabby MCP Server.

Contains the GraphQL documents and the GraphQLExecutor, which performs a single
request/response exchange and classifies every failure as a network or API error.
"""

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from .config import Settings
from .utils import SlabApiError, SlabNetworkError

logger = structlog.get_logger(__name__)


POST_FIELDS = """
  id
  title
  content
  insertedAt
  updatedAt
  publishedAt
  owner {
    id
    name
    email
  }
"""

GET_POST_QUERY = f"""
query GetPost($id: ID!) {{
  post(id: $id) {{{POST_FIELDS}  }}
}}
"""

UPDATE_POST_CONTENT_MUTATION = f"""
mutation UpdatePostContent($id: ID!, $delta: Json!) {{
  updatePostContent(id: $id, delta: $delta) {{{POST_FIELDS}  }}
}}
"""

SEARCH_POSTS_QUERY = f"""
query SearchPosts($query: String!, $first: Int) {{
  search(query: $query, first: $first, types: [POST]) {{
    pageInfo {{
      hasNextPage
      endCursor
    }}
    edges {{
      cursor
      node {{
        ... on PostSearchResult {{
          title
          highlight
          post {{{POST_FIELDS}          }}
        }}
      }}
    }}
  }}
}}
"""

TOPIC_POSTS_QUERY = f"""
query GetTopicPosts($topicId: ID!) {{
  topic(id: $topicId) {{
    id
    name
    posts {{{POST_FIELDS}    }}
  }}
}}
"""

ORGANIZATION_POSTS_QUERY = f"""
query GetOrganizationPosts {{
  organization {{
    id
    posts {{{POST_FIELDS}    }}
  }}
}}
"""


class GraphQLErrorItem(BaseModel):
    """Model for one entry of a GraphQL errors list."""

    message: str | None = None


class GraphQLResponse(BaseModel):
    """Model for the envelope of a GraphQL response."""

    data: dict[str, Any] | None = None
    errors: list[GraphQLErrorItem] | None = None


class GraphQLExecutor:
    """Sends GraphQL requests to Slab with the configured credentials."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self.url = settings.graphql_url
        self.http_client = http_client
        self._headers = {
            "Authorization": settings.authorization,
            "Content-Type": "application/json",
        }

    async def execute(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a query and return its data payload.

        Args:
            query: GraphQL document
            variables: Variables for the document

        Returns:
            The "data" object of the response

        Raises:
            SlabNetworkError: If the request fails in transit or the body is not a GraphQL response
            SlabApiError: If Slab answers with an error status, GraphQL errors, or no data
        """
        payload = {"query": query, "variables": variables or {}}

        try:
            response = await self.http_client.post(self.url, json=payload, headers=self._headers)
        except httpx.HTTPError as e:
            logger.warning("graphql_request_failed", url=self.url, error=str(e))
            raise SlabNetworkError(f"Network error: {e}", e) from e

        if not response.is_success:
            raise SlabApiError(f"Slab API error ({response.status_code}): {response.text}", response.status_code)

        try:
            body = GraphQLResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise SlabNetworkError(f"Failed to parse JSON response: {e}", e) from e

        if body.errors:
            messages = ", ".join(err.message or "Unknown error" for err in body.errors)
            logger.info("graphql_errors", status=response.status_code, errors=messages)
            raise SlabApiError(f"GraphQL error: {messages}", response.status_code)

        if body.data is None:
            raise SlabApiError("Slab API returned no data", response.status_code)

        return body.data
