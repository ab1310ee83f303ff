"""
Pydantic models for Slabby MCP Server.

Contains the canonical post shape and the search/list result containers.
"""

from pydantic import BaseModel, Field


class Author(BaseModel):
    """Model for the owner of a post."""

    id: str | None = None
    display_name: str | None = None
    email: str | None = None


class Post(BaseModel):
    """Model for a post, with content always in plain text."""

    id: str
    title: str = ""
    content: str = ""
    url: str = ""
    created_at: str | None = None
    updated_at: str | None = None
    created_by: Author | None = None
    snippet: str | None = None


class SearchResult(BaseModel):
    """Model for search results. total_count is the number of posts in the page."""

    posts: list[Post] = Field(default_factory=list)
    total_count: int = 0


class ListResult(BaseModel):
    """Model for post listings, optionally scoped to a topic."""

    posts: list[Post] = Field(default_factory=list)
    total_count: int = 0
    topic_id: str | None = None
