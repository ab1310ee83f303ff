"""
Post normalization for Slabby MCP Server.

Raw post records come in two field-naming conventions: the GraphQL schema
(insertedAt, owner.name) and the REST-flavoured one (createdAt, createdBy.displayName).
Each canonical field is looked up through a closed, ordered list of aliases.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from .delta import flatten
from .models import Author, Post

CREATED_AT_KEYS = ("insertedAt", "createdAt", "created_at")
UPDATED_AT_KEYS = ("updatedAt", "updated_at")
AUTHOR_KEYS = ("owner", "createdBy", "created_by")
DISPLAY_NAME_KEYS = ("name", "displayName", "display_name")
SNIPPET_KEYS = ("snippet", "highlight")


def first_present(record: Mapping[str, Any], keys: Iterable[str]) -> Any:
    """Return the value of the first alias present with a non-null value."""
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def transform_author(record: Mapping[str, Any]) -> Author | None:
    """Build the author from whichever owner alias is a mapping."""
    for key in AUTHOR_KEYS:
        owner = record.get(key)
        if isinstance(owner, Mapping):
            return Author(
                id=_optional_str(owner.get("id")),
                display_name=_optional_str(first_present(owner, DISPLAY_NAME_KEYS)),
                email=_optional_str(owner.get("email")),
            )
    return None


def post_url(base_url: str, post_id: str) -> str:
    return f"{base_url.rstrip('/')}/posts/{post_id}"


def transform_post(record: Mapping[str, Any], base_url: str) -> Post:
    """Normalize a raw post record into a Post.

    Args:
        record: Raw post record from Slab
        base_url: Team web URL used when the record has no url

    Returns:
        The canonical Post, with content flattened to plain text
    """
    post_id = str(record.get("id") or "")

    content = record.get("content")
    if not isinstance(content, str):
        content = flatten(content)

    snippet = first_present(record, SNIPPET_KEYS)

    return Post(
        id=post_id,
        title=record.get("title") or "",
        content=content,
        url=record.get("url") or post_url(base_url, post_id),
        created_at=_optional_str(first_present(record, CREATED_AT_KEYS)),
        updated_at=_optional_str(first_present(record, UPDATED_AT_KEYS)),
        created_by=transform_author(record),
        snippet=snippet if isinstance(snippet, str) else None,
    )


def transform_posts(records: Any, base_url: str) -> list[Post]:
    """Transform a list of records, keeping their order and skipping non-records."""
    if not isinstance(records, list):
        return []
    return [transform_post(r, base_url) for r in records if isinstance(r, Mapping)]
