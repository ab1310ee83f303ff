"""
Markdown rendering of tool results for Slabby MCP Server.
"""

from datetime import datetime

from .models import ListResult, Post, SearchResult


def format_timestamp(value: str | None) -> str:
    """Render an ISO-8601 timestamp, falling back to the raw value."""
    if not value:
        return "Unknown"
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        return value


def _author(post: Post) -> str:
    if post.created_by and post.created_by.display_name:
        return post.created_by.display_name
    return "Unknown"


def format_post_response(post: Post) -> str:
    output = f"# {post.title or 'Untitled'}\n\n"
    output += f"**Author:** {_author(post)}\n"
    output += f"**Last Updated:** {format_timestamp(post.updated_at)}\n"
    output += f"**URL:** {post.url}\n\n"
    output += "---\n\n"
    output += post.content
    return output


def format_update_response(post: Post) -> str:
    return f"Post updated successfully.\n\n{format_post_response(post)}"


def format_search_results(results: SearchResult, query: str) -> str:
    if not results.posts:
        return f'No results found for query: "{query}"'

    output = f'# Search Results for "{query}"\n\nFound {len(results.posts)} result(s):\n\n'
    for post in results.posts:
        output += f"## {post.title or 'Untitled'}\n"
        output += f"**Author:** {_author(post)}\n"
        output += f"**URL:** {post.url}\n"
        if post.snippet:
            output += f"**Snippet:** {post.snippet}\n"
        output += "\n"

    return output


def format_list_results(results: ListResult) -> str:
    if not results.posts:
        return "No posts found."

    heading = f"# Posts in topic {results.topic_id}" if results.topic_id else "# Posts"
    output = f"{heading}\n\nFound {len(results.posts)} post(s):\n\n"
    for post in results.posts:
        output += f"## {post.title or 'Untitled'}\n"
        output += f"**Author:** {_author(post)}\n"
        output += f"**Last Updated:** {format_timestamp(post.updated_at)}\n"
        output += f"**URL:** {post.url}\n\n"

    return output
