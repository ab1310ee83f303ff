"""
MCP Tools module for Slabby MCP Server.

Contains the tool definitions and the call_tool dispatcher. Every failure is
returned to the caller as an error result, never raised.
"""

from typing import Any

import structlog
from mcp.server import Server
from mcp.types import CallToolResult, TextContent, Tool

from .client import KnowledgeBaseClient
from .formatters import (
    format_list_results,
    format_post_response,
    format_search_results,
    format_update_response,
)
from .utils import InvalidInputError, SlabError, extract_post_id

logger = structlog.get_logger(__name__)

SERVER_NAME = "slabby"

GET_POST_TOOL = "slab__get_post"
UPDATE_POST_TOOL = "slab__update_post"
SEARCH_TOOL = "slab__search"
LIST_POSTS_TOOL = "slab__list_posts"

TOOLS = [
    Tool(
        name=GET_POST_TOOL,
        description="Fetch a Slab post by ID or URL. Returns the post content as plain text.",
        inputSchema={
            "type": "object",
            "properties": {
                "postId": {
                    "type": "string",
                    "description": "The Slab post ID or full post URL "
                                   "(e.g., 'abc123' or 'https://team.slab.com/posts/abc123')"
                }
            },
            "required": ["postId"]
        }
    ),
    Tool(
        name=UPDATE_POST_TOOL,
        description="Replace the content of a Slab post. Edits are attributed to the API token's user account.",
        inputSchema={
            "type": "object",
            "properties": {
                "postId": {
                    "type": "string",
                    "description": "The Slab post ID or full post URL"
                },
                "content": {
                    "type": "string",
                    "description": "The new content for the post"
                }
            },
            "required": ["postId", "content"]
        }
    ),
    Tool(
        name=SEARCH_TOOL,
        description="Search for posts across your Slab workspace.",
        inputSchema={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query string"
                }
            },
            "required": ["query"]
        }
    ),
    Tool(
        name=LIST_POSTS_TOOL,
        description="List posts in your Slab workspace, optionally filtered by topic.",
        inputSchema={
            "type": "object",
            "properties": {
                "topicId": {
                    "type": "string",
                    "description": "Optional topic ID to filter posts"
                }
            }
        }
    ),
]


def _text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def _required(arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str):
        raise InvalidInputError(f"Missing required argument: {key}")
    return value


async def _run_tool(client: KnowledgeBaseClient, name: str, arguments: dict[str, Any]) -> str:
    if name == GET_POST_TOOL:
        post_id = extract_post_id(_required(arguments, "postId"))
        post = await client.get_post(post_id)
        return format_post_response(post)

    elif name == UPDATE_POST_TOOL:
        post_id = extract_post_id(_required(arguments, "postId"))
        content = _required(arguments, "content")
        post = await client.update_post(post_id, content)
        return format_update_response(post)

    elif name == SEARCH_TOOL:
        query = _required(arguments, "query")
        results = await client.search_posts(query)
        return format_search_results(results, query)

    elif name == LIST_POSTS_TOOL:
        topic_id = arguments.get("topicId") or None
        results = await client.list_posts(topic_id)
        return format_list_results(results)

    raise InvalidInputError(f"Unknown tool: {name}")


async def dispatch_tool(
    client: KnowledgeBaseClient, name: str, arguments: dict[str, Any] | None
) -> CallToolResult:
    """Run one tool call against the client and render the outcome as text."""
    if arguments is None:
        return _text_result("Error: Missing required arguments", is_error=True)

    try:
        text = await _run_tool(client, name, arguments)
    except SlabError as e:
        logger.warning("tool_call_failed", tool=name, error_type=type(e).__name__, error=e.message)
        return _text_result(f"Error: {e.message}", is_error=True)
    except Exception as e:
        logger.exception("tool_call_crashed", tool=name)
        return _text_result(f"Error: {e}", is_error=True)

    return _text_result(text)


def create_server(client: KnowledgeBaseClient) -> Server:
    """Create an MCP server exposing the Slab tools for the given client."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> CallToolResult:
        """Handle tool calls."""
        return await dispatch_tool(client, name, arguments)

    return server
