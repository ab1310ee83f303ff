"""
Tests for the MCP tool dispatcher and server wiring.
"""

import httpx
import pytest

from slabby.utils import SlabApiError, SlabNetworkError


def result_text(result) -> str:
    assert len(result.content) == 1
    return result.content[0].text


class TestDispatchTool:
    """Tests for dispatch_tool."""

    async def test_get_post_by_url(self, fake_kb):
        """Test a post URL is reduced to its ID before the lookup."""
        from slabby.tools import dispatch_tool

        result = await dispatch_tool(fake_kb, "slab__get_post", {"postId": "https://test.slab.com/posts/abc123"})

        assert not result.isError
        assert fake_kb.calls == [("get_post", "abc123")]
        assert "# Runbook" in result_text(result)
        assert "**Author:** Alice" in result_text(result)

    async def test_get_post_by_id(self, fake_kb):
        from slabby.tools import dispatch_tool

        await dispatch_tool(fake_kb, "slab__get_post", {"postId": "abc123"})

        assert fake_kb.calls == [("get_post", "abc123")]

    async def test_update_post(self, fake_kb):
        from slabby.tools import dispatch_tool

        result = await dispatch_tool(fake_kb, "slab__update_post", {"postId": "abc123", "content": "New text"})

        assert not result.isError
        assert fake_kb.calls == [("update_post", "abc123", "New text")]
        assert result_text(result).startswith("Post updated successfully.")
        assert result_text(result).endswith("New text\n\n")

    async def test_search(self, fake_kb):
        from slabby.tools import dispatch_tool

        result = await dispatch_tool(fake_kb, "slab__search", {"query": "runbook"})

        assert fake_kb.calls == [("search_posts", "runbook")]
        assert 'Search Results for "runbook"' in result_text(result)

    async def test_list_posts_without_topic(self, fake_kb):
        from slabby.tools import dispatch_tool

        result = await dispatch_tool(fake_kb, "slab__list_posts", {})

        assert fake_kb.calls == [("list_posts", None)]
        assert "Found 1 post(s)" in result_text(result)

    async def test_list_posts_with_topic(self, fake_kb):
        from slabby.tools import dispatch_tool

        await dispatch_tool(fake_kb, "slab__list_posts", {"topicId": "topic-1"})

        assert fake_kb.calls == [("list_posts", "topic-1")]

    async def test_invalid_url(self, fake_kb):
        """Test an unusable URL is reported without calling the client."""
        from slabby.tools import dispatch_tool

        result = await dispatch_tool(fake_kb, "slab__get_post", {"postId": "https://test.slab.com/posts/"})

        assert result.isError
        assert result_text(result) == "Error: Could not extract post ID from URL"
        assert fake_kb.calls == []

    async def test_missing_arguments(self, fake_kb):
        from slabby.tools import dispatch_tool

        result = await dispatch_tool(fake_kb, "slab__get_post", None)

        assert result.isError
        assert result_text(result) == "Error: Missing required arguments"

    async def test_missing_required_argument(self, fake_kb):
        from slabby.tools import dispatch_tool

        result = await dispatch_tool(fake_kb, "slab__update_post", {"postId": "abc123"})

        assert result.isError
        assert "content" in result_text(result)
        assert fake_kb.calls == []

    async def test_unknown_tool(self, fake_kb):
        from slabby.tools import dispatch_tool

        result = await dispatch_tool(fake_kb, "slab__delete_post", {})

        assert result.isError
        assert result_text(result) == "Error: Unknown tool: slab__delete_post"

    @pytest.mark.parametrize(
        "error",
        [
            SlabApiError("Slab API error (403): Forbidden", 403),
            SlabNetworkError("Network error: Connection refused", httpx.ConnectError("Connection refused")),
        ],
    )
    async def test_client_errors_become_text(self, fake_kb, error):
        """Test lower-layer failures are returned, not raised."""
        from slabby.tools import dispatch_tool

        fake_kb.error = error

        result = await dispatch_tool(fake_kb, "slab__get_post", {"postId": "abc123"})

        assert result.isError
        assert result_text(result) == f"Error: {error.message}"

    async def test_unexpected_errors_become_text(self, fake_kb):
        from slabby.tools import dispatch_tool

        fake_kb.error = RuntimeError("boom")

        result = await dispatch_tool(fake_kb, "slab__search", {"query": "x"})

        assert result.isError
        assert result_text(result) == "Error: boom"


class TestEndToEnd:
    """Tests running tools through the real client over a mock transport."""

    async def test_get_post(self, slab_client, recorder, raw_post):
        from slabby.tools import dispatch_tool

        recorder.queue_json({"data": {"post": raw_post}})

        result = await dispatch_tool(slab_client, "slab__get_post", {"postId": "https://test.slab.com/posts/123"})

        assert not result.isError
        assert "Test content" in result_text(result)
        assert recorder.bodies[0]["variables"] == {"id": "123"}

    async def test_http_failure(self, slab_client, recorder):
        from slabby.tools import dispatch_tool

        recorder.queue(httpx.Response(403, text="Forbidden"))

        result = await dispatch_tool(slab_client, "slab__search", {"query": "x"})

        assert result.isError
        assert "403" in result_text(result)
        assert "Forbidden" in result_text(result)


class TestServer:
    """Tests for the MCP server built by create_server."""

    def test_tool_definitions(self):
        from slabby.tools import TOOLS

        names = [tool.name for tool in TOOLS]

        assert names == ["slab__get_post", "slab__update_post", "slab__search", "slab__list_posts"]
        required = {tool.name: tool.inputSchema.get("required", []) for tool in TOOLS}
        assert required["slab__update_post"] == ["postId", "content"]
        assert required["slab__list_posts"] == []

    def test_create_server(self, fake_kb):
        from mcp.types import CallToolRequest, ListToolsRequest

        from slabby.tools import create_server

        server = create_server(fake_kb)

        assert server.name == "slabby"
        assert CallToolRequest in server.request_handlers
        assert ListToolsRequest in server.request_handlers
