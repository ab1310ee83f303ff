"""
Utility functions and exceptions for Slabby MCP Server.

Contains the error taxonomy shared by every layer and post identifier parsing.
"""

from urllib.parse import urlparse


# ============== Exceptions ==============

class SlabError(Exception):
    """Base class for errors surfaced to tool callers."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SlabNetworkError(SlabError):
    """Raised when the request could not be sent or the response could not be parsed."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class SlabApiError(SlabError):
    """Raised when Slab rejected the request or returned no data."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class InvalidInputError(SlabError):
    """Raised when a tool argument cannot be used."""
    pass


class ConfigurationError(SlabError):
    """Raised at startup when a required setting is missing."""
    pass


# ============== Helper Functions ==============

def extract_post_id(value: str) -> str:
    """Extract a post ID from a post URL or return a bare ID unchanged.

    Args:
        value: A post ID ("abc123") or URL ("https://team.slab.com/posts/abc123")

    Returns:
        The post ID

    Raises:
        InvalidInputError: If the value is empty or a URL without a final path segment
    """
    if not value or not value.strip():
        raise InvalidInputError("Post ID cannot be empty")

    value = value.strip()
    if not value.startswith("http"):
        return value

    post_id = urlparse(value).path.split("/")[-1]
    if not post_id:
        raise InvalidInputError("Could not extract post ID from URL")
    return post_id
