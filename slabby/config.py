"""
Configuration module for Slabby MCP Server.

Uses pydantic-settings for configuration management with environment variable support.
Environment variables use SLAB_ prefix (e.g., SLAB_API_TOKEN).
"""

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils import ConfigurationError

DEFAULT_GRAPHQL_URL = "https://api.slab.com/v1/graphql"
TEAM_URL_TEMPLATE = "https://{team}.slab.com"

REQUIRED_SETTINGS = ("api_token", "team")


class Settings(BaseSettings):
    """Application settings with environment variable support.

    Environment variables:
    - SLAB_API_TOKEN: API token used to authenticate against Slab (required)
    - SLAB_TEAM: Team/workspace subdomain, e.g. "acme" for acme.slab.com (required)
    - SLAB_GRAPHQL_URL: GraphQL endpoint
    - SLAB_AUTH_SCHEME: Authorization header scheme ("token" or "Bearer")
    - SLAB_SEARCH_LIMIT: Maximum number of search results requested
    - SLAB_REQUEST_TIMEOUT: Request timeout in seconds (unset means no timeout)
    - SLAB_LOG_LEVEL: Log level name
    """

    api_token: str
    team: str
    graphql_url: str = DEFAULT_GRAPHQL_URL
    auth_scheme: str = "token"
    search_limit: int = 20
    request_timeout: float | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="SLAB_", frozen=True)

    @property
    def base_url(self) -> str:
        """Web base URL of the team, used to build post links."""
        return TEAM_URL_TEMPLATE.format(team=self.team)

    @property
    def authorization(self) -> str:
        return f"{self.auth_scheme} {self.api_token}"


def _env_name(field: str) -> str:
    return f"SLAB_{field.upper()}"


def load_settings() -> Settings:
    """Load settings from the environment.

    Returns:
        A frozen Settings instance

    Raises:
        ConfigurationError: If a required setting is missing or invalid
    """
    try:
        settings = Settings()
    except ValidationError as e:
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else ""
            if error["type"] == "missing" and field in REQUIRED_SETTINGS:
                raise ConfigurationError(f"{_env_name(field)} environment variable is required") from e
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    for field in REQUIRED_SETTINGS:
        if not getattr(settings, field).strip():
            raise ConfigurationError(f"{_env_name(field)} environment variable is required")

    return settings
