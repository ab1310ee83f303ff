# Slabby MCP Server
#
# Modular package structure:
# - config.py: Settings loaded from SLAB_* environment variables
# - logging.py: structlog configuration
# - utils.py: Error types and post ID extraction
# - models.py: Post and result models
# - delta.py: Conversion between Slab content deltas and plain text
# - transform.py: Normalization of raw post records
# - graphql.py: GraphQL documents and request executor
# - client.py: Knowledge-base client interface and Slab implementation
# - formatters.py: Markdown rendering of tool results
# - tools.py: MCP tool definitions and dispatcher
# - main.py: Entry point and server initialization
