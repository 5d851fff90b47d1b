#!/usr/bin/env python3
"""ZeroSix MCP Server for cloud deployment (SSE transport).

Works with Railway, Render, or any platform that sets PORT env var.
"""

import logging
import os

# Configure FastMCP for cloud deployment BEFORE importing
# FastMCP uses FASTMCP_ prefix for settings
os.environ.setdefault("FASTMCP_HOST", "0.0.0.0")
if "PORT" in os.environ:
    os.environ["FASTMCP_PORT"] = os.environ["PORT"]

from zerosix_mcp.server import mcp


def main() -> None:
    """Run the ZeroSix MCP server with SSE transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="sse")


if __name__ == "__main__":
    main()
