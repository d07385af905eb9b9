# GDC Analytics SDK
# File: transports/stdio_server.py
# Version: v1

"""STDIO entrypoint for the GDC MCP server.

This is the script behind the ``gdc-mcp`` console command.

It:

- configures logging from ``GDC_LOG_LEVEL``,
- creates a FastMCP server,
- registers the SDK tools, and
- runs the built-in stdio transport.
"""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from ..config import GdcConfig
from ..tools import tasks


def main() -> None:
    """Synchronous entrypoint for console_scripts."""
    cfg = GdcConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    mcp = FastMCP("gdc-mcp")
    tasks.register_tools(mcp)

    # Let FastMCP handle stdio + event loop setup.
    mcp.run()


if __name__ == "__main__":
    main()
