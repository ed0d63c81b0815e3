"""FastMCP server exposing the task dashboard commands."""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from taskboard.logging import configure_logging
from taskboard.settings import settings
from taskboard.tools.task_tools import (
    add_task,
    backend_status,
    cycle_task_status,
    delete_task,
    list_tasks,
    refresh_tasks,
    task_stats,
    toggle_task,
    update_task,
)

logger = logging.getLogger(__name__)

mcp = FastMCP(settings.server_name)

mcp.tool(add_task)
mcp.tool(list_tasks)
mcp.tool(update_task)
mcp.tool(toggle_task)
mcp.tool(cycle_task_status)
mcp.tool(delete_task)
mcp.tool(task_stats)
mcp.tool(backend_status)
mcp.tool(refresh_tasks)


def main() -> None:
    """Run the FastMCP task dashboard server."""
    configure_logging(settings.log_level)
    logger.info(f"Starting {settings.server_name} server...")
    mcp.run()


if __name__ == "__main__":
    main()
