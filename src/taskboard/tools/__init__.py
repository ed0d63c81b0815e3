"""MCP tools for the task dashboard."""
